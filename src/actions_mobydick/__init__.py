"""Distribute a GitHub Actions workflow file to every repository of an organisation."""

__version__ = "0.3.0"
