"""Runtime configuration for workflow distribution."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlparse

from actions_mobydick import __version__
from actions_mobydick.errors import ConfigurationError
from actions_mobydick.workflow.file import DEFAULT_WORKFLOWS_DIR

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_COMMIT_MESSAGE = "GitHub Actions workflow for Mobydick"
MAX_PER_PAGE = 100
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class GitHubSettings:
    """GitHub REST API client settings."""

    api_url: str = DEFAULT_API_URL
    per_page: int = MAX_PER_PAGE
    request_timeout_seconds: float = 30.0
    user_agent: str = f"actions-mobydick/{__version__}"


@dataclass(slots=True)
class DistributionSettings:
    """How the rendered workflow is committed."""

    commit_message: str = DEFAULT_COMMIT_MESSAGE
    workflows_dir: str = DEFAULT_WORKFLOWS_DIR


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    github: GitHubSettings = field(default_factory=GitHubSettings)
    distribution: DistributionSettings = field(default_factory=DistributionSettings)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults suitable for github.com."""

        return cls(
            github=GitHubSettings(
                api_url=os.getenv("MOBYDICK_API_URL", DEFAULT_API_URL).rstrip("/"),
                per_page=_env_int("MOBYDICK_PER_PAGE", MAX_PER_PAGE),
                request_timeout_seconds=_env_float("MOBYDICK_REQUEST_TIMEOUT_SECONDS", 30.0),
                user_agent=os.getenv("MOBYDICK_USER_AGENT", f"actions-mobydick/{__version__}"),
            ),
            distribution=DistributionSettings(
                commit_message=os.getenv("MOBYDICK_COMMIT_MESSAGE", DEFAULT_COMMIT_MESSAGE),
                workflows_dir=os.getenv("MOBYDICK_WORKFLOWS_DIR", DEFAULT_WORKFLOWS_DIR),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error on values the GitHub API would reject."""

        parsed = urlparse(self.github.api_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ConfigurationError(
                "Invalid MOBYDICK_API_URL: "
                f"{self.github.api_url!r}. Expected an absolute http:// or https:// URL.",
            )
        if not 1 <= self.github.per_page <= MAX_PER_PAGE:
            raise ConfigurationError(f"MOBYDICK_PER_PAGE must be between 1 and {MAX_PER_PAGE}.")
        if self.github.request_timeout_seconds <= 0:
            raise ConfigurationError("MOBYDICK_REQUEST_TIMEOUT_SECONDS must be > 0.")
        if not self.distribution.commit_message.strip():
            raise ConfigurationError("MOBYDICK_COMMIT_MESSAGE must not be empty.")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as error:
        raise ConfigurationError(f"Invalid integer value for {name}: {raw!r}") from error


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as error:
        raise ConfigurationError(f"Invalid number value for {name}: {raw!r}") from error
