"""Error taxonomy for workflow distribution."""

from __future__ import annotations


class MobydickError(RuntimeError):
    """Base error for this package."""


class ConfigurationError(MobydickError):
    """Invalid settings or CLI input, detected before any network activity."""


class WorkflowFileError(ConfigurationError):
    """Workflow template could not be read or rendered."""


class GitHubApiError(MobydickError):
    """Remote API call failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"HTTP {self.status_code}: {self.message}"


class DistributionError(MobydickError):
    """Distribution run aborted before any job was submitted."""


class CreateFileError(MobydickError):
    """Committing the workflow file into one repository failed."""

    def __init__(self, repository: str, cause: Exception) -> None:
        super().__init__(f"failed to create file: {cause}")
        self.repository = repository


class JobCancelledError(MobydickError):
    """Job observed a cancelled execution context and did not run."""
