"""Error types raised while cutting a release."""

from typing import List, Optional


class ReleaseError(Exception):
    """Base class for failures that abort a release run."""


class WorkspaceError(ReleaseError):
    """Raised when the temporary workspace cannot be created or removed."""


class ManifestError(ReleaseError):
    """Raised when the package manifest is missing or malformed."""


class GitCommandError(ReleaseError):
    """Represents a failed git invocation."""

    def __init__(
        self,
        operation: str,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.message = message
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        return f"git {self.operation} failed: {self.message}"


class NothingToCommitError(GitCommandError):
    """Raised when a commit is attempted with an empty index."""


class BranchExistsError(GitCommandError):
    """Raised when the release branch already exists locally or on the remote."""
