from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from .repo_config import RepoConfig

ReleaseType = Literal["patch", "minor", "major"]

RELEASE_TYPES: Tuple[str, ...] = ("patch", "minor", "major")


def is_release_type(value: object) -> bool:
    return isinstance(value, str) and value in RELEASE_TYPES


def normalize_release_type(value: Optional[str]) -> Optional[str]:
    """Return the canonical release type for ``value`` or None if it isn't one."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    return candidate if candidate in RELEASE_TYPES else None


@dataclass(frozen=True)
class ReleaseOptions:
    type: ReleaseType
    message: str

    def __post_init__(self) -> None:
        if not is_release_type(self.type):
            raise ValueError(
                f"Invalid release type '{self.type}', expected one of {', '.join(RELEASE_TYPES)}"
            )


@dataclass
class ReleaseRequest:
    """
    Everything a caller supplies to cut one release.

    ``release_type`` and ``message`` may be left out when ``use_ai`` is set;
    the description generator fills them in from recent commit history.
    """

    repo_config: RepoConfig
    branch_name: str
    release_type: Optional[str] = None
    message: Optional[str] = None
    fallback_message: Optional[str] = None
    commit_message: Optional[str] = None
    use_ai: bool = False
    commit_count: int = 10

    def __post_init__(self) -> None:
        if not self.branch_name:
            raise ValueError("Branch name is required")
        if self.release_type is not None and not is_release_type(self.release_type):
            raise ValueError(
                f"Invalid release type '{self.release_type}', expected one of {', '.join(RELEASE_TYPES)}"
            )


@dataclass
class ReleaseResult:
    repo: str
    branch_name: str
    package_name: str
    package_version: str
    release_type: str
    message: str
    changeset_id: str
    commit_sha: str
    ai_generated_message: bool = False
    ai_suggested_type: bool = False

    def __str__(self) -> str:
        return (
            f"{self.package_name}@{self.package_version} ({self.release_type}) "
            f"on {self.branch_name} [{self.commit_sha[:7]}]"
        )
