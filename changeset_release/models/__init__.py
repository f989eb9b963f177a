from .changeset import ChangesetRecord, parse_changeset
from .release import (
    RELEASE_TYPES,
    ReleaseOptions,
    ReleaseRequest,
    ReleaseResult,
    ReleaseType,
    is_release_type,
    normalize_release_type,
)
from .repo_config import RepoConfig

__all__ = [
    "ChangesetRecord",
    "parse_changeset",
    "RELEASE_TYPES",
    "ReleaseOptions",
    "ReleaseRequest",
    "ReleaseResult",
    "ReleaseType",
    "is_release_type",
    "normalize_release_type",
    "RepoConfig",
]
