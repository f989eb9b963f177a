"""Shared data models for Temporal workflows."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ReleaseWorkflowParams:
    """Parameters for the release workflow."""
    repo: str
    clone_url: str
    branch_name: Optional[str] = None
    release_type: Optional[str] = None
    message: Optional[str] = None
    fallback_message: Optional[str] = None
    commit_message: Optional[str] = None
    use_ai: bool = False
    commit_count: int = 10
    max_attempts: int = 1
    timeout_minutes: int = 10

    def to_activity_payload(self) -> dict:
        return {
            "repo": self.repo,
            "clone_url": self.clone_url,
            "branch_name": self.branch_name or f"release-{self.repo}",
            "release_type": self.release_type,
            "message": self.message,
            "fallback_message": self.fallback_message,
            "commit_message": self.commit_message,
            "use_ai": self.use_ai,
            "commit_count": self.commit_count,
        }


@dataclass
class ReleaseWorkflowResult:
    """Result of a workflow execution."""
    success: bool
    message: str
    branch_name: Optional[str] = None
    package_name: Optional[str] = None
    release_type: Optional[str] = None
    changeset_id: Optional[str] = None
    commit_sha: Optional[str] = None
