"""Activity implementations for Temporal workflows."""

from dataclasses import asdict
from typing import Any, Dict

from temporalio import activity
from temporalio.exceptions import ApplicationError

from changeset_release.errors import (
    BranchExistsError,
    ManifestError,
    NothingToCommitError,
    ReleaseError,
)
from changeset_release.models import ReleaseRequest, RepoConfig
from changeset_release.release.coordinator import ReleaseCoordinator

# Retrying these cannot succeed without a change on the caller's side
NON_RETRYABLE_ERRORS = (BranchExistsError, ManifestError, NothingToCommitError)


class ReleaseActivities:
    """Activities for cutting releases."""

    @activity.defn
    def test_connectivity(self) -> str:
        """Test activity connectivity."""
        return "Activity connectivity test successful"

    @activity.defn
    def cut_release(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Run a complete release attempt and return the serialized result."""
        try:
            request = ReleaseRequest(
                repo_config=RepoConfig(repo=params["repo"], clone_url=params["clone_url"]),
                branch_name=params["branch_name"],
                release_type=params.get("release_type"),
                message=params.get("message"),
                fallback_message=params.get("fallback_message"),
                commit_message=params.get("commit_message"),
                use_ai=params.get("use_ai", False),
                commit_count=params.get("commit_count", 10),
            )
        except (KeyError, ValueError) as e:
            raise ApplicationError(
                f"Invalid release parameters: {e}", type="InvalidParams", non_retryable=True
            )

        activity.logger.info(
            f"Cutting release of {request.repo_config.repo} on {request.branch_name}"
        )

        try:
            result = ReleaseCoordinator().run(request)
        except ReleaseError as e:
            activity.logger.error(f"Release failed: {e}")
            raise ApplicationError(
                str(e),
                type=type(e).__name__,
                non_retryable=isinstance(e, NON_RETRYABLE_ERRORS),
            ) from e

        activity.logger.info(f"Released {result}")
        return asdict(result)
