"""Workflow definitions for Temporal."""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from .activities import ReleaseActivities
    from .shared import ReleaseWorkflowParams, ReleaseWorkflowResult


@workflow.defn
class ReleaseWorkflow:
    """Workflow that cuts a single changeset release."""

    @workflow.run
    async def run(self, params: ReleaseWorkflowParams) -> ReleaseWorkflowResult:
        """Execute the release workflow."""
        release_activities = ReleaseActivities()

        try:
            # Retries rerun the whole release in a fresh workspace
            result = await workflow.execute_activity(
                release_activities.cut_release,
                params.to_activity_payload(),
                start_to_close_timeout=timedelta(minutes=params.timeout_minutes),
                retry_policy=RetryPolicy(maximum_attempts=max(params.max_attempts, 1)),
            )

            workflow.logger.info(
                f"Released {result['package_name']} on {result['branch_name']}"
            )

            return ReleaseWorkflowResult(
                success=True,
                message=f"Release branch {result['branch_name']} pushed.",
                branch_name=result["branch_name"],
                package_name=result["package_name"],
                release_type=result["release_type"],
                changeset_id=result["changeset_id"],
                commit_sha=result["commit_sha"],
            )

        except Exception as e:
            cause = e.cause if isinstance(e, ActivityError) and e.cause else e
            workflow.logger.error(f"Workflow failed: {cause}")
            return ReleaseWorkflowResult(
                success=False,
                message=f"Workflow failed: {cause}",
            )
