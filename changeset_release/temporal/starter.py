"""Starter script for executing release workflows on Temporal."""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import List, Optional

from temporalio.client import Client

from changeset_release.main import resolve_repo_config
from changeset_release.models import RELEASE_TYPES
from changeset_release.temporal.config import (
    TEMPORAL_TASK_QUEUE,
    get_temporal_client,
    validate_configuration,
)
from changeset_release.temporal.shared import ReleaseWorkflowParams, ReleaseWorkflowResult
from changeset_release.temporal.workflows import ReleaseWorkflow

logger = logging.getLogger(__name__)


class ReleaseStarter:
    """Starts release workflows and waits for their results."""

    def __init__(self) -> None:
        self.client: Optional[Client] = None

    async def connect(self) -> None:
        """Connect to Temporal server using configuration system."""
        try:
            validate_configuration()
            self.client = await get_temporal_client()
        except Exception as e:
            logger.error(f"❌ Failed to connect to Temporal: {e}")
            raise

    async def run_workflow(
        self, params: ReleaseWorkflowParams, workflow_id: Optional[str] = None
    ) -> ReleaseWorkflowResult:
        """Execute the release workflow."""
        if not self.client:
            await self.connect()
        assert self.client is not None  # Type checker hint

        if not workflow_id:
            workflow_id = (
                f"release-{params.repo}-{datetime.now().strftime('%Y%m%d-%H%M%S')}"
            )

        try:
            logger.info(f"🚀 Starting workflow: {workflow_id}")
            logger.info(f"📍 Repository: {params.clone_url}")

            handle = await self.client.start_workflow(
                ReleaseWorkflow.run,
                params,
                id=workflow_id,
                task_queue=TEMPORAL_TASK_QUEUE,
            )

            logger.info("⏳ Workflow started, waiting for completion...")
            result = await handle.result()

            logger.info(f"📊 Result: {result}")
            return result

        except Exception as e:
            logger.error(f"❌ Workflow execution failed: {e}")
            raise


def build_params(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Execute the release Temporal workflow")
    parser.add_argument("--repo", "-r", required=True, help="Repository identifier")
    parser.add_argument("--clone-url", help="Git URL to clone")
    parser.add_argument("--config", "-c", help="Path to repository configuration YAML file")
    parser.add_argument("--branch", "-b", help="Release branch name")
    parser.add_argument("--type", "-t", choices=RELEASE_TYPES, help="Release type")
    parser.add_argument("--message", "-m", help="Changeset message")
    parser.add_argument("--fallback-message", help="Message to use if AI fails")
    parser.add_argument("--ai", action="store_true", help="Use AI assistance")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=1,
        help="Times to attempt the whole release before giving up",
    )
    parser.add_argument("--workflow-id", help="Custom workflow ID")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> None:
    """Main starter entry point."""
    args = build_params(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        repo_config = resolve_repo_config(args.repo, args.clone_url, args.config)
        params = ReleaseWorkflowParams(
            repo=repo_config.repo,
            clone_url=repo_config.clone_url,
            branch_name=args.branch,
            release_type=args.type,
            message=args.message,
            fallback_message=args.fallback_message,
            use_ai=args.ai,
            max_attempts=args.max_attempts,
        )
        result = await ReleaseStarter().run_workflow(params, args.workflow_id)
    except Exception as e:
        logger.error(f"❌ Starter failed: {e}")
        sys.exit(1)

    if result.success:
        print("✅ Workflow completed successfully!")
        print(f"🌿 Branch: {result.branch_name}")
        print(f"📝 Changeset: {result.changeset_id}")
    else:
        print(f"❌ Workflow failed: {result.message}")
        sys.exit(1)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
