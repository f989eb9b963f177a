import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..config.settings import ReleaseSettings
from ..errors import ReleaseError, WorkspaceError
from ..git import GitRunner, RepositoryClient
from ..models import ReleaseOptions, ReleaseRequest, ReleaseResult
from ..utils.description_generator import (
    AnthropicCompletionClient,
    DescriptionGenerator,
)
from ..workspace import WorkspaceManager

DEFAULT_RELEASE_TYPE = "patch"


class ReleaseCoordinator:
    """
    Runs one release attempt end to end.

    Steps execute strictly in order: clone, branch, optional AI assistance,
    changeset, commit, push. The workspace is removed afterwards whether the
    run succeeded or not. Nothing is retried here; callers that want retries
    rerun the whole release.
    """

    def __init__(
        self,
        workspace_manager: Optional[WorkspaceManager] = None,
        runner: Optional[GitRunner] = None,
        generator: Optional[DescriptionGenerator] = None,
        settings: Optional[ReleaseSettings] = None,
    ):
        self.settings = settings or ReleaseSettings.from_env()
        self.workspace_manager = workspace_manager or WorkspaceManager(
            self.settings.temp_dir
        )
        self.runner = runner or GitRunner()
        self._generator = generator
        self.logger = logging.getLogger(__name__)

    @property
    def generator(self) -> DescriptionGenerator:
        if self._generator is None:
            ai = self.settings.ai
            self._generator = DescriptionGenerator(
                client=AnthropicCompletionClient(
                    api_key=ai.api_key, max_tokens=ai.max_tokens
                ),
                model=ai.model,
            )
        return self._generator

    def run(self, request: ReleaseRequest) -> ReleaseResult:
        """
        Cut a release as described by ``request``.

        Raises:
            ReleaseError: Workspace, git or manifest failures, unmodified
            Exception: Completion errors from the description generator when
                no fallback message was supplied
        """
        if request.message is None and not request.use_ai:
            raise ReleaseError(
                "A changeset message is required when AI assistance is disabled"
            )

        repo_config = request.repo_config
        path = self.workspace_manager.allocate(repo_config.repo)

        try:
            result = self._cut_release(request, path)
        except BaseException:
            self._release_after_failure(path)
            raise

        self.workspace_manager.release(path)
        return result

    def _release_after_failure(self, path: Path) -> None:
        try:
            self.workspace_manager.release(path)
        except WorkspaceError as e:
            # The original failure is the one surfaced to the caller
            self.logger.error(f"Workspace cleanup failed: {e}")

    def _cut_release(self, request: ReleaseRequest, path: Path) -> ReleaseResult:
        repo_config = request.repo_config
        client = RepositoryClient(path, runner=self.runner)

        client.clone(repo_config.clone_url)
        if self.settings.identity is not None:
            client.configure_identity(
                self.settings.identity.name, self.settings.identity.email
            )
        client.create_branch(request.branch_name)

        package_name = client.read_package_name()
        package_version = client.read_package_version()
        self.logger.info(f"Preparing release for {package_name}@{package_version}")

        recent_commits: List[str] = []
        if request.use_ai and (request.release_type is None or request.message is None):
            recent_commits = client.read_recent_commits(request.commit_count)

        release_type, ai_type = self._resolve_release_type(request, recent_commits)
        message, ai_message = self._resolve_message(
            request, package_name, release_type, recent_commits
        )

        options = ReleaseOptions(type=release_type, message=message)  # type: ignore[arg-type]
        record = client.write_and_stage_changeset(package_name, options)
        client.commit(request.commit_message or f"Release {package_name}")
        commit_sha = client.current_commit_sha()
        client.push(request.branch_name)

        return ReleaseResult(
            repo=repo_config.repo,
            branch_name=request.branch_name,
            package_name=package_name,
            package_version=package_version,
            release_type=release_type,
            message=message,
            changeset_id=record.id,
            commit_sha=commit_sha,
            ai_generated_message=ai_message,
            ai_suggested_type=ai_type,
        )

    def _resolve_release_type(
        self, request: ReleaseRequest, recent_commits: List[str]
    ) -> Tuple[str, bool]:
        if request.release_type is not None:
            return request.release_type, False
        if not request.use_ai:
            return DEFAULT_RELEASE_TYPE, False

        suggestion = self.generator.suggest_release_type(recent_commits)
        self.logger.info(f"Suggested release type: {suggestion}")
        return suggestion, True

    def _resolve_message(
        self,
        request: ReleaseRequest,
        package_name: str,
        release_type: str,
        recent_commits: List[str],
    ) -> Tuple[str, bool]:
        if request.message is not None:
            return request.message, False

        try:
            message = self.generator.describe_release(
                package_name, release_type, recent_commits
            )
        except Exception:
            if request.fallback_message is None:
                raise
            self.logger.warning("Using fallback changeset message")
            return request.fallback_message, False

        return message, True
