"""Release runs against real git repositories on disk."""

import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union
from unittest.mock import Mock

import pytest

from changeset_release.config.settings import AIConfig, ReleaseSettings
from changeset_release.errors import BranchExistsError, GitCommandError, NothingToCommitError
from changeset_release.git import GitResult, GitRunner, RepositoryClient
from changeset_release.models import ReleaseOptions, ReleaseRequest, RepoConfig, parse_changeset
from changeset_release.release.coordinator import ReleaseCoordinator
from changeset_release.workspace import WorkspaceManager

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class RecordingRunner(GitRunner):
    """GitRunner that remembers every command it ran."""

    def __init__(self) -> None:
        super().__init__()
        self.commands: List[List[str]] = []

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        operation: Optional[str] = None,
        check: bool = True,
    ) -> GitResult:
        self.commands.append(list(args))
        return super().run(args, cwd=cwd, operation=operation, check=check)


class FailingPushRunner(GitRunner):
    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        operation: Optional[str] = None,
        check: bool = True,
    ) -> GitResult:
        if args[0] == "push":
            raise GitCommandError("push", "fatal: unable to access remote: network is unreachable")
        return super().run(args, cwd=cwd, operation=operation, check=check)


@pytest.fixture
def cloned(tmp_path: Path, origin_url: str) -> RepositoryClient:
    runner = RecordingRunner()
    client = RepositoryClient(tmp_path / "clone", runner=runner)
    client.clone(origin_url)
    return client


class TestRepositoryClientWithGit:
    def test_clone_is_shallow(self, cloned: RepositoryClient, run_git: Callable[..., str]) -> None:
        assert cloned.is_shallow() is True
        assert run_git("rev-list", "--count", "HEAD", cwd=cloned.path).strip() == "1"

    def test_recent_commits_deepen_shallow_clone(
        self, cloned: RepositoryClient, source_commits: List[str]
    ) -> None:
        commits = cloned.read_recent_commits(5)

        assert commits == list(reversed(source_commits))[:5]
        assert cloned.is_shallow() is False

    def test_second_read_does_not_deepen_again(
        self, cloned: RepositoryClient, source_commits: List[str]
    ) -> None:
        runner = cloned.runner
        assert isinstance(runner, RecordingRunner)

        first = cloned.read_recent_commits(5)
        second = cloned.read_recent_commits(5)

        assert first == second == list(reversed(source_commits))[:5]
        assert runner.commands.count(["fetch", "--unshallow"]) == 1

    def test_count_larger_than_history(
        self, cloned: RepositoryClient, source_commits: List[str]
    ) -> None:
        assert cloned.read_recent_commits(50) == list(reversed(source_commits))

    def test_reads_manifest(self, cloned: RepositoryClient) -> None:
        assert cloned.read_package_name() == "demo-pkg"
        assert cloned.read_package_version() == "1.2.3"

    def test_existing_branch_is_rejected(self, cloned: RepositoryClient) -> None:
        cloned.create_branch("release-demo")
        cloned.runner.run(["checkout", "-"], cwd=cloned.path)

        with pytest.raises(BranchExistsError):
            cloned.create_branch("release-demo")

    def test_commit_with_nothing_staged(
        self, cloned: RepositoryClient, git_identity: dict
    ) -> None:
        cloned.create_branch("release-demo")

        with pytest.raises(NothingToCommitError):
            cloned.commit("Release demo-pkg")

    def test_commit_with_only_untracked_files(
        self, cloned: RepositoryClient, git_identity: dict
    ) -> None:
        cloned.create_branch("release-demo")
        (cloned.path / "untracked.txt").write_text("not staged\n")

        with pytest.raises(NothingToCommitError):
            cloned.commit("Release demo-pkg")

    def test_only_changeset_directory_is_committed(
        self, cloned: RepositoryClient, run_git: Callable[..., str], git_identity: dict
    ) -> None:
        cloned.create_branch("release-demo")
        (cloned.path / "unrelated.txt").write_text("should stay untracked\n")

        record = cloned.write_and_stage_changeset(
            "demo-pkg", ReleaseOptions(type="patch", message="Fixes Y.")
        )
        cloned.commit("Release demo-pkg")

        changed = run_git("show", "--name-only", "--format=", "HEAD", cwd=cloned.path)
        assert changed.split() == [f".changeset/{record.filename}"]


class TestEndToEndRelease:
    @pytest.fixture
    def settings(self, workspace_root: Path) -> ReleaseSettings:
        return ReleaseSettings(temp_dir=workspace_root, ai=AIConfig())

    def test_release_pushes_single_changeset_commit(
        self,
        settings: ReleaseSettings,
        origin_repo: Path,
        origin_url: str,
        workspace_root: Path,
        run_git: Callable[..., str],
    ) -> None:
        request = ReleaseRequest(
            repo_config=RepoConfig(repo="demo", clone_url=origin_url),
            branch_name="release-demo",
            release_type="minor",
            message="Adds X.",
            commit_message="Release demo-pkg",
        )

        result = ReleaseCoordinator(settings=settings).run(request)

        branch_sha = run_git("rev-parse", "release-demo", cwd=origin_repo).strip()
        main_sha = run_git("rev-parse", "main", cwd=origin_repo).strip()
        assert branch_sha == result.commit_sha
        assert run_git("rev-list", "--count", "main..release-demo", cwd=origin_repo).strip() == "1"
        assert run_git("rev-parse", "release-demo^", cwd=origin_repo).strip() == main_sha
        assert run_git("log", "-1", "--format=%s", "release-demo", cwd=origin_repo).strip() == (
            "Release demo-pkg"
        )

        changed = run_git(
            "diff", "--name-only", "main", "release-demo", cwd=origin_repo
        ).split()
        assert changed == [f".changeset/{result.changeset_id}.md"]

        content = run_git(
            "show", f"release-demo:.changeset/{result.changeset_id}.md", cwd=origin_repo
        )
        assert content.splitlines()[1] == '"demo-pkg": minor'
        assert parse_changeset(content) == ("demo-pkg", "minor", "Adds X.")

        assert list(workspace_root.iterdir()) == []

    def test_release_with_ai(
        self,
        settings: ReleaseSettings,
        origin_repo: Path,
        origin_url: str,
        run_git: Callable[..., str],
        source_commits: List[str],
    ) -> None:
        generator = Mock()
        generator.suggest_release_type.return_value = "major"
        generator.describe_release.return_value = "Adds streaming support."

        request = ReleaseRequest(
            repo_config=RepoConfig(repo="demo", clone_url=origin_url),
            branch_name="release-ai",
            use_ai=True,
            commit_count=3,
        )

        result = ReleaseCoordinator(generator=generator, settings=settings).run(request)

        expected_commits = list(reversed(source_commits))[:3]
        generator.suggest_release_type.assert_called_once_with(expected_commits)
        generator.describe_release.assert_called_once_with("demo-pkg", "major", expected_commits)
        content = run_git(
            "show", f"release-ai:.changeset/{result.changeset_id}.md", cwd=origin_repo
        )
        assert content == '---\n"demo-pkg": major\n---\n\nAdds streaming support.\n'

    def test_push_failure_leaves_remote_untouched(
        self,
        settings: ReleaseSettings,
        origin_repo: Path,
        origin_url: str,
        workspace_root: Path,
        run_git: Callable[..., str],
    ) -> None:
        coordinator = ReleaseCoordinator(
            workspace_manager=WorkspaceManager(workspace_root),
            runner=FailingPushRunner(),
            settings=settings,
        )
        request = ReleaseRequest(
            repo_config=RepoConfig(repo="demo", clone_url=origin_url),
            branch_name="release-demo",
            release_type="patch",
            message="Fixes Y.",
        )

        with pytest.raises(GitCommandError, match="network is unreachable"):
            coordinator.run(request)

        assert run_git("branch", "--list", "release-demo", cwd=origin_repo).strip() == ""
        assert list(workspace_root.iterdir()) == []

    def test_clone_failure_cleans_up(
        self, settings: ReleaseSettings, tmp_path: Path, workspace_root: Path
    ) -> None:
        request = ReleaseRequest(
            repo_config=RepoConfig(repo="demo", clone_url=(tmp_path / "missing.git").as_uri()),
            branch_name="release-demo",
            release_type="patch",
            message="Fixes Y.",
        )

        with pytest.raises(GitCommandError) as exc_info:
            ReleaseCoordinator(settings=settings).run(request)

        assert exc_info.value.operation == "clone"
        assert list(workspace_root.iterdir()) == []

    def test_repeated_releases_use_separate_branches(
        self,
        settings: ReleaseSettings,
        origin_repo: Path,
        origin_url: str,
        run_git: Callable[..., str],
    ) -> None:
        coordinator = ReleaseCoordinator(settings=settings)
        results = [
            coordinator.run(
                ReleaseRequest(
                    repo_config=RepoConfig(repo="demo", clone_url=origin_url),
                    branch_name=branch,
                    release_type="patch",
                    message="Fixes Y.",
                )
            )
            for branch in ("release-one", "release-two")
        ]

        assert results[0].changeset_id != results[1].changeset_id
        branches = run_git("branch", "--format=%(refname:short)", cwd=origin_repo).split()
        assert {"release-one", "release-two"} <= set(branches)

    def test_existing_remote_branch_is_not_overwritten(
        self,
        settings: ReleaseSettings,
        origin_repo: Path,
        origin_url: str,
        workspace_root: Path,
        run_git: Callable[..., str],
    ) -> None:
        coordinator = ReleaseCoordinator(settings=settings)

        def request() -> ReleaseRequest:
            return ReleaseRequest(
                repo_config=RepoConfig(repo="demo", clone_url=origin_url),
                branch_name="release-demo",
                release_type="patch",
                message="Fixes Y.",
            )

        first = coordinator.run(request())

        with pytest.raises(BranchExistsError) as exc_info:
            coordinator.run(request())

        assert exc_info.value.operation == "push"
        assert run_git("rev-parse", "release-demo", cwd=origin_repo).strip() == first.commit_sha
        assert list(workspace_root.iterdir()) == []
