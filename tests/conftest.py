"""Pytest configuration and shared fixtures."""

import json
import subprocess
from pathlib import Path
from typing import Dict, List

import pytest

from changeset_release.models import ReleaseOptions, RepoConfig

GIT_IDENTITY_ENV = {
    "GIT_AUTHOR_NAME": "Release Bot",
    "GIT_AUTHOR_EMAIL": "release-bot@example.com",
    "GIT_COMMITTER_NAME": "Release Bot",
    "GIT_COMMITTER_EMAIL": "release-bot@example.com",
}


def git(*args: str, cwd: Path) -> str:
    """Run git for test setup and return stdout."""
    completed = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )
    return completed.stdout


@pytest.fixture
def run_git():
    """The git helper used to build and inspect test repositories."""
    return git


@pytest.fixture
def git_identity(monkeypatch: pytest.MonkeyPatch) -> Dict[str, str]:
    """Give git a committer identity without touching global config."""
    for key, value in GIT_IDENTITY_ENV.items():
        monkeypatch.setenv(key, value)
    return GIT_IDENTITY_ENV


@pytest.fixture
def source_commits() -> List[str]:
    """Commit summaries of the sample repository, oldest first."""
    return [
        "Initial commit",
        "Add widget parser",
        "Fix crash on empty input",
        "Document configuration",
        "Add streaming support",
        "Bump dependencies",
    ]


@pytest.fixture
def origin_repo(
    tmp_path: Path, git_identity: Dict[str, str], source_commits: List[str]
) -> Path:
    """A bare origin holding a small package with a .changeset directory."""
    source = tmp_path / "source"
    source.mkdir()
    git("-c", "init.defaultBranch=main", "init", cwd=source)

    for index, summary in enumerate(source_commits):
        if index == 0:
            (source / "package.json").write_text(
                json.dumps({"name": "demo-pkg", "version": "1.2.3"}, indent=2) + "\n"
            )
            (source / ".changeset").mkdir()
            (source / ".changeset" / "config.json").write_text("{}\n")
        (source / "history.txt").write_text(f"{summary}\n")
        git("add", "-A", cwd=source)
        git("commit", "-m", summary, cwd=source)

    origin = tmp_path / "origin.git"
    git("clone", "--bare", str(source), str(origin), cwd=tmp_path)
    return origin


@pytest.fixture
def origin_url(origin_repo: Path) -> str:
    # file:// so that --depth is honoured for local clones
    return origin_repo.as_uri()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    return tmp_path / "workspaces"


@pytest.fixture
def sample_repo_config() -> RepoConfig:
    return RepoConfig(repo="demo", clone_url="https://example.com/demo.git")


@pytest.fixture
def sample_options() -> ReleaseOptions:
    return ReleaseOptions(type="minor", message="Adds X.")
