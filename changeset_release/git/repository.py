import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..changeset import ChangesetWriter
from ..config.settings import DEFAULT_COMMIT_COUNT, MANIFEST_FILE
from ..errors import GitCommandError, ManifestError
from ..models import ChangesetRecord, ReleaseOptions
from .runner import GitRunner

COMPLETE_REPOSITORY_MARKER = "complete repository"


class RepositoryClient:
    """All version-control interactions for a single release workspace."""

    def __init__(
        self,
        path: Union[str, Path],
        runner: Optional[GitRunner] = None,
        writer: Optional[ChangesetWriter] = None,
    ):
        self.path = Path(path)
        self.runner = runner or GitRunner()
        self.writer = writer or ChangesetWriter()
        self.logger = logging.getLogger(__name__)

    def _git(self, *args: str, operation: Optional[str] = None) -> str:
        return self.runner.run(list(args), cwd=self.path, operation=operation).stdout

    def clone(self, clone_url: str, path: Optional[Union[str, Path]] = None) -> None:
        """Shallow-clone ``clone_url``; history is deepened later only if needed."""
        if path is not None:
            self.path = Path(path)

        self.logger.info(f"Cloning {clone_url} to {self.path}")
        self.runner.run(
            ["clone", "--depth", "1", clone_url, str(self.path)], operation="clone"
        )
        self.logger.debug(f"Cloned to {self.path}")

    def configure_identity(self, name: str, email: str) -> None:
        self._git("config", "user.name", name, operation="config")
        self._git("config", "user.email", email, operation="config")

    def create_branch(self, name: str) -> None:
        self.logger.info(f"Creating branch: {name}")
        self._git("checkout", "-b", name, operation="branch")
        self.logger.debug(f"Switched to branch: {name}")

    def write_and_stage_changeset(
        self, package_name: str, options: ReleaseOptions
    ) -> ChangesetRecord:
        record = self.writer.write(self.path, package_name, options)
        # Only the changeset directory is staged, never the whole tree
        self.logger.debug("Staging changeset...")
        self._git("add", "--", self.writer.changeset_dir, operation="add")
        return record

    def commit(self, message: str) -> None:
        self.logger.info(f"Committing: {message}")
        self._git("commit", "-m", message, operation="commit")

    def push(self, branch_name: str) -> None:
        self.logger.info(f"Pushing branch {branch_name} to origin...")
        self._git("push", "origin", branch_name, operation="push")
        self.logger.info("Push complete")

    def current_commit_sha(self) -> str:
        return self._git("rev-parse", "HEAD", operation="rev-parse").strip()

    def is_shallow(self) -> bool:
        output = self._git("rev-parse", "--is-shallow-repository", operation="rev-parse")
        return output.strip() == "true"

    def deepen(self) -> None:
        """Fetch full history; a clone that is already complete counts as success."""
        if not self.is_shallow():
            return

        self.logger.debug("Fetching full history...")
        try:
            self._git("fetch", "--unshallow", operation="fetch")
        except GitCommandError as e:
            if COMPLETE_REPOSITORY_MARKER not in e.message.lower():
                raise
            self.logger.debug("Repository already has full history")

    def read_recent_commits(self, count: int = DEFAULT_COMMIT_COUNT) -> List[str]:
        """Return up to ``count`` commit summaries, most recent first."""
        if count <= 0:
            return []

        self.logger.info(f"Fetching last {count} commits...")
        self.deepen()
        output = self._git("log", "-n", str(count), "--format=%s", operation="log")
        return [line for line in output.splitlines() if line.strip()][:count]

    def read_manifest(self) -> Dict[str, Any]:
        manifest_path = self.path / MANIFEST_FILE
        if not manifest_path.exists():
            raise ManifestError(f"Package manifest not found: {manifest_path}")

        try:
            with open(manifest_path, "r", encoding="utf-8") as f:
                manifest = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in {manifest_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ManifestError(f"Package manifest is not valid UTF-8: {manifest_path}") from e
        except OSError as e:
            raise ManifestError(f"Cannot read package manifest {manifest_path}: {e}") from e

        if not isinstance(manifest, dict):
            raise ManifestError(f"Package manifest must be a JSON object: {manifest_path}")
        return manifest

    def _read_manifest_field(self, field: str) -> str:
        value = self.read_manifest().get(field)
        if not isinstance(value, str) or not value:
            raise ManifestError(f"Package manifest is missing a '{field}' field")
        return value

    def read_package_name(self) -> str:
        return self._read_manifest_field("name")

    def read_package_version(self) -> str:
        return self._read_manifest_field("version")

    @property
    def changeset_dir(self) -> Path:
        return self.path / self.writer.changeset_dir
