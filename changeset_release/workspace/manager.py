import logging
import secrets
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from ..config.settings import get_temp_dir
from ..errors import WorkspaceError

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """
    Allocates and removes the per-attempt directories releases are cut in.

    Every allocation combines the repository identifier with 32 random bits,
    so concurrent attempts against the same repository never share a path and
    no registry of in-flight workspaces is needed.
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root) if root is not None else get_temp_dir()

    def allocate(self, repo_id: str) -> Path:
        """
        Compute a fresh workspace path for ``repo_id``.

        The directory itself is left for ``git clone`` to create; only the
        root is created here.

        Raises:
            WorkspaceError: If the root cannot be created or a stale
                directory at the computed path cannot be removed
        """
        path = self.root / f"{repo_id}-{secrets.token_hex(4)}"

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if path.exists():
                logger.debug(f"Removing stale workspace {path}")
                shutil.rmtree(path)
        except OSError as e:
            raise WorkspaceError(f"Failed to allocate workspace {path}: {e}") from e

        logger.debug(f"Allocated workspace {path}")
        return path

    def release(self, path: Optional[Union[str, Path]]) -> None:
        """Remove the workspace at ``path``; does nothing if it is already gone."""
        if path is None:
            return

        workspace_path = Path(path)
        if not workspace_path.exists():
            return

        logger.debug(f"Cleaning up {workspace_path}")
        try:
            shutil.rmtree(workspace_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise WorkspaceError(f"Failed to remove workspace {workspace_path}: {e}") from e

    @contextmanager
    def workspace(self, repo_id: str) -> Iterator[Path]:
        """Allocate a workspace and release it when the block exits."""
        path = self.allocate(repo_id)
        try:
            yield path
        finally:
            self.release(path)
