import logging
import secrets
from pathlib import Path
from typing import Union

from ..config.settings import CHANGESET_DIR
from ..errors import WorkspaceError
from ..models import ChangesetRecord, ReleaseOptions

logger = logging.getLogger(__name__)


def generate_changeset_id() -> str:
    return f"release-{secrets.token_hex(4)}"


class ChangesetWriter:
    """Writes one changeset file into a workspace's changeset directory."""

    def __init__(self, changeset_dir: str = CHANGESET_DIR):
        self.changeset_dir = changeset_dir

    def write(
        self,
        workspace_path: Union[str, Path],
        package_name: str,
        options: ReleaseOptions,
    ) -> ChangesetRecord:
        """
        Write a new changeset for ``package_name`` and return its record.

        The file is opened in exclusive-create mode, so an id collision
        raises instead of replacing someone else's changeset.
        """
        record = ChangesetRecord(
            id=generate_changeset_id(),
            package_name=package_name,
            release_type=options.type,
            message=options.message,
        )

        target_dir = Path(workspace_path) / self.changeset_dir
        changeset_path = target_dir / record.filename

        logger.debug(f"Writing changeset to {changeset_path}")
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            with open(changeset_path, "x", encoding="utf-8", newline="\n") as f:
                f.write(record.render())
        except OSError as e:
            raise WorkspaceError(f"Failed to write changeset {changeset_path}: {e}") from e

        return record
