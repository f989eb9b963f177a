import json
from dataclasses import dataclass
from typing import Tuple

import yaml

from .release import is_release_type

FRONT_MATTER_MARKER = "---"


@dataclass(frozen=True)
class ChangesetRecord:
    """A single changeset file as consumed by downstream release tooling."""

    id: str
    package_name: str
    release_type: str
    message: str

    @property
    def filename(self) -> str:
        return f"{self.id}.md"

    def render(self) -> str:
        # JSON string escaping is a valid YAML double-quoted scalar
        return (
            f"{FRONT_MATTER_MARKER}\n"
            f"{json.dumps(self.package_name, ensure_ascii=False)}: {self.release_type}\n"
            f"{FRONT_MATTER_MARKER}\n"
            f"\n"
            f"{self.message}\n"
        )

    @classmethod
    def parse(cls, changeset_id: str, text: str) -> "ChangesetRecord":
        package_name, release_type, message = parse_changeset(text)
        return cls(
            id=changeset_id,
            package_name=package_name,
            release_type=release_type,
            message=message,
        )


def parse_changeset(text: str) -> Tuple[str, str, str]:
    """
    Parse changeset file content into (package name, release type, message).

    Raises:
        ValueError: If the text does not follow the changeset layout
    """
    opening = f"{FRONT_MATTER_MARKER}\n"
    if not text.startswith(opening):
        raise ValueError("Changeset must start with a front matter marker")

    closing = f"\n{FRONT_MATTER_MARKER}\n\n"
    end = text.find(closing, len(opening))
    if end == -1:
        raise ValueError("Changeset front matter is not terminated")

    front_matter = yaml.safe_load(text[len(opening) : end])
    if not isinstance(front_matter, dict) or len(front_matter) != 1:
        raise ValueError("Changeset front matter must contain exactly one package entry")

    package_name, release_type = next(iter(front_matter.items()))
    if not isinstance(package_name, str) or not is_release_type(release_type):
        raise ValueError(f"Invalid changeset entry: {package_name!r}: {release_type!r}")

    body = text[end + len(closing) :]
    if not body.endswith("\n"):
        raise ValueError("Changeset must end with a trailing newline")

    return package_name, release_type, body[:-1]
