import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_TEMP_DIR_NAME = "changeset-release"
DEFAULT_AI_MODEL = "claude-sonnet-4-20250514"
DEFAULT_COMMIT_COUNT = 10
CHANGESET_DIR = ".changeset"
MANIFEST_FILE = "package.json"


def get_temp_dir(override_dir: Optional[str] = None) -> Path:
    """Get workspace root with fallback chain: override -> env -> system temp dir."""
    configured = override_dir or os.getenv("CHANGESET_RELEASE_TEMP_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path(tempfile.gettempdir()) / DEFAULT_TEMP_DIR_NAME


def get_clone_url(override_url: Optional[str] = None) -> Optional[str]:
    """Get clone URL with fallback chain: override -> env."""
    return override_url or os.getenv("GIT_REPOSITORY_URL")


@dataclass
class AIConfig:
    """Configuration for AI-assisted changeset generation."""

    enabled: bool = False
    model: str = DEFAULT_AI_MODEL
    max_tokens: int = 300
    api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AIConfig":
        """Create configuration from environment variables."""
        return cls(
            enabled=os.getenv("RELEASE_AI_ENABLED", "false").lower() == "true",
            model=os.getenv("RELEASE_AI_MODEL", DEFAULT_AI_MODEL),
            max_tokens=int(os.getenv("RELEASE_AI_MAX_TOKENS", "300")),
            api_key=os.getenv("ANTHROPIC_API_KEY"),
        )


@dataclass
class GitIdentity:
    """Committer identity applied to each fresh clone."""

    name: str
    email: str

    @classmethod
    def from_env(cls) -> Optional["GitIdentity"]:
        name = os.getenv("RELEASE_GIT_USER_NAME")
        email = os.getenv("RELEASE_GIT_USER_EMAIL")
        if not name or not email:
            return None
        return cls(name=name, email=email)


@dataclass
class ReleaseSettings:
    temp_dir: Path
    ai: AIConfig
    identity: Optional[GitIdentity] = None

    @classmethod
    def from_env(cls, temp_dir: Optional[str] = None) -> "ReleaseSettings":
        return cls(
            temp_dir=get_temp_dir(temp_dir),
            ai=AIConfig.from_env(),
            identity=GitIdentity.from_env(),
        )
