from dataclasses import dataclass


@dataclass(frozen=True)
class RepoConfig:
    """Identifies the remote repository a release run targets."""

    repo: str
    clone_url: str

    def __post_init__(self) -> None:
        if not self.repo or not self.repo.strip():
            raise ValueError("Repository identifier must not be empty")
        # Used as a single directory name under the workspace root
        if "/" in self.repo or "\\" in self.repo or self.repo in (".", ".."):
            raise ValueError(
                f"Repository identifier must be a plain name, not a path: '{self.repo}'"
            )
        if not self.clone_url:
            raise ValueError(f"Clone URL is required for repository '{self.repo}'")
