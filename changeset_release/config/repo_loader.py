"""
Repository registry loader.

Reads a YAML file listing the repositories releases can be cut for, so callers
can refer to a repository by its identifier instead of its clone URL.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..models import RepoConfig


class RepoConfigLoader:
    """Loads and validates repository configurations from a YAML file."""

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

    def _read(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Repository configuration not found: {self.config_path}")

        with open(self.config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f"Repository configuration must be a mapping: {self.config_path}")
        return config_data

    def load_all(self) -> List[RepoConfig]:
        """Load every configured repository."""
        repos_data = self._read().get("repositories", [])
        if not isinstance(repos_data, list):
            raise ValueError("'repositories' must be a list")

        repos = []
        for repo_data in repos_data:
            for field in ("repo", "clone_url"):
                if not isinstance(repo_data, dict) or field not in repo_data:
                    raise ValueError(f"Missing required field '{field}' in repository configuration")
            repos.append(RepoConfig(repo=str(repo_data["repo"]), clone_url=str(repo_data["clone_url"])))

        return repos

    def list_repos(self) -> List[str]:
        return sorted(repo.repo for repo in self.load_all())

    def load(self, repo: str) -> RepoConfig:
        """Load a specific repository configuration by identifier."""
        for repo_config in self.load_all():
            if repo_config.repo == repo:
                return repo_config
        raise KeyError(f"Repository '{repo}' not found in {self.config_path}")
