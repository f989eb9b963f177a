from .repository import RepositoryClient
from .runner import GitResult, GitRunner

__all__ = ["GitResult", "GitRunner", "RepositoryClient"]
