from .manager import WorkspaceManager

__all__ = ["WorkspaceManager"]
