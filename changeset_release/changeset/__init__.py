from .writer import ChangesetWriter, generate_changeset_id

__all__ = ["ChangesetWriter", "generate_changeset_id"]
