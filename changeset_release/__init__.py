"""Cut changeset-based releases for remote package repositories."""

__version__ = "0.1.0"
