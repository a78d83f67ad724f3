"""SQLAlchemy export of resolved schema models."""

from sharedtable.storage.metadata import build_metadata

__all__ = ["build_metadata"]
