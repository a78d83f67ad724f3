"""Custom exceptions for sharedtable.

Name resolution itself never fails on a collision it cannot fix: clashes
between two pinned names are reported, not raised, unless strict mode is on.
The exceptions below cover bad configuration, bad input documents and
attempts to rewrite pinned names.
"""

from __future__ import annotations

from typing import Any


class SharedTableError(Exception):
    """Base exception for all sharedtable errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class InvalidIdentifierLengthError(SharedTableError):
    """Maximum identifier length is not a positive integer."""

    def __init__(self, max_length: Any) -> None:
        message = (
            f"Invalid maximum identifier length '{max_length}'. "
            "Expected a positive integer (e.g. 63 for PostgreSQL, 128 for SQL Server)."
        )
        super().__init__(message, {"max_length": max_length})
        self.max_length = max_length


class PinnedNameError(SharedTableError):
    """Attempted to rewrite a name that was explicitly configured."""

    def __init__(self, kind: str, current: str, requested: str) -> None:
        message = (
            f"Cannot rename {kind} '{current}' to '{requested}': "
            "the name was set explicitly and is pinned."
        )
        super().__init__(message, {"kind": kind, "current": current, "requested": requested})
        self.kind = kind
        self.current = current
        self.requested = requested


class EntityTypeNotFoundError(SharedTableError):
    """Entity type does not exist in the model."""

    def __init__(self, entity_name: str, available_entities: list[str] | None = None) -> None:
        available = available_entities or []
        if available:
            message = (
                f"Entity type '{entity_name}' not found. "
                f"Available entity types: {', '.join(available)}"
            )
        else:
            message = f"Entity type '{entity_name}' not found. The model is empty."

        super().__init__(message, {"entity_name": entity_name, "available_entities": available})
        self.entity_name = entity_name
        self.available_entities = available


class ModelLoadError(SharedTableError):
    """A model document could not be turned into a schema model."""

    pass


class UnresolvedNameCollisionError(SharedTableError):
    """Strict mode: some collisions could not be resolved because both names are pinned."""

    def __init__(self, collisions: list[Any]) -> None:
        summary = ", ".join(f"{c.kind} '{c.name}' on {c.table}" for c in collisions)
        message = (
            f"{len(collisions)} name collision(s) left unresolved: {summary}. "
            "Rename one of the explicitly configured names or drop its explicit configuration."
        )
        super().__init__(message, {"collisions": [c.model_dump() for c in collisions]})
        self.collisions = collisions


class ConfigurationError(SharedTableError):
    """Settings could not be resolved (e.g. unknown SQLAlchemy dialect)."""

    pass
