"""Configuration: maximum identifier length of the target database."""

from __future__ import annotations

import os

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, NoSuchModuleError

from sharedtable.exceptions import ConfigurationError, InvalidIdentifierLengthError

MAX_IDENTIFIER_LENGTH_ENV = "SHAREDTABLE_MAX_IDENTIFIER_LENGTH"
DIALECT_ENV = "SHAREDTABLE_DIALECT"
DEFAULT_MAX_IDENTIFIER_LENGTH = 128


def dialect_max_identifier_length(dialect: str) -> int:
    """Maximum identifier length SQLAlchemy reports for a dialect.

    Args:
        dialect: Dialect name (``postgresql``, ``mysql+pymysql``) or database URL

    Raises:
        ConfigurationError: If SQLAlchemy does not know the dialect
    """
    url = dialect if "://" in dialect else f"{dialect}://"
    try:
        dialect_cls = make_url(url).get_dialect()
    except (ArgumentError, NoSuchModuleError) as e:
        raise ConfigurationError(
            f"Unknown SQLAlchemy dialect '{dialect}'. "
            "Use a dialect name such as postgresql, mysql, mssql, oracle or sqlite.",
            {"dialect": dialect},
        ) from e
    return int(dialect_cls.max_identifier_length)


def get_max_identifier_length(
    max_length: int | None = None,
    dialect: str | None = None,
    document_value: int | None = None,
) -> int:
    """Resolve the maximum identifier length.

    Priority:
    1. Explicit value
    2. SHAREDTABLE_MAX_IDENTIFIER_LENGTH environment variable
    3. Value stored in the model document
    4. SQLAlchemy dialect (argument or SHAREDTABLE_DIALECT environment variable)
    5. Default: 128
    """
    if max_length is not None:
        return _positive(max_length)
    if env_value := os.getenv(MAX_IDENTIFIER_LENGTH_ENV):
        try:
            return _positive(int(env_value))
        except ValueError as e:
            raise InvalidIdentifierLengthError(env_value) from e
    if document_value is not None:
        return _positive(document_value)
    if dialect_name := dialect or os.getenv(DIALECT_ENV):
        return dialect_max_identifier_length(dialect_name)
    return DEFAULT_MAX_IDENTIFIER_LENGTH


def _positive(value: int) -> int:
    if value < 1:
        raise InvalidIdentifierLengthError(value)
    return value
