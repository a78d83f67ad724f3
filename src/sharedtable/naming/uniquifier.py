"""Length-bounded, collision-free identifiers."""

from __future__ import annotations

from collections.abc import Callable, Container, Hashable

from sharedtable.exceptions import InvalidIdentifierLengthError


def check_max_length(max_length: int) -> None:
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 1:
        raise InvalidIdentifierLengthError(max_length)


def truncate(name: str, max_length: int, suffix: int | None = None) -> str:
    """Clip a name so that it, plus an optional numeric suffix, fits max_length.

    Only the base part is shortened; the suffix is always kept whole.

    Examples:
        truncate("CustomerOrders", 8) → "Customer"
        truncate("CustomerOrders", 8, 12) → "Custom12"
    """
    check_max_length(max_length)
    suffix_text = "" if suffix is None else str(suffix)
    if len(suffix_text) > max_length:
        raise InvalidIdentifierLengthError(max_length)
    return name[: max_length - len(suffix_text)] + suffix_text


def uniquify(
    candidate: str,
    used: Container[Hashable],
    max_length: int,
    key: Callable[[str], Hashable] | None = None,
) -> str:
    """Derive a name not present in ``used`` from a candidate.

    The candidate, trimmed to ``max_length``, is returned when free. Otherwise
    suffixes 1, 2, ... are appended to the trimmed base until a free name is
    found.

    Args:
        candidate: Preferred name
        used: Names (or keys, see ``key``) already taken
        max_length: Maximum identifier length of the target database
        key: Maps a name onto the lookup key stored in ``used``; tables use
            ``lambda n: (n, schema)`` so only names in the same schema clash

    Returns:
        A free name no longer than ``max_length``

    Raises:
        InvalidIdentifierLengthError: If max_length is not a positive integer
    """
    lookup = key or (lambda n: n)
    name = truncate(candidate, max_length)
    suffix = 1
    while lookup(name) in used:
        name = truncate(candidate, max_length, suffix)
        suffix += 1
    return name
