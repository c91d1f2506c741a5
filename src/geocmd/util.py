"""Value classification and assertion helpers shared by the edit layer."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence, Set
from numbers import Real
from typing import Any, NoReturn

from geocmd.errors import CommandError, PreconditionError

_STRINGLIKE = (str, bytes, bytearray, memoryview)


def is_nothing(value: Any) -> bool:
    """True if *value* is None."""
    return value is None


def is_something(value: Any) -> bool:
    """True if *value* is not None."""
    return value is not None


def is_number(value: Any) -> bool:
    """True for real numbers. ``bool`` is not treated as a number."""
    return isinstance(value, Real) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    """True if *value* is a ``str``."""
    return isinstance(value, str)


def is_collection(value: Any) -> bool:
    """True if *value* is a collection of items to be visited one by one.

    Sequences (list, tuple, ...), sets and iterators qualify. Strings and
    bytes do not, neither do mappings.

    Examples:
        >>> is_collection([1, 2]), is_collection({1}), is_collection(iter(()))
        (True, True, True)
        >>> is_collection("abc"), is_collection({"a": 1}), is_collection(None)
        (False, False, False)
    """
    if isinstance(value, _STRINGLIKE) or isinstance(value, Mapping):
        return False
    return isinstance(value, (Sequence, Set, Iterator))


def count_properties(obj: Any) -> int | None:
    """Number of entries in a mapping, None if *obj* is not a mapping."""
    if not isinstance(obj, Mapping):
        return None
    return len(obj)


def has_properties(obj: Any) -> bool:
    """True if *obj* is a mapping with at least one entry."""
    count = count_properties(obj)
    if count is None:
        return False
    return count > 0


def trim(s: Any) -> Any:
    """Strip surrounding whitespace. None passes through, anything else is str()-ed."""
    if s is None:
        return s
    return str(s).strip()


def fail(error_cls: type[CommandError], template: str, *params: Any) -> NoReturn:
    """Raise *error_cls* with a message formatted from *template* and *params*."""
    raise error_cls(template, *params)


def assert_that(
    cond: Any,
    template: str = "An assertion failed",
    *params: Any,
    error_cls: type[CommandError] = PreconditionError,
) -> None:
    """Raise *error_cls* unless *cond* is truthy.

    Examples:
        >>> assert_that(True, "never raised")
        >>> assert_that(False, "lat: expected a valid lat, got {0}", 91)
        Traceback (most recent call last):
        ...
        geocmd.errors.PreconditionError: lat: expected a valid lat, got 91
    """
    if cond:
        return
    fail(error_cls, template, *params)
