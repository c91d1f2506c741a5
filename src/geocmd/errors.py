"""Error taxonomy for edit commands.

Three kinds of failure, all raised eagerly at the point of detection:

- ``PRECONDITION``: a required argument is missing or has the wrong shape
  (e.g. ``apply_to(None)``).
- ``INVALID_ARGUMENT``: an argument sits in the right slot but has the wrong
  content or type (e.g. a string passed where a primitive was expected).
- ``VALIDATION``: a named field has a value that fails a domain check
  (e.g. a latitude of 91).

Messages are built from a template with positional placeholders (``{0}``,
``{1}``, ...) and the offending values. The formatted message is resolved at
construction, the template and parameters are kept for structured output.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Structured kind of a :class:`CommandError`."""

    PRECONDITION = "PRECONDITION"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    VALIDATION = "VALIDATION"


class CommandError(Exception):
    """Base class for all errors raised while building or applying commands."""

    kind: ErrorKind = ErrorKind.PRECONDITION

    def __init__(self, template: str, *params: Any) -> None:
        self.template = template
        self.params = params
        self.message = format_message(template, *params)
        super().__init__(self.message)

    def detail(self) -> dict[str, Any]:
        """Structured representation used by the service layer."""
        return {
            "kind": str(self.kind),
            "template": self.template,
            "params": [repr(p) for p in self.params],
        }


class PreconditionError(CommandError):
    """A mandatory argument is missing or of the wrong high-level shape."""

    kind = ErrorKind.PRECONDITION


class InvalidArgumentError(CommandError, TypeError):
    """An argument has the wrong content or type for its slot."""

    kind = ErrorKind.INVALID_ARGUMENT


class ValidationError(CommandError, ValueError):
    """A named field failed a domain-specific validity check."""

    kind = ErrorKind.VALIDATION


def format_message(template: str, *params: Any) -> str:
    """Substitute ``{0}``-style placeholders in *template*.

    Without parameters the template is returned verbatim, so literal braces
    in plain messages survive.

    Examples:
        >>> format_message("lat: expected a valid lat, got {0}", 91)
        'lat: expected a valid lat, got 91'
        >>> format_message("no placeholders {here}")
        'no placeholders {here}'
    """
    if not params:
        return template
    try:
        return template.format(*params)
    except (IndexError, KeyError, ValueError):
        rendered = ", ".join(repr(p) for p in params)
        return f"{template} [{rendered}]"
