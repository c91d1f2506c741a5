"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: Service methods return ServiceResult; they never let edit errors
escape to the CLI.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from geocmd.errors import CommandError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_command_error(cls, exc: CommandError) -> ServiceError:
        """Map an edit error onto its kind and formatted message."""
        return cls(code=str(exc.kind), message=exc.message, detail=exc.detail())


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"run_script"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
