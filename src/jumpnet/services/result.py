"""ServiceResult and ServiceError — what every service operation returns.

Expected failures (an untracked file, a corrupt store) come back as a failed
result carrying one of the :class:`ErrorCode` values; the CLI renders it and
exits 1. Only programming errors escape as exceptions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    MISSING_VERTEX = "MISSING_VERTEX"
    INVALID_INPUT = "INVALID_INPUT"
    CORRUPT_GRAPH = "CORRUPT_GRAPH"
    VERSION_MISMATCH = "VERSION_MISMATCH"
    IO_ERROR = "IO_ERROR"
    JUMPNET_ERROR = "JUMPNET_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name, which also selects the renderer (``"related"``).
        data: Operation payload on success.
        warnings: Non-fatal issues, such as a save that failed in the
            background or a stored graph that had to be discarded.
        error: Set exactly when ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(cls, op: str, data: dict[str, Any] | None = None) -> Self:
        return cls(ok=True, op=op, data=data or {})

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> Self:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )

    def with_warnings(self, *warnings: str) -> Self:
        """Copy of this result with *warnings* appended."""
        if not warnings:
            return self
        return self.model_copy(update={"warnings": [*self.warnings, *warnings]})
