"""BaseService — foundation for jumpnet services.

Every service receives a :class:`JumpNet` at construction time. Domain
errors raised by the graph are translated into failed ServiceResults here,
so the CLI never sees a raw exception for an expected failure.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jumpnet.domain.errors import (
    CorruptGraphError,
    InvalidVertexIdError,
    JumpNetError,
    MissingVertexError,
    VersionMismatchError,
)
from jumpnet.domain.graph import describe_edge
from jumpnet.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from jumpnet.services.jumpnet import JumpNet

logger = logging.getLogger(__name__)

# First match wins, so subclasses precede their bases.
_ERROR_CODES: list[tuple[type[Exception], ErrorCode]] = [
    (MissingVertexError, ErrorCode.MISSING_VERTEX),
    (InvalidVertexIdError, ErrorCode.INVALID_INPUT),
    (CorruptGraphError, ErrorCode.CORRUPT_GRAPH),
    (VersionMismatchError, ErrorCode.VERSION_MISMATCH),
    (FileNotFoundError, ErrorCode.NOT_FOUND),
    (ValueError, ErrorCode.INVALID_INPUT),
    (JumpNetError, ErrorCode.JUMPNET_ERROR),
    (OSError, ErrorCode.IO_ERROR),
]


def error_code_for(exc: Exception) -> ErrorCode:
    """Map an exception to its ServiceError code."""
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return ErrorCode.INTERNAL_ERROR


class BaseService:
    """Base for service-layer classes operating on one :class:`JumpNet`."""

    def __init__(self, net: JumpNet) -> None:
        self._net = net

    def _from_exception(self, op: str, exc: Exception) -> ServiceResult:
        """Failed result for *exc*; the detail names a bad edge when there is one."""
        code = error_code_for(exc)
        logger.debug("%s failed with %s", op, code, exc_info=True)
        detail: dict[str, Any] = {"type": type(exc).__name__}
        edge_id = getattr(exc, "edge_id", None)
        if edge_id:
            detail["edge"] = describe_edge(edge_id)
        return ServiceResult.failure(op, code, str(exc), detail)
