"""structlog setup for jumpnet.

Everything is logged to stderr so piped command output stays clean:

- human mode (default): console renderer, colored on a TTY;
- ``--log-json``: one JSON object per line, tracebacks as structured dicts.

Events emitted after :func:`bind_workspace` carry a ``workspace`` field, so
logs from several editors sharing a terminal can be told apart.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

# Applied to structlog events and to plain ``logging`` records alike.
_PRE_CHAIN: tuple[Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def _render_chain(log_json: bool) -> list[Processor]:
    if log_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Only ``jumpnet.*`` loggers drop to DEBUG under *verbose*; third-party
    loggers (asyncio, networkx) stay at WARNING. Safe to call repeatedly.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_PRE_CHAIN),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger("jumpnet").setLevel(logging.DEBUG if verbose else logging.WARNING)


def bind_workspace(name: str) -> None:
    """Tag subsequent log events with the active workspace *name*."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(workspace=name)
