"""Logging setup: structlog on top of stdlib ``logging``, always to stderr.

stdout belongs to command output (JSON or Rich), so nothing here ever
writes there. Library loggers (alembic, SQLAlchemy, mcp) are capped at
WARNING; ``--verbose`` only lowers the ``orgctl`` namespace.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog

_NOISY_LOGGERS = ("alembic", "sqlalchemy.engine", "sqlalchemy.pool", "mcp")


def _pre_chain() -> list[structlog.types.Processor]:
    # Runs for structlog and foreign (stdlib) records alike.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    root: Path | None = None,
) -> None:
    """Route all logging through one stderr handler.

    Args:
        verbose: DEBUG for ``orgctl.*`` loggers instead of WARNING.
        log_json: One JSON object per line instead of console text.
        root: Bound as ``root`` on every event of this invocation.
    """
    pre_chain = _pre_chain()
    final: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        final.append(structlog.processors.format_exc_info)
    final.append(_renderer(log_json))

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processors=final)
    )

    base = logging.getLogger()
    for old in list(base.handlers):
        base.removeHandler(old)
    base.addHandler(handler)
    base.setLevel(logging.WARNING)

    logging.getLogger("orgctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if root is not None:
        structlog.contextvars.bind_contextvars(root=str(root))
