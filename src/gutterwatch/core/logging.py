"""structlog setup for gutterwatch.

Every line logged while a refresh cycle runs carries that cycle's number
under ``cycle``, so interleaved cycles can be told apart in the log. The
``logging`` config section may fan out to several outputs, each with its own
renderer and level.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from gutterwatch.config.models import LoggingConfig, LogOutputConfig

_cycle_id: ContextVar[int | None] = ContextVar("cycle_id", default=None)


def get_cycle_id() -> int | None:
    return _cycle_id.get()


def set_cycle_id(cycle_id: int | None) -> None:
    """Bind a refresh cycle number to the current task context."""
    _cycle_id.set(cycle_id)


def clear_cycle_id() -> None:
    _cycle_id.set(None)


def _add_cycle_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    cycle = get_cycle_id()
    if cycle is not None:
        event_dict["cycle"] = cycle
    return event_dict


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    level: str = "INFO",
    force_level: str | None = None,
) -> None:
    """Route structlog through stdlib handlers built from ``config``.

    Without ``config`` a single console output on stderr at ``level`` is used.
    ``force_level`` replaces the root level and every per-output level; the
    CLI passes DEBUG for ``--verbose``.
    """
    from gutterwatch.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(level=level, outputs=[LogOutputConfig()])  # type: ignore[arg-type]

    root_level = logging.getLevelName(force_level or config.level)

    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_cycle_id,  # type: ignore[list-item]
    ]
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must pick up a later reconfiguration
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)

    # watchfiles logs every filtered change at debug
    logging.getLogger("watchfiles.main").setLevel(logging.WARNING)

    for output in config.outputs:
        handler = _create_handler(output, shared)
        handler.setLevel(force_level or output.level or config.level)
        root.addHandler(handler)


def _create_handler(
    output: LogOutputConfig, shared: list[structlog.types.Processor]
) -> logging.Handler:
    handler: logging.Handler
    is_console = output.destination in ("stderr", "stdout")
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=is_console and sys.stderr.isatty(), pad_event_to=0, pad_level=False
        )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )
    return handler
