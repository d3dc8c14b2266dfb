"""Structured logging for deltaschema.

Events are emitted with structlog on top of stdlib loggers named after the
emitting module (``deltaschema.io.files``, ``deltaschema.cli``, ...), so every
event lives under the ``deltaschema`` logger hierarchy.

Library use:
    Importing deltaschema routes structlog through stdlib logging but installs
    no handler. Applications decide what happens to ``deltaschema`` records;
    with no configuration only WARNING and above reach stdlib's last-resort
    handler.

CLI use:
    configure_logging() installs a single ProcessorFormatter handler on the
    ``deltaschema`` logger. Output goes to stderr unless another stream is
    given; stdout carries command results (schemas, reports) so the CLI stays
    pipe-friendly. The root logger is left untouched.
"""

import logging
import sys
from typing import IO, Any

import structlog
from structlog.stdlib import ProcessorFormatter

PACKAGE_LOGGER = "deltaschema"
_HANDLER_NAME = "deltaschema-cli"

# Run for structlog events before they reach stdlib, and for foreign stdlib
# records inside the formatter.
_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure logging between cases.
        cache_logger_on_first_use=False,
    )


def _final_processors(json_output: bool) -> list[Any]:
    if json_output:
        return [
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    return [
        ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=False),
    ]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "WARNING",
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install the deltaschema log handler.

    Calling this again replaces the previously installed handler.

    Args:
        json_output: Render one JSON object per line instead of console text.
        level: Level name for the ``deltaschema`` logger (DEBUG, INFO, ...).
        stream: Destination stream; stderr when None.

    Returns:
        The installed handler.

    Raises:
        ValueError: If ``level`` is not a known logging level name.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"unknown log level: {level!r}")

    _configure_structlog()

    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        ProcessorFormatter(
            processors=_final_processors(json_output),
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for old in [h for h in package_logger.handlers if h.get_name() == _HANDLER_NAME]:
        package_logger.removeHandler(old)
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False
    return handler


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Bound logger for a deltaschema module (pass ``__name__``)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


if not structlog.is_configured():
    _configure_structlog()
