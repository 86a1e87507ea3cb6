"""Structured logging for the collector CLI and submission pipeline."""

import logging
import sys

import structlog


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib and structlog records through one stderr handler.

    stdout is left to command output. ``json_output`` switches the console
    renderer for JSON lines.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ], foreign_pre_chain=pre_chain)
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def bind_submission_context(submission_id: str, endpoint: str | None = None) -> None:
    """Attach the in-flight submission id (and endpoint) to every log line."""
    ctx = {"submission_id": submission_id}
    if endpoint:
        ctx["endpoint"] = endpoint
    structlog.contextvars.bind_contextvars(**ctx)


def clear_submission_context() -> None:
    structlog.contextvars.clear_contextvars()
