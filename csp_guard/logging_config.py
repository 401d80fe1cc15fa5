"""structlog logging setup for csp_guard advisories."""

import logging
import sys

import structlog

# Every module logger in the package is a child of this one
PACKAGE_LOGGER = "csp_guard"


def _rename_logger_to_module(
    logger: logging.Logger, method_name: str, event_dict: dict
) -> dict:
    """Rename 'logger' key to 'module' for structured log field consistency."""
    if "logger" in event_dict:
        event_dict["module"] = event_dict.pop("logger")
    return event_dict


def _build_formatter(json_format: bool) -> structlog.stdlib.ProcessorFormatter:
    if json_format:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging(log_level: str = "info", json_format: bool = True, stream=None) -> logging.Logger:
    """Send csp_guard advisories to ``stream`` (stderr by default).

    Only the ``csp_guard`` logger is given a handler. The root logger of the
    host application is left as it is, and csp_guard records do not
    propagate to it.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _rename_logger_to_module,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_build_formatter(json_format))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    package_logger.propagate = False
    return package_logger
