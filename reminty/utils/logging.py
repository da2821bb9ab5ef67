"""
Structured logging for the analyzer.

Every record is rendered as a single JSON object. Analysis context
(file_path, component, phase, language) is carried by a LoggerAdapter so
call sites only pass what changes between calls.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional

# Promoted to top-level keys of the JSON record
CONTEXT_FIELDS = ("file_path", "component", "phase", "language")

# Attributes every LogRecord carries; anything else came in through ``extra``
STANDARD_ATTRIBUTES = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
})


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class JSONFormatter(logging.Formatter):
    """
    Render log records as one-line JSON documents.

    Keys: timestamp, level, logger, message, the analysis context fields that
    are set, ``context`` for remaining extras, ``error`` when exception info
    is attached, and ``source`` (file, line, function).
    """

    def format(self, record: logging.LogRecord) -> str:
        document: Dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        document.update(
            (field, getattr(record, field)) for field in CONTEXT_FIELDS if hasattr(record, field)
        )

        leftovers = {
            key: value
            for key, value in vars(record).items()
            if key not in STANDARD_ATTRIBUTES and key not in CONTEXT_FIELDS
        }
        if leftovers:
            document["context"] = leftovers

        if record.exc_info:
            document["error"] = self._describe_exception(record.exc_info)

        document["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }
        return json.dumps(document, default=str)

    @staticmethod
    def _describe_exception(exc_info) -> Dict[str, Optional[str]]:
        exc_type, exc_value, _ = exc_info
        return {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "stack_trace": "".join(traceback.format_exception(*exc_info)),
        }


class LogContext:
    """
    Temporarily extend an adapter's context for the duration of a block.

        with LogContext(logger, file_path="src/App.jsx", language="jsx"):
            logger.info("Parsing")
    """

    def __init__(self, logger: logging.LoggerAdapter, **context: Any):
        self.logger = logger
        self.context = context
        self._saved: Optional[Dict[str, Any]] = None

    def __enter__(self) -> logging.LoggerAdapter:
        self._saved = dict(self.logger.extra or {})
        self.logger.extra = {**self._saved, **self.context}
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._saved is not None:
            self.logger.extra = self._saved


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its context into each call's ``extra``; call-site values win."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """Return a child adapter; this adapter's context is left untouched."""
        return ContextLoggerAdapter(self.logger, {**self.extra, **context})


def setup_logging(log_level: str = "INFO") -> None:
    """
    Route all logging to stdout as JSON.

    Replaces any handlers already installed on the root logger.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.setLevel(log_level)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # yaml is chatty at DEBUG
    logging.getLogger("yaml").setLevel(logging.WARNING)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Return a context-aware adapter around ``logging.getLogger(name)``.

    Example:
        logger = get_logger(__name__, language="jsx")
        logger.info("Parsing file")
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)


def log_phase_transition(
    logger: logging.LoggerAdapter,
    file_path: str,
    phase: str,
    status: str
) -> None:
    """
    Log the start or end of one analysis phase for a file.

    Args:
        logger: Logger to use
        file_path: File being analysed
        phase: Phase name ('parse', 'detect', 'rank')
        status: 'started' or 'completed'
    """
    logger.info(
        f"Analysis phase {status}: {phase}",
        extra={"file_path": file_path, "phase": phase, "status": status},
    )


def log_detection_summary(
    logger: logging.LoggerAdapter,
    file_path: str,
    component_count: int,
    pattern_count: int,
    warning_count: int
) -> None:
    """Log the outcome of analysing one file, at WARNING when the parser complained."""
    extra = {
        "file_path": file_path,
        "component_count": component_count,
        "pattern_count": pattern_count,
        "warning_count": warning_count,
    }

    if warning_count:
        logger.warning(f"Analysed {file_path} with {warning_count} parser warnings", extra=extra)
    else:
        logger.info(f"Analysed {file_path}", extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any
) -> None:
    """Log ``error`` at ERROR level with its traceback and the given context fields."""
    logger.error(message, extra=context, exc_info=error)
