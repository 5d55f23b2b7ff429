"""Logging setup for eventsync.

Every module logs through a ``ContextualLogger``: a ``LoggerAdapter`` that
carries a dict of dimensions (resource, resource_id, sync mode, ...) and
attaches them to each record, so the JSON formatter emits them as
top-level fields.

Usage:
    from eventsync.core.logging import logger

    sync_logger = logger.with_context(resource="registrations", resource_id="123")
    sync_logger.info("Page fetched")
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

from pythonjsonlogger.json import JsonFormatter

from eventsync.core.config import LogFormat, settings

_ROOT_LOGGER_NAME = "eventsync"
_TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(message)s"
_JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that carries structured dimensions."""

    def __init__(
        self,
        logger: logging.Logger,
        dimensions: Optional[Dict[str, Any]] = None,
        prefix: str = "",
    ) -> None:
        """Wrap ``logger`` with a fixed set of dimensions and an optional prefix."""
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: Dict[str, Any] = dict(dimensions or {})
        self.prefix = prefix

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """Merge dimensions into ``extra``; call-site extras win on conflict."""
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        if self.prefix:
            msg = f"{self.prefix}{msg}"
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions."""
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, merged, self.prefix)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a new logger that prepends ``prefix`` to every message."""
        return ContextualLogger(self.logger, self.dimensions, f"{self.prefix}{prefix}")


class LoggerConfigurator:
    """Builds handlers and hands out contextual loggers."""

    _configured = False

    @classmethod
    def setup(
        cls,
        level: Optional[str] = None,
        log_format: Optional[LogFormat] = None,
    ) -> None:
        """Install a single stdout handler on the package root logger."""
        level = (level or settings.LOG_LEVEL).upper()
        log_format = log_format or settings.LOG_FORMAT

        handler = logging.StreamHandler(sys.stdout)
        if log_format == LogFormat.JSON:
            handler.setFormatter(JsonFormatter(_JSON_FORMAT))
        else:
            handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

        root = logging.getLogger(_ROOT_LOGGER_NAME)
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)
        root.propagate = False
        cls._configured = True

    @classmethod
    def configure_logger(
        cls,
        name: str,
        dimensions: Optional[Dict[str, Any]] = None,
    ) -> ContextualLogger:
        """Return a contextual logger for ``name`` with the given dimensions."""
        if not cls._configured:
            cls.setup()
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger(_ROOT_LOGGER_NAME)
