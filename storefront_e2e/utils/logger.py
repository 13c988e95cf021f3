# storefront_e2e/utils/logger.py
from __future__ import annotations

"""Logging
----------
Everything logs under the `storefront_e2e` logger, configured once from
Settings: a rich console handler and, with LOG_TO_FILE, a rotating JSON-lines
file. Context bound with `bind()` (run id, current test, gateway) rides along
on every record; the console shows it as a short prefix.
"""

import json
import logging
import os
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, MutableMapping, Optional

from rich.console import Console
from rich.logging import RichHandler

from storefront_e2e.utils.config import LogLevel, get_settings


__all__ = [
    "get_logger",
    "set_log_level",
    "bind",
    "unbind",
    "log_with_context",
    "attach_file_logger",
    "detach_file_logger",
]

PACKAGE_LOGGER = "storefront_e2e"

# third-party loggers kept at WARNING unless we are debugging
_NOISY = ("urllib3", "httpx", "httpcore", "playwright", "sqlalchemy.engine", "asyncio")

_config_lock = threading.Lock()
_configured = False
_context: Dict[str, Any] = {}


# ------------- Record context -------------

class _ContextAdapter(logging.LoggerAdapter):
    """Merges the bound context (and any scoped extras) into `record.context`."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]):
        ctx = dict(_context)
        ctx.update(self.extra or {})
        ctx.update(kwargs.pop("extra", None) or {})
        kwargs["extra"] = {"context": {k: v for k, v in ctx.items() if v is not None}}
        return msg, kwargs


class _ContextPrefix(logging.Filter):
    """Adds `record.prefix`, e.g. "[test_refund gateway=acme] ", for console output."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = getattr(record, "context", None) or {}
        parts = []
        if "test" in ctx:
            parts.append(str(ctx["test"]))
        parts.extend(f"{k}={v}" for k, v in ctx.items() if k not in ("test", "run_id"))
        record.prefix = f"[{' '.join(parts)}] " if parts else ""
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; bound context is flattened into the object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(getattr(record, "context", None) or {})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _json_file_handler(path: os.PathLike | str, level: int, backups: int) -> logging.Handler:
    p = os.fspath(path)
    os.makedirs(os.path.dirname(p) or ".", exist_ok=True)
    fh = RotatingFileHandler(filename=p, maxBytes=5 * 1024 * 1024, backupCount=backups, encoding="utf-8", delay=True)
    fh.setLevel(level)
    fh.setFormatter(JsonFormatter())
    return fh


# ------------- Configuration -------------

def _ensure_configured() -> None:
    global _configured
    if _configured:
        return

    with _config_lock:
        if _configured:
            return

        settings = get_settings()
        level = getattr(logging, settings.LOG_LEVEL.value, logging.INFO)

        # pytest owns the root logger; only ours is touched
        base = logging.getLogger(PACKAGE_LOGGER)
        base.setLevel(level)
        base.propagate = True
        for h in list(base.handlers):
            base.removeHandler(h)

        console = RichHandler(
            console=Console(stderr=True, no_color=not settings.COLORIZED_OUTPUT),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        console.setFormatter(logging.Formatter("%(prefix)s%(message)s"))
        console.addFilter(_ContextPrefix())
        console.setLevel(level)
        base.addHandler(console)

        if settings.LOG_TO_FILE:
            base.addHandler(_json_file_handler(settings.LOG_FILE, level, backups=5))

        for name in _NOISY:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

        _configured = True


# ------------- Public API -------------

def get_logger(name: Optional[str] = None) -> logging.LoggerAdapter:
    """Logger for `name` (normally `__name__`) carrying the bound context."""
    _ensure_configured()
    return _ContextAdapter(logging.getLogger(name or PACKAGE_LOGGER), {})


def set_log_level(level: LogLevel | str) -> None:
    _ensure_configured()
    name = level.value if isinstance(level, LogLevel) else str(level).upper()
    py_level = getattr(logging, name, logging.INFO)
    base = logging.getLogger(PACKAGE_LOGGER)
    base.setLevel(py_level)
    for h in base.handlers:
        h.setLevel(py_level)


def bind(**kwargs: Any) -> None:
    """Attach context to every following record, e.g. bind(run_id=..., test=...)."""
    _context.update(kwargs)


def unbind(*keys: str) -> None:
    for k in keys:
        _context.pop(k, None)


def log_with_context(logger: logging.LoggerAdapter, **kwargs: Any) -> logging.LoggerAdapter:
    """
    A copy of `logger` that adds `kwargs` to its records, on top of whatever
    is bound globally at emit time.
        log = log_with_context(get_logger(__name__), gateway="acme_credit_card")
    """
    extra = dict(logger.extra or {})
    extra.update(kwargs)
    return _ContextAdapter(logger.logger, extra)


def attach_file_logger(path: os.PathLike | str, level: Optional[int] = None) -> logging.Handler:
    """Add a JSON-lines file for the package logger (one per CLI run); detach with detach_file_logger."""
    _ensure_configured()
    base = logging.getLogger(PACKAGE_LOGGER)
    handler = _json_file_handler(path, level if level is not None else base.level, backups=3)
    base.addHandler(handler)
    return handler


def detach_file_logger(handler: logging.Handler) -> None:
    logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)
    handler.close()
