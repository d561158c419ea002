# src/ucp_mcp/util/logging.py
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Mapping, Optional

_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,  # treat as debug
}


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        kv = getattr(record, "kv", None)
        if isinstance(kv, Mapping):
            base.update(kv)
        return json.dumps(base, ensure_ascii=False, default=str)


class PlainKvFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        kv = getattr(record, "kv", None)
        if isinstance(kv, Mapping) and kv:
            line += " " + " ".join(f"{k}={v}" for k, v in kv.items())
        return line


def level_from_name(name: Optional[str]) -> int:
    return _LEVELS.get((name or "info").strip().lower(), logging.INFO)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Route all logging to stderr. stdout is reserved for MCP JSON-RPC frames.

    Level and format fall back to LOG_LEVEL / LOG_FORMAT. Only the first call
    configures the root logger.
    """
    if getattr(setup_logging, "_configured", False):
        return
    setup_logging._configured = True  # type: ignore[attr-defined]

    lvl = level_from_name(level or os.environ.get("LOG_LEVEL"))
    handler = logging.StreamHandler(sys.stderr)
    if (fmt or os.environ.get("LOG_FORMAT", "plain")).lower() == "json":
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(PlainKvFormatter(fmt="[{levelname}] {name}: {message}", style="{"))

    root = logging.getLogger()
    root.setLevel(lvl)
    root.handlers[:] = [handler]

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(lvl, logging.WARNING))


def log_kv(log: logging.Logger, level: int, msg: str, **kv: Any) -> None:
    log.log(level, msg, extra={"kv": kv} if kv else None)
