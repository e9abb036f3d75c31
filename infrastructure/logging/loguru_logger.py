# infrastructure/logging/loguru_logger.py
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from loguru import logger as _loguru

from application.ports.logger import LoggerPort


class LoguruLogger(LoggerPort):
    """
    LoggerPort on top of loguru.

    Bound fields go to loguru's ``extra``; the rendered message is
    ``<event> <json fields>`` so it reads the same as ConsoleLogger output.
    """

    def __init__(self, bound: Optional[Dict[str, Any]] = None):
        self._bound: Dict[str, Any] = dict(bound or {})
        self._logger = _loguru.bind(**self._bound)

    @property
    def bound(self) -> Dict[str, Any]:
        return dict(self._bound)

    def bind(self, **fields: Any) -> "LoguruLogger":
        merged = dict(self._bound)
        merged.update(fields)
        return LoguruLogger(bound=merged)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("DEBUG", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("INFO", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("WARNING", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("ERROR", event, fields)

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        payload = dict(self._bound)
        payload.update(fields)
        # opt(depth=2): report the caller of debug()/info(), not this method
        self._logger.opt(depth=2).log(
            level, "{} {}", event, json.dumps(payload, ensure_ascii=False, default=str)
        )
