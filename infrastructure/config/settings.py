# infrastructure/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class TomatoSettings:
    user_agent: str = DEFAULT_USER_AGENT
    timeout_sec: float = 20.0
    log_level: str = "INFO"

    @property
    def base_headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent} if self.user_agent else {}


def _read_env(env_file: Optional[Path]) -> Dict[str, str]:
    # .env の値を優先し、無いキーだけ環境変数から補う
    values: Dict[str, str] = {}
    if env_file is not None and env_file.exists():
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    for key, value in os.environ.items():
        values.setdefault(key, value)
    return values


def load_settings(
    env_file: Optional[Path] = Path(".env"),
    environ: Optional[Mapping[str, str]] = None,
) -> TomatoSettings:
    """
    Build settings from ``TOMATO_*`` variables.

    ``environ`` replaces the process environment and .env lookup entirely
    when given (used by tests).
    """
    values = dict(environ) if environ is not None else _read_env(env_file)

    timeout_raw = values.get("TOMATO_TIMEOUT_SEC")
    try:
        timeout = float(timeout_raw) if timeout_raw else TomatoSettings.timeout_sec
    except ValueError:
        raise ValueError(f"TOMATO_TIMEOUT_SEC must be a number, got: {timeout_raw!r}")

    return TomatoSettings(
        user_agent=values.get("TOMATO_USER_AGENT") or DEFAULT_USER_AGENT,
        timeout_sec=timeout,
        log_level=(values.get("TOMATO_LOG_LEVEL") or "INFO").upper(),
    )
