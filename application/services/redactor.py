# application/services/redactor.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple

MASK = "********"

SENSITIVE_KEYS = {"pass", "pin", "authorization", "cookie", "set-cookie", "proxy-authorization"}
# form fields are often named "user_password", "loginPasswd", "api_token" ...
SENSITIVE_FRAGMENTS = ("password", "passwd", "secret", "token")


def is_sensitive(key: str) -> bool:
    k = (key or "").lower()
    if k in SENSITIVE_KEYS:
        return True
    return any(frag in k for frag in SENSITIVE_FRAGMENTS)


def mask_value(key: str, value: Any) -> Any:
    if value is None or not is_sensitive(key):
        return value
    if isinstance(value, list):
        return [MASK for _ in value]
    return MASK


def mask_pairs(pairs: List[Tuple[str, str]]) -> List[Tuple[str, Any]]:
    return [(k, mask_value(k, v)) for k, v in pairs]


def mask_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: mask_value(k, v) for k, v in d.items()}
