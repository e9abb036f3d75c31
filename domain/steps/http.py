# domain/steps/http.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

Pairs = List[Tuple[str, str]]


def to_pairs(value: Union[None, Mapping[str, Any], List[Tuple[str, Any]]]) -> Pairs:
    """
    Normalize a mapping or pair list into (key, value) string pairs.
    List values are expanded: ("k", ["a", "b"]) => ("k", "a"), ("k", "b")
    """
    if not value:
        return []

    items = value.items() if isinstance(value, Mapping) else value
    out: Pairs = []
    for key, v in items:
        if isinstance(v, (list, tuple)):
            for item in v:
                out.append((str(key), "" if item is None else str(item)))
        else:
            out.append((str(key), "" if v is None else str(v)))
    return out


@dataclass(frozen=True)
class HttpRequestSpec:
    url: str
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    params: Pairs = field(default_factory=list)     # query string, multi-value
    form_list: Pairs = field(default_factory=list)  # application/x-www-form-urlencoded
    files: Pairs = field(default_factory=list)      # multipart/form-data
    raw: bool = False
    allow_redirects: bool = True

    @classmethod
    def from_options(cls, options: Union["HttpRequestSpec", Mapping[str, Any]]) -> "HttpRequestSpec":
        if isinstance(options, HttpRequestSpec):
            return options
        if not isinstance(options, Mapping):
            raise TypeError(f"request options must be a mapping or HttpRequestSpec, got: {type(options).__name__}")

        url = options.get("url")
        if not url:
            raise ValueError("request options require 'url'")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"unknown request options: {', '.join(unknown)}")

        return cls(
            url=str(url),
            method=str(options.get("method") or "GET").upper(),
            headers=dict(options.get("headers") or {}),
            params=to_pairs(options.get("params")),
            form_list=to_pairs(options.get("form_list")),
            files=to_pairs(options.get("files")),
            raw=bool(options.get("raw", False)),
            allow_redirects=bool(options.get("allow_redirects", True)),
        )
