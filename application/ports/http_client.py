# application/ports/http_client.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from domain.steps.http import HttpRequestSpec


@dataclass(frozen=True)
class HttpHistoryItem:
    status: int
    url: str
    location: Optional[str]
    set_cookie: Optional[str]


@dataclass(frozen=True)
class HttpResponse:
    status: int
    url: str
    text: str
    headers: Dict[str, str]
    encoding: Optional[str] = None
    history: Optional[List[HttpHistoryItem]] = None
    content: Optional[bytes] = None
    document: Any = None  # BeautifulSoup tree unless the request was raw

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400


class HttpClientPort(ABC):
    @abstractmethod
    def request(self, spec: HttpRequestSpec) -> HttpResponse:
        ...

    @abstractmethod
    def snapshot_cookies(self) -> List[Dict[str, object]]:
        ...
