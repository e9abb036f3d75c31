# infrastructure/http/requests_client.py
from __future__ import annotations

from typing import Dict, List, Optional

import requests
from requests.cookies import RequestsCookieJar

from application.ports.http_client import HttpClientPort, HttpHistoryItem, HttpResponse
from domain.steps.http import HttpRequestSpec


class RequestsSessionHttpClient(HttpClientPort):
    """
    HttpClientPort backed by ``requests.Session``.
    Cookies are read from and written to the given jar, so several clients
    built on the same jar share one cookie state.
    """

    def __init__(
        self,
        jar: Optional[RequestsCookieJar] = None,
        base_headers: Optional[Dict[str, str]] = None,
        timeout_sec: float = 20,
    ):
        self._session = requests.Session()
        if jar is not None:
            self._session.cookies = jar
        self._base_headers = base_headers or {}
        self._timeout = timeout_sec

    @property
    def jar(self) -> RequestsCookieJar:
        return self._session.cookies

    def request(self, spec: HttpRequestSpec) -> HttpResponse:
        merged = dict(self._base_headers)
        merged.update(spec.headers or {})

        # multipart: (name, (None, value)) sends a plain field without filename
        files = [(k, (None, v)) for k, v in spec.files] if spec.files else None

        resp = self._session.request(
            method=spec.method.upper(),
            url=spec.url,
            headers=merged,
            params=spec.params or None,
            data=spec.form_list or None,  # list[tuple] OK、同名キー複数OK
            files=files,
            timeout=self._timeout,
            allow_redirects=spec.allow_redirects,
        )

        history_items: List[HttpHistoryItem] = []
        for h in resp.history or []:
            history_items.append(
                HttpHistoryItem(
                    status=h.status_code,
                    url=str(h.url),
                    location=h.headers.get("Location"),
                    set_cookie=h.headers.get("Set-Cookie"),
                )
            )

        return HttpResponse(
            status=resp.status_code,
            url=str(resp.url),
            text=resp.text,
            headers=dict(resp.headers),
            encoding=resp.encoding,
            history=history_items,
            content=resp.content,
        )

    def snapshot_cookies(self) -> List[Dict[str, object]]:
        out: List[Dict[str, object]] = []
        for c in self._session.cookies:
            out.append(
                {
                    "name": c.name,
                    "value": c.value,
                    "domain": c.domain,
                    "path": c.path,
                    "secure": bool(getattr(c, "secure", False)),
                    "expires": getattr(c, "expires", None),
                }
            )
        return out
