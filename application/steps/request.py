# application/steps/request.py
from __future__ import annotations

import asyncio
import dataclasses
from typing import TYPE_CHECKING, Optional

from bs4 import BeautifulSoup

from application.ports.http_client import HttpResponse
from application.services.redactor import mask_dict, mask_pairs
from domain.run import StepRecord
from domain.steps.base import Step
from domain.steps.http import HttpRequestSpec

if TYPE_CHECKING:
    from application.session import Session


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def _try_extract_title(doc: Optional[BeautifulSoup]) -> Optional[str]:
    if doc is None or doc.title is None:
        return None
    return doc.title.get_text(strip=True)


class Request(Step):
    """
    Issue an HTTP request through the session's client and cookie jar.

    Options: an HttpRequestSpec or a mapping with its field names
    (``url`` required). Returns an HttpResponse whose ``document`` is the
    parsed page unless ``raw`` is set. Error statuses are returned, not raised.
    """

    async def execute(self, session: "Session", previous: Optional[StepRecord]) -> HttpResponse:
        spec = HttpRequestSpec.from_options(self.options)

        await session.notify_before_request(self, spec)

        logger = session.logger
        logger.debug(
            "http.request",
            step_name=self.name,
            method=spec.method,
            url=spec.url,
            params=mask_pairs(spec.params),
            form=mask_pairs(spec.form_list),
            files=mask_pairs(spec.files),
            headers=mask_dict(spec.headers),
        )

        cookies_before = len(session.http_client.snapshot_cookies())

        # requests はブロッキングなのでスレッドで実行
        resp = await asyncio.to_thread(session.http_client.request, spec)

        if not spec.raw:
            resp = dataclasses.replace(resp, document=parse_document(resp.text))

        logger.info(
            "http.response",
            step_name=self.name,
            status=resp.status,
            final_url=resp.url,
            redirects=len(resp.history or []),
            cookies_before=cookies_before,
            cookies_after=len(session.http_client.snapshot_cookies()),
            title=_try_extract_title(resp.document),
            text_head=(resp.text or "")[:200],
        )
        return resp
