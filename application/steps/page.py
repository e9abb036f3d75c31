# application/steps/page.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from application.ports.http_client import HttpResponse
from application.services.form_serializer import FormSerializer, pairs_to_fields
from application.services.redactor import mask_dict
from application.steps.request import Request
from domain.exceptions import ElementNotFoundError, MissingPreviousResultError
from domain.run import StepRecord
from domain.steps.base import Step, maybe_await
from domain.steps.http import HttpRequestSpec, to_pairs

if TYPE_CHECKING:
    from application.session import Session


class PageStep(Step):
    """Base for steps that read the page fetched by the previous step."""

    def _page(self, previous: Optional[StepRecord]) -> HttpResponse:
        page = self.require_previous(previous).result
        if not isinstance(page, HttpResponse) or page.document is None:
            raise MissingPreviousResultError(
                f"{type(self).__name__} '{self.name}' requires a parsed page from the previous step, "
                f"got: {type(page).__name__}"
            )
        return page

    def _selector(self) -> str:
        selector = self.option("selector")
        if not selector:
            raise ValueError(f"{type(self).__name__} '{self.name}' requires a 'selector' option")
        return selector

    def _follow(self, spec: HttpRequestSpec) -> Union[Request, HttpRequestSpec]:
        if self.option("auto_request", False):
            return Request("Request:" + self.name, spec)
        return spec


class LinkClicker(PageStep):
    """
    Options: {"selector": css, "auto_request": bool}.

    Resolves the first matching element's href against the page URL.
    Returns the request spec, or a Request step to run next when
    ``auto_request`` is set.
    """

    async def execute(self, session: "Session", previous: Optional[StepRecord]) -> Union[Request, HttpRequestSpec]:
        page = self._page(previous)
        selector = self._selector()

        link = page.document.select_one(selector)
        if link is None:
            raise ElementNotFoundError(f'Cannot find link with selector "{selector}"')

        spec = HttpRequestSpec(
            url=urljoin(page.url, link.get("href") or ""),
            headers={"Referer": page.url},
        )
        session.logger.debug("link.resolved", step_name=self.name, selector=selector, url=spec.url)
        return self._follow(spec)


class FormFiller(PageStep):
    """
    Options: {"selector": css, "submit_selector": css, "callback": fn, "auto_request": bool}.

    Serializes the form like a browser submit. ``callback`` receives the
    fields as a dict (repeated names as lists) and may modify it in place
    before the request is built. GET forms send the fields as query
    parameters, multipart forms as files, everything else as an urlencoded body.
    """

    def __init__(self, name: str, options: Any = None):
        super().__init__(name, options)
        self._serializer = FormSerializer()

    async def execute(self, session: "Session", previous: Optional[StepRecord]) -> Union[Request, HttpRequestSpec]:
        page = self._page(previous)
        selector = self._selector()
        doc: BeautifulSoup = page.document

        form = doc.select_one(selector)
        if form is None:
            raise ElementNotFoundError(f'Cannot find form with selector "{selector}"')

        submit_selector = self.option("submit_selector")
        button = form.select_one(submit_selector or "[type=submit]")
        if button is None and submit_selector:
            raise ElementNotFoundError(f'Cannot find submit button with selector "{submit_selector}" in form')

        serialized = self._serializer.serialize(form, submit_button=button)
        fields: Dict[str, Any] = pairs_to_fields(serialized.pairs)

        callback = self.option("callback")
        if callback is not None:
            await maybe_await(callback(fields))

        method = (form.get("method") or "GET").upper()
        pairs = to_pairs(fields)
        spec_kwargs: Dict[str, Any] = {
            "url": urljoin(page.url, form.get("action") or ""),
            "method": method,
            "headers": {"Referer": page.url},
        }
        if method == "GET":
            spec_kwargs["params"] = pairs
        elif (form.get("enctype") or "").lower() == "multipart/form-data":
            spec_kwargs["files"] = pairs
        else:
            spec_kwargs["form_list"] = pairs

        spec = HttpRequestSpec(**spec_kwargs)
        session.logger.debug(
            "form.serialized",
            step_name=self.name,
            selector=selector,
            method=method,
            url=spec.url,
            submitter=serialized.submitter[0] if serialized.submitter else None,
            fields=mask_dict(fields),
        )
        return self._follow(spec)
