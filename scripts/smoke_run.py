#!/usr/bin/env python3
"""
Pipeline smoke run against a live site

Usage:
  python scripts/smoke_run.py <url> [--click <selector>]... [--form <selector> [--field name=value]...]
                              [--expect-text <text>] [--log-level DEBUG] [--json-log]

Examples:
  python scripts/smoke_run.py https://example.com
  python scripts/smoke_run.py https://example.com --click "a[href]" --expect-text "IANA"
  python scripts/smoke_run.py https://httpbin.org/forms/post --form form --field custname=tomato
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()

from application.session import Session
from application.steps import Assertion, FormFiller, LinkClicker, Request
from domain.exceptions import StepFailedError
from domain.steps.base import Step
from infrastructure.config.settings import load_settings
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.loguru_logger import LoguruLogger


def _parse_fields(raw: List[str]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for item in raw or []:
        if "=" not in item:
            raise ValueError(f"--field must be name=value, got: {item}")
        name, value = item.split("=", 1)
        fields[name] = value
    return fields


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a small step pipeline against a site")
    parser.add_argument("url", type=str)
    parser.add_argument("--click", action="append", default=[], help="CSS selector of a link to follow")
    parser.add_argument("--form", type=str, help="CSS selector of a form to submit")
    parser.add_argument("--submit", type=str, help="CSS selector of the submit button inside the form")
    parser.add_argument("--field", action="append", default=[], help="form field override name=value")
    parser.add_argument("--expect-text", type=str, help="text the final page must contain")
    parser.add_argument("--log-level", type=str)
    parser.add_argument("--json-log", action="store_true", help="also print one JSON line per event on stdout")
    return parser


def build_steps(args: argparse.Namespace) -> List[Step]:
    steps: List[Step] = [Request("open", {"url": args.url})]

    for i, selector in enumerate(args.click, start=1):
        steps.append(LinkClicker(f"click#{i}", {"selector": selector, "auto_request": True}))

    if args.form:
        overrides = _parse_fields(args.field)
        steps.append(
            FormFiller(
                "submit-form",
                {
                    "selector": args.form,
                    "submit_selector": args.submit,
                    "callback": lambda fields: fields.update(overrides),
                    "auto_request": True,
                },
            )
        )

    if args.expect_text:
        expected = args.expect_text
        steps.append(
            Assertion(
                "expect-text",
                {
                    "callback": lambda page: expected in (page.text or ""),
                    "explain": lambda page: f"{expected!r} not found in {page.url}",
                },
            )
        )

    return steps


def main() -> None:
    args = _build_parser().parse_args()
    settings = load_settings()
    setup_console_logging(level=args.log_level or settings.log_level)

    try:
        steps = build_steps(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    logger = CompositeLogger([LoguruLogger(), ConsoleLogger()]) if args.json_log else LoguruLogger()
    session = Session(settings=settings, logger=logger)

    try:
        page = asyncio.run(session.run_steps(steps))
    except StepFailedError as e:
        print(f"Failed: {e}", file=sys.stderr)
        sys.exit(1)

    title = page.document.title.get_text(strip=True) if page.document and page.document.title else ""
    print(f"Status: {page.status}" + ("" if page.ok else " (error)"))
    print(f"URL: {page.url}")
    print(f"Title: {title}")
    print(f"Cookies: {len(session.jar)}")
    sys.exit(0)


if __name__ == "__main__":
    main()
