from application.steps.request import Request, parse_document
from application.steps.callback import Callback, Assertion
from application.steps.page import PageStep, LinkClicker, FormFiller

__all__ = [
    "Request",
    "parse_document",
    "Callback",
    "Assertion",
    "PageStep",
    "LinkClicker",
    "FormFiller",
]
