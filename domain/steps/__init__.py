from domain.steps.base import Step, maybe_await, MODE_STATIC, MODE_IDENTITY, MODE_RESOLVER
from domain.steps.http import HttpRequestSpec, to_pairs

__all__ = [
    "Step",
    "maybe_await",
    "MODE_STATIC",
    "MODE_IDENTITY",
    "MODE_RESOLVER",
    "HttpRequestSpec",
    "to_pairs",
]
