"""Retry eligibility policy for failed bridge attempts."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from .exceptions import BridgeError
from .types import Verdict


class ErrorClassifier(Protocol):
    """Map a failed attempt's error to a retry verdict."""

    def __call__(self, error: BridgeError) -> Verdict: ...


def match_fatal(message: str, fatal_substrings: Iterable[str]) -> str | None:
    """Return the first fatal substring contained in ``message``, if any."""
    for fragment in fatal_substrings:
        if fragment in message:
            return fragment
    return None


def classify(message: str, fatal_substrings: Iterable[str]) -> Verdict:
    if match_fatal(message, fatal_substrings) is not None:
        return Verdict.FATAL
    return Verdict.RETRYABLE


class SubstringClassifier:
    """Classify errors as fatal when their text contains a known fragment.

    Node and contract errors carry no reliable structured codes, so matching
    is done on the rendered message, including any ``details`` the error
    carries. Unknown messages are always retryable.
    """

    def __init__(self, fatal_substrings: Iterable[str]) -> None:
        self.fatal_substrings = tuple(fatal_substrings)

    def __call__(self, error: BridgeError) -> Verdict:
        return classify(self.render(error), self.fatal_substrings)

    def matched(self, error: BridgeError) -> str | None:
        return match_fatal(self.render(error), self.fatal_substrings)

    @staticmethod
    def render(error: BridgeError) -> str:
        text = str(error)
        cause = error.details.get("error")
        if cause and str(cause) not in text:
            text = f"{text}: {cause}"
        return text
