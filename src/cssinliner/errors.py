"""Error hierarchy for cssinliner."""
from __future__ import annotations


class InlinerError(Exception):
    """Base error for all cssinliner errors.

    Raised directly when the caller misuses the API, e.g. inlining before any
    content was read.
    """

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ContentWarningError(InlinerError):
    """A content warning promoted to an error because strict mode is on."""

    def __init__(self, info: str) -> None:
        super().__init__(info)
        self.info = info


class SelectorError(InlinerError):
    """The DOM query could not evaluate a selector."""

    def __init__(self, selector: str, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(f"Invalid selector '{selector}': {detail}", cause=cause)
        self.selector = selector
        self.detail = detail


class FetchError(InlinerError):
    """A remote document or stylesheet could not be retrieved."""

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.url = url
        self.status_code = status_code
