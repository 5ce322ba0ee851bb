"""Errors raised while analyzing a page."""

from typing import Optional


class AnalysisError(Exception):
    """Raised when the page itself could not be analyzed."""

    kind = "analysis"

    def __init__(self, message: str, url: Optional[str] = None):
        self.message = message
        self.url = url
        super().__init__(message)


class FetchError(AnalysisError):
    """The target page could not be retrieved."""

    kind = "fetch"

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, url)


class ParseError(AnalysisError):
    """The retrieved body could not be interpreted as a document tree."""

    kind = "parse"


class LinkUnreachable(Exception):
    """A link probe got no response (connection failure, DNS, timeout)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class MalformedHref(ValueError):
    """An href value is not a usable network address."""

    def __init__(self, href: str, reason: str):
        self.href = href
        self.reason = reason
        super().__init__(f"{href!r}: {reason}")
