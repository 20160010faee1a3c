"""Exception types raised along the extraction pipeline.

Every failure in a fetch/parse/pagination chain is one of these. The
controller catches them at the chain boundary, logs them and stops the
chain; none of them escape to the HTTP caller.
"""

from __future__ import annotations


class ReaderError(Exception):
    """Base class for all pipeline errors."""


class InvalidURLError(ReaderError):
    """The URL is not an absolute http(s) URL."""


class NetworkError(ReaderError):
    """The GET request failed: transport error, timeout or non-2xx status."""


class DecodeError(ReaderError):
    """The response body is not valid UTF-8."""


class ParseError(ReaderError):
    """The response body could not be parsed as HTML."""


class PersistenceError(ReaderError):
    """The page file could not be written."""


class PaginationLimitReached(ReaderError):
    """A pagination chain hit the configured page cap."""

    def __init__(self, limit: int, next_url: str) -> None:
        super().__init__(f"Stopped after {limit} pages; next link was {next_url}")
        self.limit = limit
        self.next_url = next_url
