"""Page download and HTML extraction.

This module fetches a single HTML page with ``httpx`` and pulls the
readable parts out of it with ``BeautifulSoup``: the document title, the
text of every ``<p>`` element and the link to the next page of a
paginated article or chapter list.

The next link is located with the fixed CSS selector
``div.nav-next > a.next_page`` used by common WordPress chapter
navigation themes. Relative links are resolved against the URL of the
page they were found on, so callers can fetch the result directly.

Nothing here retries. A failed request raises ``NetworkError`` and the
caller decides what to do with it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import httpx
from bs4 import BeautifulSoup

from .errors import DecodeError, InvalidURLError, NetworkError, ParseError

logger = logging.getLogger(__name__)

NEXT_LINK_SELECTOR = "div.nav-next > a.next_page"


@dataclass
class ExtractedPage:
    title: str
    paragraphs: List[str]
    next_link: str


def validate_url(url: str) -> httpx.URL:
    """Return ``url`` parsed, or raise ``InvalidURLError``.

    Only absolute ``http`` and ``https`` URLs with a host are accepted.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidURLError(f"{url!r} doesn't seem to be a valid URL") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidURLError(f"{url!r} doesn't seem to be a valid URL")
    return parsed


def resolve_link(base_url: str, href: str) -> str:
    """Resolve ``href`` against the page it was found on."""
    try:
        return str(httpx.URL(base_url).join(href))
    except httpx.InvalidURL as exc:
        raise InvalidURLError(f"Cannot resolve {href!r} against {base_url}") from exc


async def fetch_html(url: str, client: httpx.AsyncClient) -> str:
    """GET ``url`` and return the body decoded as UTF-8.

    Redirects are followed. Transport errors, timeouts and non-2xx
    responses raise ``NetworkError``; a body that is not valid UTF-8
    raises ``DecodeError``.
    """
    try:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise NetworkError(f"Error loading data from {url}: {exc}") from exc
    try:
        return response.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Body of {url} is not valid UTF-8") from exc


def _element_text(element) -> str:
    # Flatten nested markup and collapse runs of whitespace.
    return " ".join(element.get_text().split())


def extract_page(html_doc: str) -> ExtractedPage:
    """Extract the title, paragraphs and next link from raw HTML.

    Every ``<p>`` element contributes one entry to ``paragraphs`` in
    document order, including empty ones. ``title`` and ``next_link``
    are empty strings when the document has no ``<title>`` or no
    matching navigation anchor. Blank or non-text input raises
    ``ParseError``.
    """
    if not isinstance(html_doc, str) or not html_doc.strip():
        raise ParseError("Document is empty")
    try:
        soup = BeautifulSoup(html_doc, "lxml")
    except Exception as exc:
        raise ParseError(f"Error parsing HTML: {exc}") from exc

    title = _element_text(soup.title) if soup.title else ""
    paragraphs = [_element_text(p) for p in soup.find_all("p")]

    next_link = ""
    anchor = soup.select_one(NEXT_LINK_SELECTOR)
    if anchor is not None:
        next_link = (anchor.get("href") or "").strip()

    logger.debug("Extracted %d paragraphs from %r", len(paragraphs), title)
    return ExtractedPage(title=title, paragraphs=paragraphs, next_link=next_link)
