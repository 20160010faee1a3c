"""Fixtures: a fake website, a temporary page store and a controller."""

import httpx
import pytest

from webreader.reader import ReaderController
from webreader.store import PageStore


def make_html(title, paragraphs, next_href=None):
    nav = ""
    if next_href is not None:
        nav = f'<div class="nav-next"><a class="next_page" href="{next_href}">Next</a></div>'
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return f"<html><head><title>{title}</title></head><body>{body}{nav}</body></html>"


class FakeSite:
    """Serves canned responses by URL and records every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, url, body, status=200):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[url] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.routes:
            return httpx.Response(404, content=b"not found")
        status, body = self.routes[url]
        return httpx.Response(status, content=body, headers={"Content-Type": "text/html"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def store(tmp_path):
    return PageStore(str(tmp_path / "pages.json"))


@pytest.fixture
def controller(site, store):
    return ReaderController(store, client=site.client(), max_pages=10)
