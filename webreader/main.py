"""FastAPI application for the reader.

The HTTP API stands in for the reading client's screens: it accepts URLs
to extract, lists and deletes stored pages, shows the recent-search log
and the "new pages" badge count, hands out share and speech payloads,
and holds the reader settings.

Extraction chains can take a while, so ``POST /extract`` schedules the
chain with FastAPI's ``BackgroundTasks`` and returns immediately. The
outcome of a chain is only logged; clients poll ``/pages`` to see new
content.

All state lives in one ``ReaderController`` stored on ``app.state``.
``create_app`` builds one from configuration unless a controller is
passed in, which is how the tests run the app against a temporary store
and a fake network.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from . import config, tts
from .logging_config import setup_logging
from .models import share_text
from .reader import ReaderController
from .store import PageStore

logger = logging.getLogger(__name__)


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _controller(request: Request) -> ReaderController:
    return request.app.state.controller


def _page_or_404(controller: ReaderController, index: int):
    # Pages are addressed by position; titles may contain "/".
    page = controller.page_at(index)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


def create_app(controller: Optional[ReaderController] = None,
               providers: Optional[Dict[str, Any]] = None) -> FastAPI:
    setup_logging(config.LOG_LEVEL)
    app = FastAPI(title="Web Reader")
    app.state.controller = controller or ReaderController(PageStore(config.STORE_PATH))
    app.state.providers = providers if providers is not None else tts.default_providers()

    @app.post("/extract", status_code=202)
    async def extract_endpoint(request: Request, background_tasks: BackgroundTasks) -> Response:
        """Start an extraction chain for ``url``."""
        data = await _json_body(request)
        url = data.get("url")
        if not url or not isinstance(url, str):
            raise HTTPException(status_code=400, detail="Missing 'url' in request body")
        background_tasks.add_task(_controller(request).extract, url)
        return JSONResponse({"status": "queued", "url": url}, status_code=202)

    @app.get("/pages")
    async def list_pages(request: Request) -> Response:
        controller = _controller(request)
        return JSONResponse({
            "pages": [page.title for page in controller.pages],
            "new_pages": controller.new_pages_count,
        })

    @app.post("/pages/seen")
    async def acknowledge_pages(request: Request) -> Response:
        _controller(request).acknowledge_new_pages()
        return JSONResponse({"new_pages": 0})

    @app.delete("/pages")
    async def delete_pages(request: Request) -> Response:
        """Delete pages by their position in the ``/pages`` listing."""
        data = await _json_body(request)
        offsets = data.get("offsets")
        if not isinstance(offsets, list) or not all(
                isinstance(o, int) and not isinstance(o, bool) for o in offsets):
            raise HTTPException(status_code=400, detail="'offsets' must be a list of integers")
        controller = _controller(request)
        try:
            removed = await controller.delete(offsets)
        except IndexError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        return JSONResponse({
            "deleted": [page.title for page in removed],
            "pages": [page.title for page in controller.pages],
        })

    @app.get("/pages/{index:int}")
    async def get_page(index: int, request: Request) -> Response:
        page = _page_or_404(_controller(request), index)
        return JSONResponse(page.to_dict())

    @app.get("/pages/{index:int}/share")
    async def share_page(index: int, request: Request) -> Response:
        page = _page_or_404(_controller(request), index)
        return PlainTextResponse(share_text(page))

    @app.post("/pages/{index:int}/speech")
    async def speak_page(index: int, request: Request) -> Response:
        """Return the page read aloud as MP3, at the configured speech rate."""
        controller = _controller(request)
        page = _page_or_404(controller, index)
        data = await _json_body(request)
        provider = request.app.state.providers.get(data.get("provider", "silent"))
        if provider is None:
            raise HTTPException(status_code=400, detail="Unknown TTS provider")
        try:
            audio, seconds = await tts.speak(share_text(page), provider,
                                             controller.settings.speech_rate)
        except httpx.HTTPError as exc:
            logger.error("TTS provider %s failed: %s", provider.name, exc)
            raise HTTPException(status_code=502, detail="Speech synthesis failed")
        return Response(content=audio, media_type="audio/mpeg",
                        headers={"X-Audio-Duration": str(seconds)})

    @app.get("/recent")
    async def recent_searches(request: Request) -> Response:
        return JSONResponse({
            "recent": [{"url": e.url, "title": e.title} for e in _controller(request).recent],
        })

    @app.post("/recent/{index}", status_code=202)
    async def reopen_recent(index: int, request: Request, background_tasks: BackgroundTasks) -> Response:
        """Extract again from the URL of a recent entry."""
        controller = _controller(request)
        if index < 0 or index >= len(controller.recent):
            raise HTTPException(status_code=404, detail="Recent entry not found")
        url = controller.recent[index].url
        background_tasks.add_task(controller.extract, url)
        return JSONResponse({"status": "queued", "url": url}, status_code=202)

    @app.get("/settings")
    async def get_settings(request: Request) -> Response:
        settings = _controller(request).settings
        return JSONResponse({"dark_mode": settings.dark_mode, "speech_rate": settings.speech_rate})

    @app.put("/settings")
    async def put_settings(request: Request) -> Response:
        data = await _json_body(request)
        dark_mode = data.get("dark_mode")
        speech_rate = data.get("speech_rate")
        if dark_mode is not None and not isinstance(dark_mode, bool):
            raise HTTPException(status_code=422, detail="'dark_mode' must be a boolean")
        if speech_rate is not None and (isinstance(speech_rate, bool)
                                        or not isinstance(speech_rate, (int, float))):
            raise HTTPException(status_code=422, detail="'speech_rate' must be a number")
        try:
            settings = _controller(request).update_settings(dark_mode, speech_rate)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        return JSONResponse({"dark_mode": settings.dark_mode, "speech_rate": settings.speech_rate})

    return app
