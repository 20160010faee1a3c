"""Speech payload and provider tests."""

from unittest.mock import AsyncMock

import httpx
import pytest

from webreader.models import Page, share_text
from webreader.tts import (
    OpenAITTSProvider,
    SilentTTSProvider,
    chunk_text,
    rate_to_speed,
    speak,
)


def test_share_text():
    page = Page("Title", ("first", "second"))
    assert share_text(page) == "Title\n\nfirst\n\nsecond"


def test_share_text_without_paragraphs():
    assert share_text(Page("Title")) == "Title\n\n"


@pytest.mark.parametrize("rate,speed", [(0.5, 1.0), (0.0, 0.25), (1.0, 2.0), (0.67, 1.34)])
def test_rate_to_speed(rate, speed):
    assert rate_to_speed(rate) == pytest.approx(speed)


def test_chunk_text_respects_limit():
    text = "\n\n".join(["This is a sentence. " * 20] * 5)
    chunks = chunk_text(text, max_chars=200)
    assert len(chunks) > 1
    assert all(len(c) <= 200 for c in chunks)


def test_chunk_text_splits_overlong_sentence():
    chunks = chunk_text("x" * 250, max_chars=100)
    assert chunks == ["x" * 100, "x" * 100, "x" * 50]


def test_chunk_text_skips_blank_lines():
    assert chunk_text("\n\n  \nHello.\n\n") == ["Hello."]


@pytest.mark.asyncio
async def test_silent_provider_scales_with_text():
    provider = SilentTTSProvider()
    short_audio, short_seconds = await provider.synthesize("hi")
    long_audio, long_seconds = await provider.synthesize("word " * 100)
    assert short_seconds == 1
    assert long_seconds > short_seconds
    assert len(long_audio) > len(short_audio)
    assert short_audio[:2] == b"\xff\xfb"


@pytest.mark.asyncio
async def test_speak_passes_speed_to_provider():
    provider = AsyncMock()
    provider.synthesize.return_value = (b"mp3", 2)
    audio, seconds = await speak("One. Two.", provider, rate=1.0)
    assert audio == b"mp3"
    assert seconds == 2
    provider.synthesize.assert_awaited_once_with("One. Two.", 2.0)


@pytest.mark.asyncio
async def test_openai_provider_posts_request():
    captured = {}

    def handler(request):
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = request.content
        return httpx.Response(200, content=b"audio-bytes")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        provider = OpenAITTSProvider(api_key="sk-test", voice="nova", client=client)
        audio, seconds = await provider.synthesize("Hello there.", speed=1.5)

    assert audio == b"audio-bytes"
    assert seconds >= 1
    assert captured["auth"] == "Bearer sk-test"
    assert b'"voice":"nova"' in captured["body"].replace(b" ", b"")
    assert b'"speed":1.5' in captured["body"].replace(b" ", b"")
