"""Text-to-speech adapters for stored pages.

A provider is any object with a ``name`` attribute and an async
``synthesize(text, speed)`` method returning ``(mp3_bytes, seconds)``.
Two providers are included:

* ``SilentTTSProvider`` produces silent MP3 audio of roughly the right
  length. It needs no external service and is always registered.
* ``OpenAITTSProvider`` calls OpenAI's speech endpoint. It is registered
  when ``OPENAI_API_KEY`` is set.

The reader's speech rate setting runs from 0.0 to 1.0 with 0.5 as normal
speed; ``rate_to_speed`` turns it into the multiplier providers expect.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional, Tuple

import httpx

from . import config

logger = logging.getLogger(__name__)

# One MPEG-1 Layer III frame, 128 kbit/s at 44.1 kHz, with zeroed side
# information and main data. Decoders render it as 1152 samples of silence.
_SILENT_FRAME = b"\xff\xfb\x90\x00" + b"\x00" * 413
_FRAMES_PER_SECOND = 39

MIN_SPEED = 0.25
MAX_SPEED = 4.0


def rate_to_speed(rate: float) -> float:
    """Map a 0.0-1.0 speech rate onto a playback speed multiplier."""
    return min(MAX_SPEED, max(MIN_SPEED, rate * 2.0))


def estimate_seconds(text: str, speed: float = 1.0, chars_per_second: int = 15) -> int:
    # Roughly 120 words per minute at normal speed.
    return max(1, math.ceil(len(text) / (chars_per_second * speed)))


def chunk_text(text: str, max_chars: int = 3200) -> List[str]:
    """Split ``text`` into chunks of at most ``max_chars`` characters.

    Paragraphs are split into sentences and sentences are packed into
    chunks greedily. A single sentence longer than ``max_chars`` is cut
    at the character limit.
    """
    sentences: List[str] = []
    for paragraph in text.split("\n"):
        paragraph = paragraph.strip()
        if not paragraph:
            continue
        for sentence in re.split(r"(?<=[.!?])\s+", paragraph):
            while len(sentence) > max_chars:
                sentences.append(sentence[:max_chars])
                sentence = sentence[max_chars:]
            if sentence:
                sentences.append(sentence)

    chunks: List[str] = []
    buf: List[str] = []
    current_len = 0
    for sentence in sentences:
        if buf and current_len + len(sentence) + 1 > max_chars:
            chunks.append(" ".join(buf))
            buf = []
            current_len = 0
        buf.append(sentence)
        current_len += len(sentence) + 1
    if buf:
        chunks.append(" ".join(buf))
    return chunks


class SilentTTSProvider:
    """Returns silent MP3 audio whose length follows the text length."""

    name = "silent"

    async def synthesize(self, text: str, speed: float = 1.0) -> Tuple[bytes, int]:
        seconds = estimate_seconds(text, speed)
        return _SILENT_FRAME * (_FRAMES_PER_SECOND * seconds), seconds


class OpenAITTSProvider:
    """Text-to-speech through OpenAI's ``/v1/audio/speech`` endpoint.

    Supported voices include ``alloy``, ``echo``, ``fable``, ``onyx``,
    ``nova`` and ``shimmer``.
    """

    name = "openai"
    endpoint = "https://api.openai.com/v1/audio/speech"

    def __init__(self, api_key: str, voice: str = "alloy", model: str = "tts-1",
                 client: Optional[httpx.AsyncClient] = None) -> None:
        self.api_key = api_key
        self.voice = voice
        self.model = model
        self._client = client

    async def synthesize(self, text: str, speed: float = 1.0) -> Tuple[bytes, int]:
        payload = {
            "model": self.model,
            "input": text,
            "voice": self.voice,
            "response_format": "mp3",
            "speed": speed,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self._client is not None:
            response = await self._client.post(self.endpoint, headers=headers, json=payload)
        else:
            async with httpx.AsyncClient(timeout=60.0) as client:
                response = await client.post(self.endpoint, headers=headers, json=payload)
        response.raise_for_status()
        return response.content, estimate_seconds(text, speed)


def default_providers() -> Dict[str, object]:
    providers: Dict[str, object] = {"silent": SilentTTSProvider()}
    if config.OPENAI_API_KEY:
        providers["openai"] = OpenAITTSProvider(
            api_key=config.OPENAI_API_KEY, voice=config.OPENAI_TTS_VOICE
        )
        logger.info("Registered OpenAI TTS provider with voice %s", config.OPENAI_TTS_VOICE)
    return providers


async def speak(text: str, provider, rate: float) -> Tuple[bytes, int]:
    """Synthesize ``text`` chunk by chunk and join the MP3 streams."""
    speed = rate_to_speed(rate)
    audio = b""
    total = 0
    for chunk in chunk_text(text):
        chunk_audio, seconds = await provider.synthesize(chunk, speed)
        audio += chunk_audio
        total += seconds
    return audio, total
