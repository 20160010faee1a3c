"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from pathlib import Path

STORE_PATH = os.environ.get("WEBREADER_STORE", str(Path("/mnt/data/webreader/pages.json")))

# Upper bound on the number of pages fetched by a single extraction chain.
MAX_PAGES = int(os.environ.get("WEBREADER_MAX_PAGES", "50"))

FETCH_TIMEOUT = float(os.environ.get("WEBREADER_FETCH_TIMEOUT", "30.0"))

LOG_LEVEL = os.environ.get("WEBREADER_LOG_LEVEL", "INFO")

OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
OPENAI_TTS_VOICE = os.environ.get("OPENAI_TTS_VOICE", "alloy")
