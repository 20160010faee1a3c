"""Data models shared by the reader modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

STOP_COMPLETE = "complete"
STOP_CYCLE = "cycle"
STOP_LIMIT = "limit"
STOP_ERROR = "error"


@dataclass(frozen=True)
class Page:
    """A stored unit of extracted content.

    Pages are identified by ``title``; the source URL is not kept.
    """

    title: str
    paragraphs: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "paragraphs": list(self.paragraphs)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Page":
        title = data["title"]
        paragraphs = data.get("paragraphs", [])
        if not isinstance(title, str) or not isinstance(paragraphs, list):
            raise ValueError("Malformed page record")
        if not all(isinstance(p, str) for p in paragraphs):
            raise ValueError("Malformed page record")
        return cls(title=title, paragraphs=tuple(paragraphs))


@dataclass(frozen=True)
class SearchEntry:
    url: str
    title: str


@dataclass
class Settings:
    """Presentation preferences. Only ``speech_rate`` reaches the speech service."""

    dark_mode: bool = True
    speech_rate: float = 0.67

    def __post_init__(self) -> None:
        if not 0.0 <= self.speech_rate <= 1.0:
            raise ValueError("speech_rate must be between 0.0 and 1.0")


@dataclass
class ExtractionResult:
    """Summary of one extraction chain started from ``start_url``."""

    start_url: str
    visited: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    stop_reason: str = STOP_COMPLETE
    error: Optional[Exception] = None

    @property
    def limit_reached(self) -> bool:
        return self.stop_reason == STOP_LIMIT


def share_text(page: Page) -> str:
    """Return the plain-text payload used for sharing and speech."""
    return page.title + "\n\n" + "\n\n".join(page.paragraphs)
