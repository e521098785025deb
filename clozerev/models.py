"""Shared data classes used across the parser, scheduler, queue and session."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class Quality(IntEnum):
    """Recall outcome submitted by the reviewer."""
    SKIP = 0
    FORGOT = 1
    REMEMBERED = 3


@dataclass
class Card:
    id: str
    cloze_id: str
    note_path: str
    content: str
    title: str = ""
    interval: int = 1
    repetitions: int = 0
    ease_factor: float = 2.5
    due_date: datetime = field(default_factory=utcnow)


@dataclass
class ClozeSpan:
    group: str
    answer: str
    start: int
    end: int


@dataclass
class RenderRequest:
    note_path: str
    title: str
    cloze_id: str
    content: str
    revealed: bool = False


@dataclass
class SessionSummary:
    reviewed: int = 0
    remembered: int = 0
    forgot: int = 0
    skipped: int = 0

    @property
    def accuracy(self) -> float:
        if not self.reviewed:
            return 0.0
        return self.remembered / self.reviewed
