"""Review queue: snapshot of the cards due at session start, plus a cursor."""

from datetime import datetime

from clozerev.models import Card, as_utc


class ReviewQueue:
    def __init__(self, cards):
        self._cards: tuple[Card, ...] = tuple(cards)
        self._cursor = 0

    @classmethod
    def build(cls, cards, now: datetime, limit: int | None = None) -> "ReviewQueue":
        """Select due cards in source order, truncated to ``limit``.

        The selection is taken once; later due-date changes from grading do
        not re-insert or reorder anything.
        """
        now = as_utc(now)
        due = [c for c in cards if c.due_date <= now]
        if limit is not None and limit >= 0:
            due = due[:limit]
        return cls(due)

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> tuple[Card, ...]:
        return self._cards

    @property
    def position(self) -> int:
        return self._cursor

    @property
    def remaining(self) -> int:
        return len(self._cards) - self._cursor

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._cards)

    def current(self) -> Card | None:
        if self.exhausted:
            return None
        return self._cards[self._cursor]

    def advance(self) -> None:
        if not self.exhausted:
            self._cursor += 1
