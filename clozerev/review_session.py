"""ReviewSession: drives the reveal/grade cycle over a queue of due cards.

The session is a plain state machine; a host UI translates its own events
into ``start``, ``reveal``, ``submit_feedback`` and ``close`` calls and draws
whatever ``render_request`` returns.
"""

import enum
import re
from datetime import datetime, timezone
from typing import Callable

from clozerev import cloze
from clozerev.config import DEFAULT_SETTINGS, cloze_pattern, within_review_hours
from clozerev.models import Card, Quality, RenderRequest, SessionSummary, as_utc
from clozerev.review_queue import ReviewQueue
from clozerev.scheduler import schedule


class SessionState(enum.Enum):
    NOT_STARTED = "not_started"
    PRESENTING = "presenting"
    COMPLETE = "complete"


class RevealState(enum.Enum):
    MASKED = "masked"
    REVEALED = "revealed"


class OutsideReviewHours(ValueError):
    pass


class InMemoryProvider:
    """Card provider backed by a plain list."""

    def __init__(self, cards=None):
        self.cards: list[Card] = list(cards or [])

    def all_cards(self) -> list[Card]:
        return list(self.cards)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewSession:
    def __init__(self, queue: ReviewQueue, pattern: re.Pattern = cloze.DEFAULT_PATTERN,
                 clock: Callable[[], datetime] | None = None,
                 on_graded: Callable[[Card], None] | None = None):
        self.queue = queue
        self.pattern = pattern
        self.clock = clock or _utcnow
        self.on_graded = on_graded
        self.state = SessionState.NOT_STARTED
        self.reveal_state = RevealState.MASKED
        self.summary = SessionSummary()

    @property
    def current_card(self) -> Card | None:
        if self.state is not SessionState.PRESENTING:
            return None
        return self.queue.current()

    @property
    def is_complete(self) -> bool:
        return self.state is SessionState.COMPLETE

    @property
    def reviewed(self) -> int:
        return self.summary.reviewed

    @property
    def progress(self) -> tuple[int, int]:
        """(cards still queued, cards graded so far)."""
        return self.queue.remaining, self.reviewed

    def start(self) -> None:
        if self.state is not SessionState.NOT_STARTED:
            return
        self._present_current()

    def reveal(self) -> bool:
        """Reveal the current card. Returns True if the state changed."""
        if self.state is not SessionState.PRESENTING:
            return False
        if self.reveal_state is RevealState.REVEALED:
            return False
        self.reveal_state = RevealState.REVEALED
        return True

    def submit_feedback(self, quality: int) -> Card | None:
        """Grade the current card and move on.

        Returns the updated card, or None when no card is being presented
        (not started, already complete, or a repeated submission).
        """
        card = self.current_card
        if card is None:
            return None

        schedule(card, quality, now=self.clock())
        self._count(quality)
        self.queue.advance()
        self._present_current()

        # card is no longer current here, so a raising callback cannot lead
        # to a second grade on retry
        if self.on_graded is not None:
            self.on_graded(card)
        return card

    def close(self) -> None:
        """Abandon the session. Grades already applied stay in effect."""
        self.state = SessionState.COMPLETE

    def render_request(self) -> RenderRequest | None:
        card = self.current_card
        if card is None:
            return None
        body = cloze.render(card.content, card.cloze_id, self.pattern)
        revealed = self.reveal_state is RevealState.REVEALED
        if revealed:
            body = cloze.reveal(body)
        return RenderRequest(note_path=card.note_path, title=card.title,
                             cloze_id=card.cloze_id, content=body, revealed=revealed)

    def _present_current(self) -> None:
        if self.queue.current() is None:
            self.state = SessionState.COMPLETE
            return
        self.state = SessionState.PRESENTING
        self.reveal_state = RevealState.MASKED

    def _count(self, quality: int) -> None:
        self.summary.reviewed += 1
        if quality >= Quality.REMEMBERED:
            self.summary.remembered += 1
        elif quality == Quality.SKIP:
            self.summary.skipped += 1
        else:
            self.summary.forgot += 1


def open_session(provider, settings: dict | None = None,
                 clock: Callable[[], datetime] | None = None,
                 on_graded: Callable[[Card], None] | None = None) -> ReviewSession:
    """Build an unstarted session over the provider's currently due cards.

    Raises OutsideReviewHours when the settings' review window is closed.
    """
    settings = settings if settings is not None else dict(DEFAULT_SETTINGS)
    clock = clock or _utcnow
    now = as_utc(clock())
    # review hours are wall-clock hours
    if not within_review_hours(settings, now.astimezone()):
        raise OutsideReviewHours(
            f"Outside review hours ({settings.get('review_start_hour')}:00-"
            f"{settings.get('review_end_hour')}:00)")
    limit = settings.get("max_reviews_per_day")
    queue = ReviewQueue.build(provider.all_cards(), now,
                              limit=int(limit) if limit is not None else None)
    return ReviewSession(queue, pattern=cloze_pattern(settings), clock=clock,
                         on_graded=on_graded)
