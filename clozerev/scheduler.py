"""SM-2 scheduler variant.

Maintains per-card state: ease factor, interval, repetition count, due date.
Quality is collapsed to three buckets (skip, forgot, remembered); anything
below 3 is a failure and fully resets progress.
"""

import math
from datetime import datetime, timedelta, timezone

from clozerev.models import Card, Quality, as_utc

MIN_EASE_FACTOR = 1.3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _next_interval(card: Card, quality: int) -> int:
    if quality < 3:
        return 1
    if card.repetitions == 0:
        return 1
    if card.repetitions == 1:
        return 6
    return _round_half_up(card.interval * card.ease_factor)


def schedule(card: Card, quality: int, now: datetime | None = None) -> Card:
    """Apply one review to ``card`` in place and return it.

    ``now`` is the moment the feedback was submitted; the new due date is
    ``now + interval`` days.
    """
    if quality >= 3:
        card.interval = _next_interval(card, quality)
        card.repetitions += 1
        card.ease_factor = card.ease_factor + (
            0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    else:
        card.repetitions = 0
        card.interval = 1

    if card.ease_factor < MIN_EASE_FACTOR:
        card.ease_factor = MIN_EASE_FACTOR

    if now is None:
        now = datetime.now(timezone.utc)
    card.due_date = as_utc(now) + timedelta(days=card.interval)
    return card


def next_intervals(card: Card) -> dict[Quality, int]:
    """Preview the interval each quality would produce, without mutating."""
    return {q: _next_interval(card, int(q)) for q in Quality}
