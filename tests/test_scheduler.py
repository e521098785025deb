"""Tests for the SM-2 scheduler variant."""

import itertools
from datetime import timedelta

import pytest

from clozerev.models import Card, Quality
from clozerev.scheduler import MIN_EASE_FACTOR, next_intervals, schedule

from conftest import NOW


def _card(**kwargs):
    return Card(id="c", cloze_id="c1", note_path="/n.md", content="{{c1::x}}", **kwargs)


def test_first_success():
    card = _card(interval=1, repetitions=0, ease_factor=2.5)
    result = schedule(card, 3, now=NOW)
    assert result is card
    assert card.interval == 1
    assert card.repetitions == 1
    assert card.ease_factor == pytest.approx(2.36)
    assert card.due_date == NOW + timedelta(days=1)


def test_bootstrap_intervals():
    card = _card()
    schedule(card, Quality.REMEMBERED, now=NOW)
    assert card.interval == 1
    schedule(card, Quality.REMEMBERED, now=NOW)
    assert card.interval == 6
    assert card.repetitions == 2
    ef_after_second = card.ease_factor
    schedule(card, Quality.REMEMBERED, now=NOW)
    assert card.interval == round(6 * ef_after_second)
    assert card.interval == 13
    assert card.repetitions == 3


def test_exact_ease_formula():
    card = _card(ease_factor=2.0)
    schedule(card, 3, now=NOW)
    assert card.ease_factor == 2.0 + (0.1 - (5 - 3) * (0.08 + (5 - 3) * 0.02))


def test_interval_rounds_half_up():
    card = _card(interval=5, repetitions=2, ease_factor=2.5)
    schedule(card, 3, now=NOW)
    assert card.interval == 13  # 12.5


def test_failure_keeps_ease_factor():
    card = _card(interval=7, repetitions=2, ease_factor=2.8)
    schedule(card, Quality.FORGOT, now=NOW)
    assert card.interval == 1
    assert card.repetitions == 0
    assert card.ease_factor == 2.8
    assert card.due_date == NOW + timedelta(days=1)


def test_skip_is_failure():
    card = _card(interval=15, repetitions=4, ease_factor=2.2)
    schedule(card, Quality.SKIP, now=NOW)
    assert (card.interval, card.repetitions, card.ease_factor) == (1, 0, 2.2)


@pytest.mark.parametrize("quality", [-1, 0, 1, 2])
@pytest.mark.parametrize("reps,interval", [(0, 1), (1, 1), (3, 40)])
def test_failure_reset_for_any_state(quality, reps, interval):
    card = _card(interval=interval, repetitions=reps, ease_factor=1.9)
    schedule(card, quality, now=NOW)
    assert card.repetitions == 0
    assert card.interval == 1


def test_ease_factor_floor():
    card = _card()
    for quality in itertools.islice(itertools.cycle([3, 3, 1, 3, 0]), 40):
        schedule(card, quality, now=NOW)
        assert card.ease_factor >= MIN_EASE_FACTOR
    assert card.ease_factor == MIN_EASE_FACTOR


def test_ease_factor_below_floor_is_clamped():
    card = _card(ease_factor=1.0)
    schedule(card, 1, now=NOW)
    assert card.ease_factor == MIN_EASE_FACTOR


def test_due_date_from_feedback_time():
    card = _card(interval=6, repetitions=2, ease_factor=2.5)
    later = NOW + timedelta(hours=5)
    schedule(card, 3, now=later)
    assert card.due_date == later + timedelta(days=15)


def test_naive_now_is_utc():
    card = _card()
    schedule(card, 3, now=NOW.replace(tzinfo=None))
    assert card.due_date == NOW + timedelta(days=1)
    assert card.due_date.tzinfo is not None


def test_default_now_is_aware():
    card = _card()
    schedule(card, 3)
    assert card.due_date.tzinfo is not None


def test_next_intervals_preview_does_not_mutate():
    card = _card(interval=6, repetitions=2, ease_factor=2.5)
    preview = next_intervals(card)
    assert preview == {Quality.SKIP: 1, Quality.FORGOT: 1, Quality.REMEMBERED: 15}
    assert card.interval == 6
    assert card.repetitions == 2
