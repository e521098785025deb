"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from clozerev.app import App
from clozerev.db import CardStore, init_db
from clozerev.models import Card

NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_card(card_id="card-1", content="A {{c1::B}} C", cloze_id="c1",
              due=None, **kwargs) -> Card:
    return Card(id=card_id, cloze_id=cloze_id, note_path=f"/notes/{card_id}.md",
                content=content, title=kwargs.pop("title", card_id),
                due_date=due if due is not None else NOW - timedelta(days=1),
                **kwargs)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def db_conn():
    """In-memory SQLite database with schema applied."""
    conn = init_db(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def store(db_conn):
    return CardStore(db_conn)


@pytest.fixture
def app(data_dir):
    """App instance with tmp data dir, in-memory DB and an always-open review window."""
    a = App(data_dir=data_dir)
    a.settings["review_start_hour"] = 0
    a.settings["review_end_hour"] = 0
    a.init_db(":memory:")
    yield a
    a.close()
