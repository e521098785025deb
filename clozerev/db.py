"""Database schema, initialization, and the SQLite-backed card store."""

import pathlib
import sqlite3
import sys
from datetime import datetime, timezone

from clozerev.models import Card

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

SCHEMA = """
CREATE TABLE IF NOT EXISTS cards (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    card_id TEXT NOT NULL UNIQUE,
    cloze_id TEXT NOT NULL,
    note_path TEXT NOT NULL,
    title TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL,
    interval_days INTEGER NOT NULL DEFAULT 1,
    repetitions INTEGER NOT NULL DEFAULT 0 CHECK(repetitions >= 0),
    ease_factor REAL NOT NULL DEFAULT 2.5 CHECK(ease_factor >= 1.3),
    due_date TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_cards_note ON cards(note_path);
"""


def init_db(db_path: pathlib.Path | str) -> sqlite3.Connection:
    db_path = pathlib.Path(db_path)
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=5)
    conn.row_factory = sqlite3.Row
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    conn.executescript(SCHEMA)
    conn.commit()
    return conn


def format_time(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime(TIME_FORMAT)


def parse_time(text: str) -> datetime:
    return datetime.strptime(text, TIME_FORMAT).replace(tzinfo=timezone.utc)


def _row_to_card(row: sqlite3.Row) -> Card:
    return Card(
        id=row["card_id"], cloze_id=row["cloze_id"], note_path=row["note_path"],
        title=row["title"], content=row["content"],
        interval=row["interval_days"], repetitions=row["repetitions"],
        ease_factor=row["ease_factor"], due_date=parse_time(row["due_date"]),
    )


class CardStore:
    """Persists cards and their scheduling state.

    Acts as a card provider for review sessions (``all_cards``) and as the
    session's ``on_graded`` callback (``save``).
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def all_cards(self) -> list[Card]:
        rows = self.conn.execute("SELECT * FROM cards ORDER BY seq").fetchall()
        return [_row_to_card(r) for r in rows]

    def get(self, card_id: str) -> Card | None:
        row = self.conn.execute(
            "SELECT * FROM cards WHERE card_id = ?", (card_id,)).fetchone()
        return _row_to_card(row) if row else None

    def save(self, card: Card) -> None:
        """Write back a card's scheduling fields."""
        cur = self.conn.execute("""
            UPDATE cards SET interval_days=?, repetitions=?, ease_factor=?, due_date=?
            WHERE card_id=?
        """, (card.interval, card.repetitions, card.ease_factor,
              format_time(card.due_date), card.id))
        self.conn.commit()
        if cur.rowcount == 0:
            print(f"Warning: card {card.id} is not in the store; schedule not saved",
                  file=sys.stderr)

    def sync(self, cards: list[Card],
             scanned_paths: list[pathlib.Path] | None = None) -> dict:
        """Sync scanned cards into the store. Returns stats dict.

        Existing cards keep their scheduling state; content and title are
        refreshed. Cards from a scanned note (or under a scanned directory)
        that no longer appear in the scan are deleted.
        """
        stats = {"new": 0, "updated": 0, "deleted": 0, "unchanged": 0}
        scanned_ids = set()
        for card in cards:
            scanned_ids.add(card.id)
            row = self.conn.execute(
                "SELECT content, title FROM cards WHERE card_id = ?", (card.id,)).fetchone()
            if row is None:
                self.conn.execute("""
                    INSERT INTO cards (card_id, cloze_id, note_path, title, content,
                                       interval_days, repetitions, ease_factor, due_date)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (card.id, card.cloze_id, card.note_path, card.title, card.content,
                      card.interval, card.repetitions, card.ease_factor,
                      format_time(card.due_date)))
                stats["new"] += 1
            elif row["content"] != card.content or row["title"] != card.title:
                self.conn.execute(
                    "UPDATE cards SET content=?, title=? WHERE card_id=?",
                    (card.content, card.title, card.id))
                stats["updated"] += 1
            else:
                stats["unchanged"] += 1

        for row in self._existing_under(cards, scanned_paths):
            if row["card_id"] not in scanned_ids:
                self.conn.execute("DELETE FROM cards WHERE card_id=?", (row["card_id"],))
                stats["deleted"] += 1

        self.conn.commit()
        return stats

    def _existing_under(self, cards, scanned_paths):
        conditions = []
        params: list = []
        notes = {c.note_path for c in cards}
        if notes:
            placeholders = ",".join("?" * len(notes))
            conditions.append(f"note_path IN ({placeholders})")
            params.extend(notes)
        for sp in scanned_paths or []:
            sp_str = str(sp.resolve())
            if sp.is_dir():
                conditions.append("note_path LIKE ?")
                params.append(f"{sp_str}/%")
            else:
                conditions.append("note_path = ?")
                params.append(sp_str)
        if not conditions:
            return []
        where = " OR ".join(conditions)
        return self.conn.execute(
            f"SELECT card_id FROM cards WHERE {where}", params).fetchall()

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) AS cnt FROM cards").fetchone()["cnt"]

    def due_count(self, now: datetime) -> int:
        return self.conn.execute(
            "SELECT COUNT(*) AS cnt FROM cards WHERE due_date <= ?",
            (format_time(now),)).fetchone()["cnt"]

    def notes(self) -> list[sqlite3.Row]:
        return self.conn.execute("""
            SELECT note_path, COUNT(*) AS cnt FROM cards
            GROUP BY note_path ORDER BY note_path
        """).fetchall()
