"""App: central object that wires together the data dir, settings, store and sessions."""

import pathlib
import sqlite3
from datetime import datetime

from clozerev.config import cloze_pattern, get_data_dir, load_settings
from clozerev.db import CardStore, init_db
from clozerev.review_session import ReviewSession, open_session


class App:
    """Holds all shared state for a clozerev run.

    Usage:
        app = App(data_dir="/path/to/data")
        app.init_db()                    # uses data_dir/clozerev.db
        cards = app.scan([...])
        app.sync(cards, [...])
        session = app.open_session()
        app.close()

    For testing:
        app = App(data_dir=tmp_path)
        app.init_db(":memory:")
    """

    def __init__(self, data_dir: pathlib.Path | str | None = None):
        if data_dir is None:
            data_dir = get_data_dir()
        self.data_dir = pathlib.Path(data_dir)
        self.settings = load_settings(self.data_dir)
        self.conn: sqlite3.Connection | None = None
        self.store: CardStore | None = None

    @property
    def db_path(self) -> pathlib.Path:
        return self.data_dir / "clozerev.db"

    def init_db(self, db_path: pathlib.Path | str | None = None) -> sqlite3.Connection:
        """Initialize (or connect to) the database.

        Args:
            db_path: Path to the SQLite database file, or ":memory:" for
                     in-memory databases (useful for testing). Defaults to
                     data_dir/clozerev.db.
        """
        if db_path is None:
            db_path = self.db_path
        self.conn = init_db(db_path)
        self.store = CardStore(self.conn)
        return self.conn

    def scan(self, paths: list[pathlib.Path], now: datetime | None = None):
        """Scan paths for cloze notes using the configured pattern."""
        from clozerev.scanner import scan_notes
        return scan_notes(paths, cloze_pattern(self.settings), now)

    def sync(self, cards, scanned_paths=None) -> dict:
        return self.store.sync(cards, scanned_paths)

    def open_session(self, clock=None, limit: int | None = None) -> ReviewSession:
        """Open a review session over the store's due cards.

        Every graded card is written back to the store immediately.
        """
        settings = self.settings
        if limit is not None:
            settings = dict(settings, max_reviews_per_day=limit)
        return open_session(self.store, settings, clock=clock, on_graded=self.store.save)

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            self.store = None
