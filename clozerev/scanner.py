"""Note scanning: find markdown files and load one card per cloze group."""

import pathlib
import re
import sys
from datetime import datetime, timezone

from clozerev.cloze import DEFAULT_PATTERN, cloze_groups
from clozerev.config import parse_frontmatter
from clozerev.models import Card

_HEADING_RE = re.compile(r'^#\s+(.+?)\s*#*\s*$', re.MULTILINE)


def note_title(path: pathlib.Path, meta: dict, body: str) -> str:
    if meta.get("title"):
        return str(meta["title"])
    m = _HEADING_RE.search(body)
    if m:
        return m.group(1)
    return path.stem


def cards_from_note(path: str, text: str, pattern: re.Pattern = DEFAULT_PATTERN,
                    now: datetime | None = None) -> list[Card]:
    """Build one card per distinct cloze group in a note, due at ``now``."""
    meta, body = parse_frontmatter(text)
    if now is None:
        now = datetime.now(timezone.utc)
    title = note_title(pathlib.Path(path), meta, body)
    return [
        Card(id=f"{path}#c{group}", cloze_id=f"c{group}", note_path=path,
             title=title, content=body, due_date=now)
        for group in cloze_groups(body, pattern)
    ]


def scan_notes(paths: list[pathlib.Path], pattern: re.Pattern = DEFAULT_PATTERN,
               now: datetime | None = None) -> list[Card]:
    """Scan files and directories for markdown notes containing clozes.

    Directories are walked recursively, skipping hidden ones. Unreadable
    files are reported on stderr and skipped.
    """
    cards: list[Card] = []
    seen_paths: set[str] = set()
    for path in paths:
        path = path.resolve()
        if path.is_file() and path.suffix == ".md":
            _scan_md_file(path, pattern, now, cards, seen_paths)
        elif path.is_dir():
            _scan_directory(path, pattern, now, cards, seen_paths)
    return cards


def _scan_md_file(path: pathlib.Path, pattern, now, cards: list, seen_paths: set):
    if str(path) in seen_paths:
        return
    seen_paths.add(str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Warning: cannot read {path}: {e}", file=sys.stderr)
        return
    cards.extend(cards_from_note(str(path), text, pattern, now))


def _scan_directory(dirpath: pathlib.Path, pattern, now, cards: list, seen_paths: set):
    try:
        entries = sorted(dirpath.iterdir())
    except PermissionError:
        return
    for item in entries:
        if item.is_dir() and not item.name.startswith("."):
            _scan_directory(item, pattern, now, cards, seen_paths)
        elif item.is_file() and item.suffix == ".md":
            _scan_md_file(item, pattern, now, cards, seen_paths)
