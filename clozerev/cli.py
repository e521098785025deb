"""CLI: command-line interface for clozerev."""

import argparse
import pathlib
import re
import sys
from datetime import datetime, timezone

from clozerev.app import App
from clozerev.models import Quality
from clozerev.review_session import OutsideReviewHours, ReviewSession
from clozerev.scheduler import next_intervals

_HIDDEN_RE = re.compile(r'<span class="cloze is-hidden" data-cloze-id="[^"]*">(.*?)</span>')
_REVEALED_RE = re.compile(r'<span class="cloze is-revealed" data-cloze-id="[^"]*">(.*?)</span>')

_SHORTCUTS = {"1": Quality.FORGOT, "2": Quality.SKIP, "3": Quality.REMEMBERED}
_WORDS = {"forgot": Quality.FORGOT, "skip": Quality.SKIP, "remembered": Quality.REMEMBERED}


def to_terminal(rendered: str) -> str:
    """Draw cloze markers as plain text: blanks while hidden, brackets once revealed."""
    text = _HIDDEN_RE.sub("[…]", rendered)
    return _REVEALED_RE.sub(r"[\1]", text)


def progress_bar(done: int, total: int, width: int = 20) -> str:
    filled = int(width * done / total) if total else width
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def _print_card(session: ReviewSession, settings: dict):
    req = session.render_request()
    remaining, reviewed = session.progress
    line = f"{remaining} + {reviewed}"
    if settings.get("show_progress_bar", True):
        line = f"{progress_bar(session.queue.position, len(session.queue))} {line}"
    print()
    print(line)
    print(" › ".join(p.removesuffix(".md") for p in pathlib.PurePath(req.note_path).parts[-2:]))
    if req.title:
        print(f"== {req.title} ==")
    print(to_terminal(req.content))


def _grade_prompt(session: ReviewSession, settings: dict) -> str:
    intervals = next_intervals(session.current_card)
    labels = [f"forgot ({intervals[Quality.FORGOT]}d)",
              f"skip ({intervals[Quality.SKIP]}d)",
              f"remembered ({intervals[Quality.REMEMBERED]}d)"]
    if settings.get("enable_keyboard_shortcuts", True):
        labels = [f"{k}={label}" for k, label in zip(_SHORTCUTS, labels)]
    return ", ".join(labels) + ", q=quit > "


def parse_answer(answer: str, settings: dict) -> Quality | None:
    answer = answer.strip().lower()
    if settings.get("enable_keyboard_shortcuts", True) and answer in _SHORTCUTS:
        return _SHORTCUTS[answer]
    return _WORDS.get(answer)


def _read(read, prompt: str) -> str | None:
    try:
        return read(prompt).strip().lower()
    except EOFError:
        return None


def review_loop(session: ReviewSession, settings: dict, read=input):
    """Drive a session from terminal input until it completes or the user quits."""
    session.start()
    while not session.is_complete:
        _print_card(session, settings)
        answer = _read(read, "enter=reveal, " + _grade_prompt(session, settings))
        if answer == "":
            session.reveal()
            print(to_terminal(session.render_request().content))
            answer = _read(read, _grade_prompt(session, settings))
        if answer is None or answer == "q":
            session.close()
            break
        quality = parse_answer(answer, settings)
        if quality is None:
            print(f"Unrecognized answer: {answer!r}", file=sys.stderr)
            continue
        session.submit_feedback(quality)

    summary = session.summary
    if session.queue.exhausted:
        print("\nReview complete!")
    print(f"Reviewed: {summary.reviewed}  remembered: {summary.remembered}  "
          f"forgot: {summary.forgot}  skipped: {summary.skipped}")
    if summary.reviewed:
        print(f"Accuracy: {summary.accuracy:.0%}")


def cmd_scan(args, app: App):
    app.init_db()

    paths = []
    if args.path:
        for p in args.path:
            paths.append(pathlib.Path(p).resolve())
    else:
        paths.append(pathlib.Path.cwd())

    print(f"Scanning {len(paths)} path(s)...")
    cards = app.scan(paths)
    notes = {c.note_path for c in cards}
    print(f"Found {len(cards)} cards from {len(notes)} note(s)")

    stats = app.sync(cards, scanned_paths=paths)
    print(f"Synced: {stats['new']} new, {stats['updated']} updated, "
          f"{stats['deleted']} deleted, {stats['unchanged']} unchanged")
    app.close()


def cmd_review(args, app: App):
    app.init_db()

    if args.path:
        paths = [pathlib.Path(p).resolve() for p in args.path]
        stats = app.sync(app.scan(paths), scanned_paths=paths)
        print(f"Scanned: {stats['new']} new, {stats['updated']} updated, "
              f"{stats['deleted']} deleted, {stats['unchanged']} unchanged")

    try:
        session = app.open_session(limit=args.limit)
    except OutsideReviewHours as e:
        print(str(e))
        app.close()
        return

    if len(session.queue) == 0:
        print("No cards due.")
        app.close()
        return

    print(f"{len(session.queue)} card(s) due")
    review_loop(session, app.settings)
    app.close()


def cmd_status(args, app: App):
    db_path = app.db_path
    if not db_path.exists():
        print("No database found. Run 'clozerev scan' first.")
        return

    app.init_db()
    store = app.store
    now = datetime.now(timezone.utc)

    print(f"Cards:          {store.count()}")
    print(f"Due now:        {store.due_count(now)}")

    notes = store.notes()
    if notes:
        print("\nNotes:")
        for n in notes:
            print(f"  {n['note_path']}: {n['cnt']} cards")

    app.close()


def main():
    parser = argparse.ArgumentParser(prog="clozerev", description="Cloze spaced repetition")
    subparsers = parser.add_subparsers(dest="command")

    p_scan = subparsers.add_parser("scan", help="Scan notes and sync cards to DB")
    p_scan.add_argument("path", nargs="*", help="Paths to scan (default: cwd)")

    p_review = subparsers.add_parser("review", help="Review due cards in the terminal")
    p_review.add_argument("path", nargs="*", help="Paths to scan before reviewing")
    p_review.add_argument("--limit", type=int, help="Max cards this session "
                                                     "(default: max_reviews_per_day)")

    subparsers.add_parser("status", help="Show card counts")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    app = App()
    if not app.data_dir.exists():
        app.data_dir.mkdir(parents=True, exist_ok=True)
        print(f"Created data directory: {app.data_dir}")

    if args.command == "scan":
        cmd_scan(args, app)
    elif args.command == "review":
        cmd_review(args, app)
    elif args.command == "status":
        cmd_status(args, app)
