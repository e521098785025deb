"""Configuration helpers: data directory discovery, settings, frontmatter parsing."""

import os
import pathlib
import re
import sys
from datetime import datetime

from clozerev.cloze import DEFAULT_PATTERN, DEFAULT_PATTERN_SOURCE, compile_pattern

DEFAULT_SETTINGS = {
    "max_reviews_per_day": 50,
    "cloze_pattern": DEFAULT_PATTERN_SOURCE,
    "review_start_hour": 6,
    "review_end_hour": 22,
    "enable_keyboard_shortcuts": True,
    "show_progress_bar": True,
}


def get_data_dir() -> pathlib.Path:
    env = os.environ.get("CLOZEREV_DIR")
    if env:
        print(f"Using CLOZEREV_DIR={env}", file=sys.stderr)
        return pathlib.Path(env)
    config_path = pathlib.Path.home() / ".config" / "clozerev" / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip())
    return pathlib.Path.home() / ".local" / "share" / "clozerev"


def load_settings(data_dir: pathlib.Path) -> dict:
    settings_path = data_dir / "settings.toml"
    settings = dict(DEFAULT_SETTINGS)
    if settings_path.exists():
        settings.update(_parse_toml_simple(settings_path.read_text()))
    return settings


def _parse_toml_simple(text: str) -> dict:
    """Minimal TOML parser for flat key=value files."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith("'") and v.endswith("'"):
                # literal string, no escapes
                v = v[1:-1]
            elif v.startswith('"') and v.endswith('"'):
                v = v[1:-1].replace("\\\\", "\\")
            elif v.lstrip("-").isdigit():
                v = int(v)
            elif v == "true":
                v = True
            elif v == "false":
                v = False
            result[k] = v
    return result


def parse_frontmatter(text: str) -> tuple[dict, str]:
    """Parse YAML frontmatter from markdown. Returns (metadata, body)."""
    if not text.startswith("---"):
        return {}, text
    end = text.find("\n---", 3)
    if end == -1:
        return {}, text
    yaml_block = text[3:end].strip()
    body = text[end + 4:].strip()
    meta = {}
    for line in yaml_block.splitlines():
        line = line.strip()
        if ":" in line:
            k, v = line.split(":", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                v = [x.strip().strip('"').strip("'") for x in v[1:-1].split(",") if x.strip()]
            elif v.startswith('"') and v.endswith('"'):
                v = v[1:-1]
            elif v.startswith("'") and v.endswith("'"):
                v = v[1:-1]
            elif v.lower() == "true":
                v = True
            elif v.lower() == "false":
                v = False
            elif v.isdigit():
                v = int(v)
            meta[k] = v
    return meta, body


def within_review_hours(settings: dict, now: datetime) -> bool:
    """Whether ``now`` falls in [review_start_hour, review_end_hour).

    A start later than the end wraps past midnight; equal bounds mean the
    gate is always open.
    """
    start = int(settings.get("review_start_hour", DEFAULT_SETTINGS["review_start_hour"]))
    end = int(settings.get("review_end_hour", DEFAULT_SETTINGS["review_end_hour"]))
    hour = now.hour
    if start == end:
        return True
    if start < end:
        return start <= hour < end
    return hour >= start or hour < end


def cloze_pattern(settings: dict) -> re.Pattern:
    source = settings.get("cloze_pattern")
    try:
        return compile_pattern(source)
    except ValueError as e:
        print(f"Warning: {e}; using default cloze pattern", file=sys.stderr)
        return DEFAULT_PATTERN
