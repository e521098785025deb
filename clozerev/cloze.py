"""Cloze parser: masks the active cloze group, resolves the others to answers.

Syntax:
    {{c1::answer}}      span in group 1
    {{c2::other}}       span in group 2

Every span in the active group is wrapped in a hidden marker; spans in any
other group are replaced by their bare answer text. Unterminated spans never
match and are left as literal text.
"""

import re

from clozerev.models import ClozeSpan

DEFAULT_PATTERN_SOURCE = r"{{c(\d+)::(.*?)}}"
DEFAULT_PATTERN = re.compile(r"\{\{c(\d+)::(.*?)\}\}")

_PREFIX_RE = re.compile(r"^\D+")
_HIDDEN_CLASS = 'class="cloze is-hidden"'
_REVEALED_CLASS = 'class="cloze is-revealed"'


def compile_pattern(source: str | None) -> re.Pattern:
    """Compile a configured cloze pattern (group 1 = number, group 2 = answer)."""
    if not source or source == DEFAULT_PATTERN_SOURCE:
        return DEFAULT_PATTERN
    try:
        pattern = re.compile(source)
    except re.error as e:
        raise ValueError(f"Invalid cloze pattern {source!r}: {e}") from e
    if pattern.groups < 2:
        raise ValueError(f"Cloze pattern {source!r} needs two capture groups")
    return pattern


def normalize_group(group_id: str) -> str:
    return _PREFIX_RE.sub("", str(group_id).strip())


def find_clozes(content: str, pattern: re.Pattern = DEFAULT_PATTERN) -> list[ClozeSpan]:
    return [ClozeSpan(group=m.group(1), answer=m.group(2), start=m.start(), end=m.end())
            for m in pattern.finditer(content)]


def cloze_groups(content: str, pattern: re.Pattern = DEFAULT_PATTERN) -> list[str]:
    """Distinct group numbers in order of first appearance."""
    seen: list[str] = []
    for span in find_clozes(content, pattern):
        if span.group not in seen:
            seen.append(span.group)
    return seen


def render(content: str, active_group_id: str,
           pattern: re.Pattern = DEFAULT_PATTERN) -> str:
    """Render content for review with the active group masked."""
    active = normalize_group(active_group_id)

    def replace(m):
        group, answer = m.group(1), m.group(2)
        if group == active:
            return f'<span {_HIDDEN_CLASS} data-cloze-id="{group}">{answer}</span>'
        return answer

    return pattern.sub(replace, content)


def reveal(rendered: str) -> str:
    """Flip every hidden cloze marker in rendered output to revealed."""
    return rendered.replace(_HIDDEN_CLASS, _REVEALED_CLASS)
