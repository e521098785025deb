"""Tests for the cloze parser."""

import re

import pytest

from clozerev.cloze import (
    DEFAULT_PATTERN, DEFAULT_PATTERN_SOURCE, cloze_groups, compile_pattern,
    find_clozes, normalize_group, render, reveal,
)


def _hidden(group, answer):
    return f'<span class="cloze is-hidden" data-cloze-id="{group}">{answer}</span>'


class TestRender:
    def test_masks_active_group_and_resolves_others(self):
        out = render("A {{c1::B}} C {{c2::D}}", "c1")
        assert out == f"A {_hidden('1', 'B')} C D"

    def test_mirror_image_for_other_group(self):
        out = render("A {{c1::B}} C {{c2::D}}", "c2")
        assert out == f"A B C {_hidden('2', 'D')}"

    def test_group_without_prefix(self):
        assert render("{{c3::x}}", "3") == _hidden("3", "x")

    def test_all_spans_of_group_masked_together(self):
        out = render("{{c1::a}} and {{c1::b}} but {{c2::c}}", "c1")
        assert out == f"{_hidden('1', 'a')} and {_hidden('1', 'b')} but c"

    def test_idempotent(self):
        content = "x {{c1::y}} z {{c2::w}}"
        assert render(content, "c1") == render(content, "c1")

    def test_no_clozes(self):
        assert render("plain text", "c1") == "plain text"

    def test_unterminated_span_left_literal(self):
        content = "A {{c1::B C"
        assert render(content, "c1") == content

    def test_single_brace_close_left_literal(self):
        content = "A {{c1::B} C"
        assert render(content, "c1") == content

    def test_span_does_not_cross_lines(self):
        content = "A {{c1::B\nC}}"
        assert render(content, "c1") == content

    def test_non_greedy(self):
        out = render("{{c1::a}} mid {{c1::b}}", "c2")
        assert out == "a mid b"

    def test_custom_pattern(self):
        pattern = compile_pattern(r"\[\[(\d+)\|(.*?)\]\]")
        out = render("The [[1|sun]] and [[2|moon]]", "c1", pattern)
        assert out == f"The {_hidden('1', 'sun')} and moon"


class TestReveal:
    def test_reveal_flips_hidden_markers(self):
        out = reveal(render("A {{c1::B}}", "c1"))
        assert 'class="cloze is-revealed"' in out
        assert "is-hidden" not in out
        assert ">B</span>" in out

    def test_reveal_idempotent(self):
        once = reveal(render("A {{c1::B}}", "c1"))
        assert reveal(once) == once


class TestParsing:
    def test_find_clozes(self):
        spans = find_clozes("A {{c1::B}} C {{c12::D E}}")
        assert [(s.group, s.answer) for s in spans] == [("1", "B"), ("12", "D E")]
        assert spans[0].start == 2
        assert spans[0].end == 11

    def test_cloze_groups_in_first_appearance_order(self):
        assert cloze_groups("{{c2::x}} {{c1::y}} {{c2::z}}") == ["2", "1"]

    def test_cloze_groups_empty(self):
        assert cloze_groups("nothing here") == []

    def test_normalize_group(self):
        assert normalize_group("c12") == "12"
        assert normalize_group("3") == "3"
        assert normalize_group(" c1 ") == "1"


class TestCompilePattern:
    def test_default_source_returns_default(self):
        assert compile_pattern(DEFAULT_PATTERN_SOURCE) is DEFAULT_PATTERN
        assert compile_pattern(None) is DEFAULT_PATTERN
        assert compile_pattern("") is DEFAULT_PATTERN

    def test_invalid_regex(self):
        with pytest.raises(ValueError, match="Invalid cloze pattern"):
            compile_pattern("(")

    def test_too_few_groups(self):
        with pytest.raises(ValueError, match="two capture groups"):
            compile_pattern(r"\{\{(\d+)\}\}")

    def test_valid_custom(self):
        assert isinstance(compile_pattern(r"<(\d+):(.*?)>"), re.Pattern)
