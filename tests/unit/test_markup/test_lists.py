"""Tests for whitespace and bullet list normalization."""

import re

from markbridge.markup.dialects import GITHUB, SLACK
from markbridge.markup.lists import (
    LEVEL_0_MARKER,
    LEVEL_1_MARKER,
    add_hard_line_breaks,
    markdown_lists_to_slack,
    normalize_whitespace,
    slack_lists_to_markdown,
)


class TestNormalizeWhitespace:
    """Test normalize_whitespace."""

    def test_unifies_line_endings(self):
        assert normalize_whitespace("a\r\nb\rc", GITHUB) == "a\nb\nc"

    def test_empties_whitespace_only_lines(self):
        assert normalize_whitespace("a\n   \nb", GITHUB) == "a\n\nb"

    def test_expands_leading_tabs(self):
        assert normalize_whitespace("\t- nested", GITHUB) == "    - nested"

    def test_drops_blank_lines_between_items(self):
        assert normalize_whitespace("- a\n\n\n- b", GITHUB) == "- a\n- b"

    def test_keeps_blank_line_after_list(self):
        assert normalize_whitespace("- a\n\ntext", GITHUB) == "- a\n\ntext"


class TestMarkdownListsToSlack:
    """Test markdown_lists_to_slack."""

    def test_two_levels(self):
        text = "- one\n- two\n    - nested"
        expected = f"{LEVEL_0_MARKER}one\n{LEVEL_0_MARKER}two\n{LEVEL_1_MARKER}nested"
        assert markdown_lists_to_slack(text, GITHUB) == expected

    def test_markers(self):
        assert LEVEL_0_MARKER == "  •   "
        assert LEVEL_1_MARKER == "          ◦   "

    def test_all_bullet_characters(self):
        text = "* a\n+ b\n- c"
        result = markdown_lists_to_slack(text, GITHUB)
        assert result.split("\n") == [LEVEL_0_MARKER + x for x in "abc"]

    def test_two_space_indent_is_level_one(self):
        result = markdown_lists_to_slack("- a\n  - b", GITHUB)
        assert result == f"{LEVEL_0_MARKER}a\n{LEVEL_1_MARKER}b"

    def test_three_levels_left_unchanged(self):
        text = "- a\n  - b\n    - c"
        assert markdown_lists_to_slack(text, GITHUB) == text

    def test_deep_indent_left_unchanged(self):
        text = "- a\n        - b"
        assert markdown_lists_to_slack(text, GITHUB) == text

    def test_non_list_lines_untouched(self):
        text = "Intro\n- a\nOutro"
        assert markdown_lists_to_slack(text, GITHUB) == f"Intro\n{LEVEL_0_MARKER}a\nOutro"

    def test_horizontal_rule_is_not_a_bullet(self):
        assert markdown_lists_to_slack("---", GITHUB) == "---"


class TestSlackListsToMarkdown:
    """Test slack_lists_to_markdown."""

    def test_two_levels(self):
        text = f"{LEVEL_0_MARKER}one\n{LEVEL_1_MARKER}two"
        assert slack_lists_to_markdown(text, SLACK) == "- one\n    - two"

    def test_unpadded_bullets(self):
        assert slack_lists_to_markdown("• a\n◦ b", SLACK) == "- a\n    - b"

    def test_bullet_mid_line_untouched(self):
        assert slack_lists_to_markdown("a • b", SLACK) == "a • b"


class TestAddHardLineBreaks:
    """Test add_hard_line_breaks."""

    def test_all_but_last_line(self):
        assert add_hard_line_breaks("a\nb\nc") == "a  \nb  \nc"

    def test_blank_lines_untouched(self):
        assert add_hard_line_breaks("a\n\nb") == "a  \n\nb"

    def test_quote_block_is_closed(self):
        text = "111\n> 222\n> 333\n444"
        assert add_hard_line_breaks(text) == "111  \n> 222  \n> 333  \n\n444"

    def test_list_block_is_separated(self):
        text = "aaa\n- 111\n- 222\nbbb"
        assert add_hard_line_breaks(text) == "aaa  \n\n- 111  \n- 222  \n\nbbb"

    def test_skip_pattern(self):
        skip = re.compile(r"^SKIP$")
        assert add_hard_line_breaks("a\nSKIP\nb", skip=skip) == "a  \nSKIP\nb"

    def test_single_line(self):
        assert add_hard_line_breaks("only") == "only"


def test_mixed_nesting_uses_fixed_markers():
    result = markdown_lists_to_slack("- 1\n  - 2\n- 3", GITHUB)
    assert result == f"{LEVEL_0_MARKER}1\n{LEVEL_1_MARKER}2\n{LEVEL_0_MARKER}3"
