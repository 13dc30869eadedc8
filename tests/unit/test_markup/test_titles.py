"""Tests for pull request title linkification."""

from unittest.mock import patch

from markbridge.markup import titles
from markbridge.markup.context import ConversionContext
from markbridge.markup.titles import build_issue_link, linkify_issue_keys, linkify_title

JIRA = "https://jira.example.com/browse"


class TestLinkifyIssueKeys:
    """Test linkify_issue_keys."""

    def test_single_id(self):
        assert linkify_issue_keys("PROJ-123: fix", {"PROJ": JIRA}) == (
            f"<{JIRA}/PROJ-123|PROJ-123>: fix"
        )

    def test_single_id_twice(self):
        assert linkify_issue_keys("PROJ-1 and PROJ-1", {"PROJ": JIRA}) == (
            f"<{JIRA}/PROJ-1|PROJ-1> and <{JIRA}/PROJ-1|PROJ-1>"
        )

    def test_default_prefix(self):
        linkify_map = {"PROJ": JIRA, "default": "https://other.example.com/"}
        assert linkify_issue_keys("ABC-9", linkify_map) == (
            "<https://other.example.com/ABC-9|ABC-9>"
        )

    def test_multiple_no_default(self):
        assert linkify_issue_keys("PROJ-1 ABC-2", {"PROJ": JIRA}) == (
            f"<{JIRA}/PROJ-1|PROJ-1> ABC-2"
        )

    def test_prefix_is_case_sensitive(self):
        assert linkify_issue_keys("proj-1", {"PROJ": JIRA}) == "proj-1"

    def test_empty_map(self):
        assert linkify_issue_keys("PROJ-1", {}) == "PROJ-1"

    def test_invalid_base_url(self):
        assert linkify_issue_keys("PROJ-1", {"PROJ": "not a url"}) == "PROJ-1"


def test_build_issue_link_trims_slash():
    assert build_issue_link(JIRA + "/", "PROJ-1") == f"{JIRA}/PROJ-1"


class TestLinkifyTitle:
    """Test linkify_title."""

    def test_keys_and_references(self):
        context = ConversionContext(
            thread_url="https://github.com/owner/repo/pull/1",
            linkify_map={"PROJ": JIRA},
        )
        assert linkify_title("Fix #5 (PROJ-7)", context) == (
            "Fix <https://github.com/owner/repo/pull/5|#5> "
            f"(<{JIRA}/PROJ-7|PROJ-7>)"
        )

    def test_nothing_recognized(self):
        context = ConversionContext(thread_url="https://github.com/owner/repo/pull/1")
        assert linkify_title("Refactor parser", context) == "Refactor parser"

    def test_malformed_thread_url(self):
        context = ConversionContext(thread_url="not-a-url")
        assert linkify_title("Fix #5", context) == "Fix #5"

    def test_default_only_map(self):
        context = ConversionContext(linkify_map={"default": "https://x/browse/"})
        assert linkify_title("PROJ-1: fix", context) == "<https://x/browse/PROJ-1|PROJ-1>: fix"

    def test_reference_scoped_to_owner(self):
        context = ConversionContext(thread_url="https://hosta.example/org/repo/pull/9")
        assert linkify_title("other#5", context) == (
            "<https://hosta.example/org/other/pull/5|other#5>"
        )

    def test_repeated_key_looked_up_once(self):
        context = ConversionContext(linkify_map={"PROJ": JIRA})
        with patch.object(titles, "issue_link", wraps=titles.issue_link) as lookup:
            result = linkify_title("PROJ-1, PROJ-1", context)
        assert result.count(f"<{JIRA}/PROJ-1|PROJ-1>") == 2
        lookup.assert_called_once()
