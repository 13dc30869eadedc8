"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest

from markbridge.main import PAIR_NAMES, main, parse_args


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every CLI test away from any real .env file."""
    monkeypatch.chdir(tmp_path)
    for name in ("SLACK_BOT_TOKEN", "LINKIFY_MAP", "LOG_LEVEL", "MAX_MESSAGE_LENGTH"):
        monkeypatch.delenv(name, raising=False)


class TestParseArgs:
    """Test argument parsing."""

    def test_convert(self):
        args = parse_args(["convert", "--pair", "slack-bitbucket", "in.txt"])
        assert args.command == "convert"
        assert PAIR_NAMES[args.pair].name == "SLACK_TO_BITBUCKET"
        assert str(args.file) == "in.txt"

    def test_unknown_pair(self):
        with pytest.raises(SystemExit):
            parse_args(["convert", "--pair", "github-bitbucket"])


class TestMain:
    """Test main."""

    def test_convert_file(self, tmp_path, capsys):
        path = tmp_path / "body.md"
        path.write_text("**hi** #2")

        status = main(
            [
                "convert",
                "--pair",
                "github-slack",
                "--thread-url",
                "https://github.com/o/r/pull/1",
                str(path),
            ]
        )

        assert status == 0
        assert capsys.readouterr().out == "*hi* <https://github.com/o/r/pull/2|#2>"

    def test_convert_with_identities(self, tmp_path, capsys):
        identities = tmp_path / "identities.json"
        identities.write_text(json.dumps({"github": {"U1": "@octocat"}}))
        path = tmp_path / "message.txt"
        path.write_text("<@U1> *lgtm*")

        status = main(
            ["convert", "--pair", "slack-github", "--identities", str(identities), str(path)]
        )

        assert status == 0
        assert capsys.readouterr().out == "@octocat **lgtm**"

    def test_title(self, monkeypatch, capsys):
        monkeypatch.setenv("LINKIFY_MAP", "PROJ=https://jira.example.com/browse")

        status = main(["title", "--thread-url", "https://github.com/o/r/pull/1", "PROJ-3 #4"])

        assert status == 0
        assert capsys.readouterr().out == (
            "<https://jira.example.com/browse/PROJ-3|PROJ-3> "
            "<https://github.com/o/r/pull/4|#4>\n"
        )

    def test_slack_token_enables_channel_lookups(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-test")
        path = tmp_path / "message.txt"
        path.write_text("<#C1>")

        with patch("markbridge.main.SlackChannelDirectory") as directory_cls:
            directory = directory_cls.from_token.return_value
            directory.channel_name.return_value = "general"
            directory.workspace_url.return_value = None
            status = main(["convert", "--pair", "slack-github", str(path)])

        assert status == 0
        directory_cls.from_token.assert_called_once_with("xoxb-test")
        assert capsys.readouterr().out == "#general"

    def test_missing_identities_file(self, tmp_path):
        path = tmp_path / "message.txt"
        path.write_text("hi")
        status = main(
            [
                "convert",
                "--pair",
                "slack-github",
                "--identities",
                str(tmp_path / "missing.json"),
                str(path),
            ]
        )
        assert status == 1

    def test_invalid_config(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        assert main(["title", "Fix"]) == 1
