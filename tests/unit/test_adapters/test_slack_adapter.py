"""Tests for the Slack channel directory."""

from unittest.mock import MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from markbridge.adapters.slack import SlackChannelDirectory
from markbridge.exceptions import IdentityLookupError
from markbridge.markup.context import ConversionContext
from markbridge.markup.dialects import GITHUB, SLACK
from markbridge.markup.mentions import MentionResolver


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.auth_test.return_value = {"ok": True, "url": "https://acme.slack.com/"}
    client.conversations_info.return_value = {
        "ok": True,
        "channel": {"id": "C1", "name": "general"},
    }
    return client


@pytest.fixture
def directory(mock_client: MagicMock) -> SlackChannelDirectory:
    return SlackChannelDirectory(mock_client)


class TestSlackChannelDirectory:
    """Tests for SlackChannelDirectory."""

    def test_workspace_url(self, directory: SlackChannelDirectory) -> None:
        assert directory.workspace_url() == "https://acme.slack.com/"

    def test_channel_name(
        self, directory: SlackChannelDirectory, mock_client: MagicMock
    ) -> None:
        assert directory.channel_name("C1") == "general"
        mock_client.conversations_info.assert_called_once_with(channel="C1")

    def test_channel_not_found(
        self, directory: SlackChannelDirectory, mock_client: MagicMock
    ) -> None:
        """API errors are reported as "not found"."""
        mock_client.conversations_info.side_effect = SlackApiError(
            "failed", {"ok": False, "error": "channel_not_found"}
        )
        assert directory.channel_name("C404") is None

    def test_auth_error(
        self, directory: SlackChannelDirectory, mock_client: MagicMock
    ) -> None:
        mock_client.auth_test.side_effect = SlackApiError(
            "failed", {"ok": False, "error": "invalid_auth"}
        )
        assert directory.workspace_url() is None

    def test_missing_name(
        self, directory: SlackChannelDirectory, mock_client: MagicMock
    ) -> None:
        mock_client.conversations_info.return_value = {"ok": True, "channel": {}}
        assert directory.channel_name("C1") is None

    def test_transport_failure_raises(
        self, directory: SlackChannelDirectory, mock_client: MagicMock
    ) -> None:
        mock_client.conversations_info.side_effect = ConnectionError("reset")
        with pytest.raises(IdentityLookupError):
            directory.channel_name("C1")

        mock_client.auth_test.side_effect = TimeoutError("timed out")
        with pytest.raises(IdentityLookupError):
            directory.workspace_url()

    def test_transport_failure_degrades_in_conversion(
        self, directory: SlackChannelDirectory, mock_client: MagicMock
    ) -> None:
        """The mention resolver treats a failed lookup as "not found"."""
        mock_client.conversations_info.side_effect = ConnectionError("reset")
        resolver = MentionResolver(SLACK, GITHUB, ConversionContext(channels=directory))
        assert resolver.convert("<#C1>") == "#C1"
