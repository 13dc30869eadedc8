"""Slack channel directory backed by the Slack Web API."""

from typing import Optional

import structlog
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from ..exceptions import IdentityLookupError

logger = structlog.get_logger()


class SlackChannelDirectory:
    """Resolves channel IDs to names, and the workspace's base URL.

    API errors (unknown channel, missing scope) are logged and reported as
    "not found"; transport failures raise ``IdentityLookupError``. Results
    are not cached here: the conversion context's cache does that.
    """

    def __init__(self, client: WebClient) -> None:
        self.client = client

    @classmethod
    def from_token(cls, token: str) -> "SlackChannelDirectory":
        return cls(WebClient(token=token))

    def workspace_url(self) -> Optional[str]:
        try:
            response = self.client.auth_test()
        except SlackApiError as e:
            logger.error("Failed to retrieve Slack auth info", error=str(e))
            return None
        except OSError as e:
            raise IdentityLookupError(f"Slack auth_test request failed: {e}") from e

        url = response.get("url")
        return url if isinstance(url, str) and url else None

    def channel_name(self, channel_id: str) -> Optional[str]:
        try:
            response = self.client.conversations_info(channel=channel_id)
        except SlackApiError as e:
            logger.error(
                "Failed to retrieve Slack channel info",
                channel_id=channel_id,
                error=str(e),
            )
            return None
        except OSError as e:
            raise IdentityLookupError(
                f"Slack conversations_info request failed: {e}"
            ) from e

        channel = response.get("channel") or {}
        name = channel.get("name")
        if not isinstance(name, str) or not name:
            logger.warning(
                "Slack channel name missing or not a string", channel_id=channel_id
            )
            return None
        return name
