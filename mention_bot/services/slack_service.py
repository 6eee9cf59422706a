"""Slack Web API client wrapper for posting thread replies."""

import ssl

import certifi
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

from ..errors import ReplyDeliveryError
from ..utils.logger import logger


def create_web_client(token: str) -> WebClient:
    """Create a WebClient that verifies certificates against certifi's bundle."""
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    return WebClient(token=token, ssl=ssl_context)


class SlackReplier:
    """Posts messages into Slack threads."""

    def __init__(self, client: WebClient):
        self.client = client

    def reply_in_thread(self, channel: str, thread_ts: str, text: str) -> None:
        """Post text as a reply under thread_ts in channel.

        Raises:
            ReplyDeliveryError: if Slack rejects the message or is unreachable
        """
        try:
            self.client.chat_postMessage(channel=channel, thread_ts=thread_ts, text=text)
        except SlackApiError as e:
            error = e.response.get("error", "unknown_error") if e.response is not None else "unknown_error"
            raise ReplyDeliveryError(
                f"Slack rejected reply: {error}", channel=channel, thread_ts=thread_ts
            ) from e
        except (SlackClientError, OSError) as e:
            raise ReplyDeliveryError(
                f"Could not reach Slack: {e}", channel=channel, thread_ts=thread_ts
            ) from e

        logger.debug(f"Replied in {channel} thread {thread_ts}")
