"""Slack delivery for on-duty reminders."""
from __future__ import annotations

import logging
from typing import Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

logger = logging.getLogger(__name__)

USERNAME = "rotator"
ICON_EMOJI = ":umbrella:"


class SlackNotifier:
    def __init__(self, token: str, channel: str = "", *, client: Optional[WebClient] = None) -> None:
        self.channel = channel
        self.client = client or WebClient(token=token)

    def post(self, message: str, destination: str = "") -> None:
        channel = destination or self.channel
        if not channel:
            logger.debug("No Slack channel configured, not posting")
            return
        try:
            response = self.client.chat_postMessage(
                channel=channel, text=message, username=USERNAME, icon_emoji=ICON_EMOJI
            )
        except (SlackApiError, OSError) as exc:
            logger.warning("Slack post to %s failed: %s", channel, exc)
            return
        logger.debug("Message sent to channel %s at %s", response.get("channel"), response.get("ts"))

    def direct_message(self, user_id: str, message: str) -> None:
        """DM ``user_id``; people without a Slack id get nothing."""
        if not user_id:
            logger.debug("No Slack id, not sending direct message")
            return
        try:
            opened = self.client.conversations_open(users=user_id)
        except (SlackApiError, OSError) as exc:
            logger.warning("Couldn't open IM channel with %s: %s", user_id, exc)
            return
        self.post(message, opened["channel"]["id"])


__all__ = ["SlackNotifier"]
