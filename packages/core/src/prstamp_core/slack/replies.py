"""Best-effort replies into a Slack channel or thread."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from slack_sdk.errors import SlackApiError, SlackClientError

from prstamp_core.errors import ChannelNotAccessibleError, ErrorKind, classify_slack_error, slack_error_code

logger = logging.getLogger(__name__)


class Replier:
    """Sends replies for one trigger, always into the same thread.

    A channel-access failure raises ChannelNotAccessibleError so the caller
    stops; any other Slack client failure is logged and the trigger carries on.
    """

    def __init__(self, say: Callable[..., Awaitable], channel: str | None, thread_ts: str | None = None):
        self._say = say
        self.channel = channel
        self.thread_ts = thread_ts

    async def send(self, text: str, blocks: list[dict] | None = None) -> None:
        payload: dict = {"text": text}
        if blocks:
            payload["blocks"] = blocks
        if self.thread_ts:
            payload["thread_ts"] = self.thread_ts

        try:
            await self._say(**payload)
        except SlackApiError as e:
            if classify_slack_error(e) is ErrorKind.CHANNEL_NOT_ACCESSIBLE:
                raise ChannelNotAccessibleError(self.channel, slack_error_code(e)) from e
            logger.error("Failed to send message to %s: %s", self.channel, slack_error_code(e) or e)
        except SlackClientError as e:
            logger.error("Failed to send message to %s: %s", self.channel, e)
