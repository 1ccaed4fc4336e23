"""Slack entry points: the app mention and the approval slash command.

Each trigger is handled on its own with no state carried between triggers.
The flow is always parse → fetch snapshot → reply → (maybe) approve → reply.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from slack_sdk.errors import SlackApiError

from prstamp_core.errors import CHANNEL_ACCESS_HINTS, ErrorKind, classify_slack_error, error_kind, slack_error_code
from prstamp_core.gh.pull_request import PullRequestGateway
from prstamp_core.gh.reference import extract_reference, has_approve_keyword
from prstamp_core.models import DispatchContext, PullRequestRef
from prstamp_core.slack import messages
from prstamp_core.slack.blocks import format_outcome, format_snapshot
from prstamp_core.slack.replies import Replier

logger = logging.getLogger(__name__)


def _log_channel_hints(channel: str | None) -> None:
    logger.error("Cannot send message: bot does not have access to channel %s", channel or "<unknown>")
    for hint in CHANNEL_ACCESS_HINTS:
        logger.error("  - %s", hint)


class Dispatcher:
    """Turns Slack triggers into GitHub lookups and approvals."""

    def __init__(
        self,
        gateway: PullRequestGateway,
        default_repo: str | None = None,
        command_name: str = messages.DEFAULT_COMMAND,
    ):
        self._gateway = gateway
        self._default_repo = default_repo
        self.command_name = command_name

    def register(self, app) -> None:
        """Attach the handlers to a slack_bolt ``AsyncApp``."""
        app.event("app_mention")(self.handle_mention)
        app.command(self.command_name)(self.handle_command)
        app.error(self.handle_error)

    def _extract(self, text: str | None) -> PullRequestRef | None:
        return extract_reference(text, self._default_repo)

    # ------------------------------------------------------------------
    # Mentions
    # ------------------------------------------------------------------

    async def handle_mention(self, event: dict, client, say) -> None:
        text = event.get("text") or ""
        channel = event.get("channel")
        thread_root = event.get("thread_ts")
        logger.info("Bot mentioned in %s: %s", channel, text)

        context = DispatchContext(
            source_text=text,
            channel=channel,
            reply_target=thread_root or event.get("ts"),
            is_threaded_reply=thread_root is not None,
        )
        replier = Replier(say, channel, context.reply_target)
        try:
            await self._dispatch_mention(context, client, replier)
        except Exception as e:
            await self._report_failure(e, replier, "request")

    async def _dispatch_mention(self, context: DispatchContext, client, replier: Replier) -> None:
        wants_approval = has_approve_keyword(context.source_text)

        if context.is_threaded_reply:
            parent_text = await self._fetch_parent_text(client, context.channel, context.reply_target)
            context = replace(context, parent_text=parent_text)
            ref = self._extract(context.parent_text) or self._extract(context.source_text)
        else:
            ref = self._extract(context.source_text)

        if ref is None:
            if context.is_threaded_reply:
                await replier.send(messages.NOT_FOUND)
            else:
                await replier.send(**messages.help_message(self.command_name))
            return

        await self._show_and_approve(ref, replier, approve=wants_approval)

    async def _fetch_parent_text(self, client, channel: str | None, thread_ts: str) -> str:
        """Text of the thread root, or "" if the history lookup fails."""
        try:
            result = await client.conversations_history(channel=channel, latest=thread_ts, limit=1, inclusive=True)
        except SlackApiError as e:
            if classify_slack_error(e) is ErrorKind.CHANNEL_NOT_ACCESSIBLE:
                logger.warning("Channel not found or bot doesn't have access: %s", channel)
            else:
                logger.error("Error fetching conversation history: %s", slack_error_code(e) or e)
            return ""
        except Exception as e:
            logger.error("Error fetching conversation history: %s", e)
            return ""

        history = result.get("messages") or []
        if not history:
            return ""
        return history[0].get("text") or ""

    # ------------------------------------------------------------------
    # Slash command
    # ------------------------------------------------------------------

    async def handle_command(self, ack, command: dict, say) -> None:
        await ack()

        replier = Replier(say, command.get("channel_id"))
        try:
            text = (command.get("text") or "").strip()
            if not text:
                await replier.send(**messages.usage_message(self.command_name))
                return

            ref = self._extract(text)
            if ref is None:
                await replier.send(messages.INVALID_FORMAT)
                return

            await self._show_and_approve(ref, replier, approve=True)
        except Exception as e:
            await self._report_failure(e, replier, "command")

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    async def _show_and_approve(self, ref: PullRequestRef, replier: Replier, approve: bool) -> None:
        snapshot = await asyncio.to_thread(self._gateway.fetch_snapshot, ref)
        if snapshot is None:
            await replier.send(messages.COULD_NOT_FETCH)
            return

        await replier.send(**format_snapshot(snapshot))

        if not approve:
            await replier.send(messages.APPROVE_PROMPT)
            return

        await replier.send(messages.PROCESSING)
        outcome = await asyncio.to_thread(self._gateway.submit_approval, ref)
        await replier.send(**format_outcome(outcome, ref.html_url))

    async def _report_failure(self, exc: Exception, replier: Replier, action: str) -> None:
        """Tell the user something went wrong, unless we can't reach them at all."""
        if error_kind(exc) is ErrorKind.CHANNEL_NOT_ACCESSIBLE:
            _log_channel_hints(replier.channel)
            return

        logger.exception("Error handling %s in %s", action, replier.channel)
        try:
            await replier.send(messages.error_message(action, exc))
        except Exception as send_error:
            logger.error("Failed to send error message: %s", send_error)

    async def handle_error(self, error: Exception, body: dict | None = None) -> None:
        """Global error handler for anything Bolt itself catches."""
        logger.error("Slack app error: %s", error)
        if error_kind(error) is ErrorKind.CHANNEL_NOT_ACCESSIBLE:
            _log_channel_hints(getattr(error, "channel", None))
