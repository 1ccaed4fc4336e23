"""Wiring between configuration, the dispatcher and slack_bolt."""

from __future__ import annotations

import logging

from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from prstamp_core.gh.pull_request import PullRequestGateway
from prstamp_core.slack.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def build_dispatcher(config: dict, gateway: PullRequestGateway | None = None) -> Dispatcher:
    if gateway is None:
        gateway = PullRequestGateway(token=config["github_token"])
    return Dispatcher(
        gateway,
        default_repo=config.get("default_repo"),
        command_name=config["slash_command"],
    )


def build_app(config: dict, dispatcher: Dispatcher) -> AsyncApp:
    """Create the Bolt app with the dispatcher's handlers registered.

    Socket Mode does not verify request signatures, so the signing secret is
    only required when serving HTTP.
    """
    signing_secret = config.get("slack_signing_secret")
    app = AsyncApp(
        token=config["slack_bot_token"],
        signing_secret=signing_secret,
        request_verification_enabled=bool(signing_secret),
    )
    dispatcher.register(app)
    return app


async def run_socket_mode(app: AsyncApp, app_token: str) -> None:
    handler = AsyncSocketModeHandler(app, app_token)
    logger.info("Connecting to Slack over Socket Mode")
    await handler.start_async()


def run_http(app: AsyncApp, port: int) -> None:
    logger.info("Listening for Slack events on port %d", port)
    app.start(port=port)
