"""Error kinds recognised at the Slack and GitHub boundaries.

The dispatcher decides what to do with a failure by matching on
``ErrorKind`` rather than probing the shape of whatever was raised.
"""

from __future__ import annotations

from enum import Enum

from github import GithubException
from requests import RequestException
from slack_sdk.errors import SlackApiError

# Slack API error codes meaning "this bot cannot talk in that channel".
_CHANNEL_ACCESS_CODES = frozenset({"channel_not_found", "not_in_channel", "is_archived"})

CHANNEL_ACCESS_HINTS = (
    "The bot may not have access to the channel.",
    "Invite the bot to the channel: /invite @<bot-name>",
    "Private channels require an explicit invitation.",
    "Check that the app has the channels:history and chat:write scopes.",
)


class ErrorKind(str, Enum):
    CHANNEL_NOT_ACCESSIBLE = "channel_not_accessible"
    HOSTING_API = "hosting_api"
    UNEXPECTED = "unexpected"


class BridgeError(Exception):
    """Base class for errors raised by prstamp itself."""

    kind = ErrorKind.UNEXPECTED


class ChannelNotAccessibleError(BridgeError):
    """The bot cannot read or post in a channel; further replies are pointless."""

    kind = ErrorKind.CHANNEL_NOT_ACCESSIBLE

    def __init__(self, channel: str | None, code: str = "channel_not_found"):
        self.channel = channel
        self.code = code
        super().__init__(f"Cannot access channel {channel or '<unknown>'}: {code}")


def slack_error_code(exc: SlackApiError) -> str | None:
    """Return the ``error`` field of a Slack API response, if any."""
    response = getattr(exc, "response", None)
    if response is None:
        return None
    try:
        return response.get("error")
    except AttributeError:
        return None


def classify_slack_error(exc: SlackApiError) -> ErrorKind:
    if slack_error_code(exc) in _CHANNEL_ACCESS_CODES:
        return ErrorKind.CHANNEL_NOT_ACCESSIBLE
    return ErrorKind.UNEXPECTED


def error_kind(exc: BaseException) -> ErrorKind:
    """Tag any exception that reaches a trigger handler."""
    if isinstance(exc, BridgeError):
        return exc.kind
    if isinstance(exc, SlackApiError):
        return classify_slack_error(exc)
    if isinstance(exc, (GithubException, RequestException)):
        return ErrorKind.HOSTING_API
    return ErrorKind.UNEXPECTED
