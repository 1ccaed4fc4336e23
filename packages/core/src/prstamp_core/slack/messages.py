"""Fixed texts the bot sends back to Slack."""

from __future__ import annotations

DEFAULT_COMMAND = "/approve-pr"

APPROVE_PROMPT = "💡 Type `approve` in your message to approve this PR."
PROCESSING = "⏳ Processing approval request..."
COULD_NOT_FETCH = "❌ Could not fetch PR details. Please check the PR reference."
NOT_FOUND = (
    "❌ No PR reference found in the message. "
    "Please mention a PR URL or reference (e.g., `owner/repo#123`)"
)
INVALID_FORMAT = "❌ Invalid PR reference format. Please use a valid GitHub PR URL or reference."


def _section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def help_message(command: str = DEFAULT_COMMAND) -> dict:
    text = (
        "👋 *Hi! I'm the PR Approval Bot*\n\n"
        "Reply to a message containing a PR reference and mention me with `approve` to approve it.\n\n"
        "*Usage:*\n"
        "• Reply to a PR message: `approve @bot` or `@bot approve`\n"
        "• Or mention me directly: `@bot approve owner/repo#123`\n"
        f"• Or use the slash command: `{command} owner/repo#123`\n\n"
        "*Supported formats:*\n"
        "• GitHub URL: `https://github.com/owner/repo/pull/123`\n"
        "• Reference: `owner/repo#123`\n"
        "• PR number: `#123` (requires DEFAULT_REPO)"
    )
    return {"text": "PR Approval Bot Help", "blocks": [_section(text)]}


def usage_message(command: str = DEFAULT_COMMAND) -> dict:
    text = (
        "*Please provide a PR reference.*\n\n"
        "*Usage:*\n"
        f"`{command} https://github.com/owner/repo/pull/123`\n"
        f"`{command} owner/repo#123`"
    )
    return {"text": f"Usage: {command} [PR reference]", "blocks": [_section(text)]}


def error_message(action: str, exc: BaseException) -> str:
    return f"❌ Error processing {action}: {exc}"
