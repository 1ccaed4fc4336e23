"""Block Kit payloads for pull request snapshots and approval outcomes.

Each function returns keyword arguments for ``say``: a plain ``text``
fallback (used for notifications) and, where there is rich content, ``blocks``.
"""

from __future__ import annotations

from prstamp_core.models import ApprovalOutcome, PullRequestSnapshot


def _mrkdwn_section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _link_button(label: str, url: str, **extra) -> dict:
    button = {"type": "button", "text": {"type": "plain_text", "text": label}, "url": url, **extra}
    return {"type": "actions", "elements": [button]}


def _mergeable_label(mergeable: bool | None) -> str:
    if mergeable is None:
        return "Checking..."
    return "✅" if mergeable else "❌"


def _mentions(logins: list[str]) -> str:
    return ", ".join(f"@{login}" for login in logins)


def format_snapshot(snapshot: PullRequestSnapshot) -> dict:
    state = f"{snapshot.state} (Draft)" if snapshot.draft else snapshot.state
    summary = (
        "*📋 PR Details:*\n"
        f"• *Title:* {snapshot.title}\n"
        f"• *Author:* @{snapshot.author}\n"
        f"• *State:* {state}\n"
        f"• *Mergeable:* {_mergeable_label(snapshot.mergeable)}"
    )
    blocks = [_mrkdwn_section(summary)]

    if snapshot.reviews:
        # Only approvals and change requests are summarised; comments are noise here.
        approvals = snapshot.reviewers_in_state("APPROVED")
        changes_requested = snapshot.reviewers_in_state("CHANGES_REQUESTED")
        lines = ["*Reviews:*"]
        if approvals:
            lines.append(f"• ✅ {len(approvals)} approval(s): {_mentions(approvals)}")
        if changes_requested:
            lines.append(f"• 🔄 {len(changes_requested)} changes requested: {_mentions(changes_requested)}")
        blocks.append(_mrkdwn_section("\n".join(lines)))

    blocks.append(_link_button("🔗 View PR on GitHub", snapshot.html_url, action_id="view_pr"))
    return {"text": f"PR: {snapshot.title}", "blocks": blocks}


def format_outcome(outcome: ApprovalOutcome, url: str) -> dict:
    if not outcome.success:
        return {"text": f"❌ {outcome.message}"}
    return {
        "text": f"✅ {outcome.message}",
        "blocks": [
            _mrkdwn_section(f"✅ *{outcome.message}*"),
            _link_button("🔗 View PR", url, style="primary"),
        ],
    }
