"""Pull request references in free-form chat text.

Three forms are recognised, tried in this order and the first match wins:

  https://github.com/owner/repo/pull/123
  owner/repo#123
  #123            (only with a configured default repository)
"""

from __future__ import annotations

import re

from prstamp_core.models import PullRequestRef

_URL_RE = re.compile(r"https://github\.com/([^/]+)/([^/]+)/pull/([0-9]+)")
_SHORT_REF_RE = re.compile(r"([^/\s]+)/([^#\s]+)#([0-9]+)")
_NUMBER_RE = re.compile(r"#([0-9]+)")
_APPROVE_RE = re.compile(r"\bapprove\b", re.IGNORECASE)


def parse_repo_slug(value: str | None) -> tuple[str, str] | None:
    """Split ``owner/repo`` into its parts, or None if it is not of that shape."""
    if not value:
        return None
    parts = value.strip().split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def extract_reference(text: str | None, default_repo: str | None = None) -> PullRequestRef | None:
    """Return the first pull request reference found in ``text``.

    The bare ``#123`` form resolves against ``default_repo`` and yields
    nothing when no (well-formed) default is configured. Never raises.
    """
    if not text:
        return None

    for pattern in (_URL_RE, _SHORT_REF_RE):
        match = pattern.search(text)
        if match:
            owner, repo, number = match.groups()
            return PullRequestRef(owner=owner, repo=repo, number=int(number, 10))

    default = parse_repo_slug(default_repo)
    if default is None:
        return None
    match = _NUMBER_RE.search(text)
    if match:
        return PullRequestRef(owner=default[0], repo=default[1], number=int(match.group(1), 10))
    return None


def has_approve_keyword(text: str | None) -> bool:
    return bool(text) and _APPROVE_RE.search(text) is not None
