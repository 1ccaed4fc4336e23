"""GitHub access for pull request snapshots and approvals.

All PyGithub calls are blocking; the Slack dispatcher runs them in a worker
thread. Nothing in here raises on API or transport failures: reads return
None and the approval returns a failed ApprovalOutcome.
"""

from __future__ import annotations

import logging

from github import Auth, Github, GithubException
from requests import RequestException

from prstamp_core.models import ApprovalOutcome, PullRequestRef, PullRequestSnapshot, Review

logger = logging.getLogger(__name__)

_GHOST_LOGIN = "ghost"


def describe_github_error(exc: Exception) -> str:
    """Return the human-readable part of a PyGithub or transport error."""
    if isinstance(exc, GithubException):
        data = exc.data
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        if getattr(exc, "message", None):
            return exc.message
    return str(exc)


def _login(user) -> str:
    # Reviews left by deleted accounts come back with no user.
    return user.login if user is not None else _GHOST_LOGIN


class PullRequestGateway:
    """Thin facade over the GitHub REST API for one authenticated identity."""

    def __init__(self, token: str | None = None, client: Github | None = None):
        if client is None:
            if not token:
                raise ValueError("A GitHub token is required when no client is given.")
            client = Github(auth=Auth.Token(token))
        self._github = client

    def _get_pull(self, ref: PullRequestRef):
        repo = self._github.get_repo(ref.slug, lazy=True)
        return repo.get_pull(ref.number)

    def fetch_snapshot(self, ref: PullRequestRef) -> PullRequestSnapshot | None:
        """Read the pull request and its reviews, or None if either call fails."""
        try:
            pr = self._get_pull(ref)
            reviews = tuple(Review(reviewer=_login(r.user), state=r.state) for r in pr.get_reviews())
            return PullRequestSnapshot(
                title=pr.title,
                state="merged" if pr.merged else pr.state,
                author=_login(pr.user),
                html_url=pr.html_url,
                mergeable=pr.mergeable,
                draft=bool(pr.draft),
                reviews=reviews,
            )
        except (GithubException, RequestException) as e:
            logger.error("Error getting PR details for %s: %s", ref, describe_github_error(e))
            return None

    def submit_approval(self, ref: PullRequestRef) -> ApprovalOutcome:
        """Approve ``ref`` as the authenticated user unless that user already has.

        The check and the write are two separate calls, so two concurrent
        approvals of the same pull request can both get through.
        """
        try:
            login = self._github.get_user().login
            pr = self._get_pull(ref)

            already_approved = any(
                review.user is not None and review.user.login == login and review.state == "APPROVED"
                for review in pr.get_reviews()
            )
            if already_approved:
                logger.info("%s already approved by %s; skipping", ref, login)
                return ApprovalOutcome(success=False, message=f"PR already approved by @{login}")

            pr.create_review(event="APPROVE")
            logger.info("Approved %s as %s", ref, login)
            return ApprovalOutcome(success=True, message=f"Successfully approved PR #{ref.number}")
        except (GithubException, RequestException) as e:
            message = describe_github_error(e)
            logger.error("Error approving PR %s: %s", ref, message)
            return ApprovalOutcome(success=False, message=f"Error approving PR: {message}")
