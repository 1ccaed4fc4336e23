"""Tests for the GitHub pull request gateway."""

from unittest.mock import MagicMock

import pytest
import requests
from github import GithubException

from prstamp_core.gh.pull_request import PullRequestGateway, describe_github_error
from prstamp_core.models import PullRequestRef

REF = PullRequestRef("acme", "widgets", 42)


def _user(login):
    u = MagicMock()
    u.login = login
    return u


def _review(login, state):
    r = MagicMock()
    r.user = _user(login) if login else None
    r.state = state
    return r


def _pull(reviews=None, merged=False, state="open", mergeable=True, draft=False):
    pr = MagicMock()
    pr.title = "Add widget"
    pr.state = state
    pr.merged = merged
    pr.user = _user("alice")
    pr.html_url = "https://github.com/acme/widgets/pull/42"
    pr.mergeable = mergeable
    pr.draft = draft
    pr.get_reviews.return_value = list(reviews or [])
    return pr


def _gateway(pr, me="bot-user"):
    client = MagicMock()
    client.get_repo.return_value.get_pull.return_value = pr
    client.get_user.return_value = _user(me)
    return PullRequestGateway(client=client), client


class TestFetchSnapshot:
    def test_builds_snapshot(self):
        pr = _pull(reviews=[_review("bob", "APPROVED"), _review("carol", "COMMENTED")])
        gateway, client = _gateway(pr)

        snapshot = gateway.fetch_snapshot(REF)

        client.get_repo.assert_called_once_with("acme/widgets", lazy=True)
        client.get_repo.return_value.get_pull.assert_called_once_with(42)
        assert snapshot.title == "Add widget"
        assert snapshot.author == "alice"
        assert snapshot.state == "open"
        assert snapshot.mergeable is True
        assert snapshot.draft is False
        assert [(r.reviewer, r.state) for r in snapshot.reviews] == [("bob", "APPROVED"), ("carol", "COMMENTED")]

    def test_merged_state(self):
        gateway, _ = _gateway(_pull(merged=True, state="closed"))
        assert gateway.fetch_snapshot(REF).state == "merged"

    def test_closed_state(self):
        gateway, _ = _gateway(_pull(state="closed"))
        assert gateway.fetch_snapshot(REF).state == "closed"

    def test_unknown_mergeable_preserved(self):
        gateway, _ = _gateway(_pull(mergeable=None))
        assert gateway.fetch_snapshot(REF).mergeable is None

    def test_deleted_reviewer_is_ghost(self):
        gateway, _ = _gateway(_pull(reviews=[_review(None, "APPROVED")]))
        assert gateway.fetch_snapshot(REF).reviews[0].reviewer == "ghost"

    def test_returns_none_on_github_error(self):
        client = MagicMock()
        client.get_repo.return_value.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)
        gateway = PullRequestGateway(client=client)
        assert gateway.fetch_snapshot(REF) is None

    def test_returns_none_when_reviews_call_fails(self):
        pr = _pull()
        pr.get_reviews.side_effect = GithubException(403, {"message": "Forbidden"}, None)
        gateway, _ = _gateway(pr)
        assert gateway.fetch_snapshot(REF) is None

    def test_returns_none_on_transport_error(self):
        client = MagicMock()
        client.get_repo.return_value.get_pull.side_effect = requests.ConnectionError("boom")
        assert PullRequestGateway(client=client).fetch_snapshot(REF) is None


class TestSubmitApproval:
    def test_approves(self):
        pr = _pull(reviews=[_review("bob", "APPROVED")])
        gateway, _ = _gateway(pr)

        outcome = gateway.submit_approval(REF)

        assert outcome.success is True
        assert outcome.message == "Successfully approved PR #42"
        pr.create_review.assert_called_once_with(event="APPROVE")

    def test_prior_comment_by_same_user_does_not_block(self):
        pr = _pull(reviews=[_review("bot-user", "COMMENTED")])
        gateway, _ = _gateway(pr)
        assert gateway.submit_approval(REF).success is True

    def test_already_approved_skips_write(self):
        pr = _pull(reviews=[_review("bot-user", "APPROVED")])
        gateway, _ = _gateway(pr)

        outcome = gateway.submit_approval(REF)

        assert outcome.success is False
        assert outcome.message == "PR already approved by @bot-user"
        pr.create_review.assert_not_called()

    def test_second_call_is_idempotent(self):
        pr = _pull()
        pr.create_review.side_effect = lambda **kw: pr.get_reviews.return_value.append(
            _review("bot-user", "APPROVED")
        )
        gateway, _ = _gateway(pr)

        first = gateway.submit_approval(REF)
        second = gateway.submit_approval(REF)

        assert first.success is True
        assert second.success is False
        assert "already approved" in second.message
        assert pr.create_review.call_count == 1

    def test_api_error_becomes_failed_outcome(self):
        pr = _pull()
        pr.create_review.side_effect = GithubException(
            422, {"message": "Can not approve your own pull request"}, None
        )
        gateway, _ = _gateway(pr)

        outcome = gateway.submit_approval(REF)

        assert outcome.success is False
        assert outcome.message == "Error approving PR: Can not approve your own pull request"

    def test_identity_lookup_error_becomes_failed_outcome(self):
        client = MagicMock()
        client.get_user.side_effect = GithubException(401, {"message": "Bad credentials"}, None)
        outcome = PullRequestGateway(client=client).submit_approval(REF)
        assert outcome.success is False
        assert "Bad credentials" in outcome.message


class TestDescribeGithubError:
    def test_uses_message_from_data(self):
        assert describe_github_error(GithubException(404, {"message": "Not Found"}, None)) == "Not Found"

    def test_falls_back_to_str(self):
        assert describe_github_error(requests.Timeout("timed out")) == "timed out"


def test_token_or_client_required():
    with pytest.raises(ValueError):
        PullRequestGateway()
