"""Value objects passed between the parser, gateway, formatter and dispatcher.

Everything here is request-scoped: built once per Slack trigger, never
mutated, discarded after the reply is sent.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PullRequestRef:
    """A pull request identified by owner, repository and number."""

    owner: str
    repo: str
    number: int

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}/pull/{self.number}"

    def __str__(self) -> str:
        return f"{self.slug}#{self.number}"


@dataclass(frozen=True)
class Review:
    reviewer: str
    state: str  # "APPROVED" | "CHANGES_REQUESTED" | "COMMENTED" | "DISMISSED" | "PENDING"


@dataclass(frozen=True)
class PullRequestSnapshot:
    """Point-in-time read of a pull request and its reviews."""

    title: str
    state: str  # "open" | "closed" | "merged"
    author: str
    html_url: str
    mergeable: bool | None  # None until GitHub has computed it
    draft: bool
    reviews: tuple[Review, ...] = field(default_factory=tuple)

    def reviewers_in_state(self, state: str) -> list[str]:
        return [r.reviewer for r in self.reviews if r.state == state]


@dataclass(frozen=True)
class ApprovalOutcome:
    success: bool
    message: str


@dataclass(frozen=True)
class DispatchContext:
    """What the dispatcher knows about one inbound mention.

    ``reply_target`` is the thread every reply goes to: the thread root when
    the mention is itself a reply, otherwise the mention's own timestamp.
    """

    source_text: str
    channel: str
    reply_target: str | None
    parent_text: str | None = None
    is_threaded_reply: bool = False
