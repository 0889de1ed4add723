"""GitHub webhook payload types for comment events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


@dataclass
class User:
    login: str = ""
    type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        return cls(login=data.get("login", ""), type=data.get("type", ""))

    def to_dict(self) -> dict[str, Any]:
        return {"login": self.login, "type": self.type}


@dataclass
class Issue:
    number: int = 0
    title: str = ""
    body: str = ""
    state: str = ""
    pull_request_url: str | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request_url is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Issue:
        pr = data.get("pull_request")
        return cls(
            number=data.get("number", 0),
            title=data.get("title", ""),
            body=data.get("body", ""),
            state=data.get("state", ""),
            pull_request_url=pr.get("url", "") if isinstance(pr, Mapping) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "state": self.state,
        }
        if self.pull_request_url is not None:
            out["pull_request"] = {"url": self.pull_request_url}
        return out


@dataclass
class Comment:
    id: int = 0
    body: str = ""
    user: User = field(default_factory=User)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Comment:
        return cls(
            id=data.get("id", 0),
            body=data.get("body", ""),
            user=User.from_dict(_section(data, "user")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "body": self.body, "user": self.user.to_dict()}


@dataclass
class ReviewComment:
    id: int = 0
    body: str = ""
    user: User = field(default_factory=User)
    path: str = ""
    diff_hunk: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReviewComment:
        return cls(
            id=data.get("id", 0),
            body=data.get("body", ""),
            user=User.from_dict(_section(data, "user")),
            path=data.get("path", ""),
            diff_hunk=data.get("diff_hunk", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "body": self.body,
            "user": self.user.to_dict(),
            "path": self.path,
            "diff_hunk": self.diff_hunk,
        }


@dataclass
class Repository:
    full_name: str = ""
    default_branch: str = ""
    owner: User = field(default_factory=User)
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Repository:
        return cls(
            full_name=data.get("full_name", ""),
            default_branch=data.get("default_branch", ""),
            owner=User.from_dict(_section(data, "owner")),
            name=data.get("name", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "full_name": self.full_name,
            "default_branch": self.default_branch,
            "owner": self.owner.to_dict(),
            "name": self.name,
        }


@dataclass
class PullRequest:
    number: int = 0
    title: str = ""
    body: str = ""
    state: str = ""  # "open" or "closed"
    base_ref: str = ""
    head_ref: str = ""  # source branch

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PullRequest:
        return cls(
            number=data.get("number", 0),
            title=data.get("title", ""),
            body=data.get("body", ""),
            state=data.get("state", ""),
            base_ref=_section(data, "base").get("ref", ""),
            head_ref=_section(data, "head").get("ref", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "state": self.state,
            "base": {"ref": self.base_ref},
            "head": {"ref": self.head_ref},
        }


@dataclass
class IssueCommentEvent:
    action: str = ""
    issue: Issue = field(default_factory=Issue)
    comment: Comment = field(default_factory=Comment)
    repository: Repository = field(default_factory=Repository)
    sender: User = field(default_factory=User)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IssueCommentEvent:
        return cls(
            action=data.get("action", ""),
            issue=Issue.from_dict(_section(data, "issue")),
            comment=Comment.from_dict(_section(data, "comment")),
            repository=Repository.from_dict(_section(data, "repository")),
            sender=User.from_dict(_section(data, "sender")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "issue": self.issue.to_dict(),
            "comment": self.comment.to_dict(),
            "repository": self.repository.to_dict(),
            "sender": self.sender.to_dict(),
        }


@dataclass
class PullRequestReviewCommentEvent:
    action: str = ""
    comment: ReviewComment = field(default_factory=ReviewComment)
    pull_request: PullRequest = field(default_factory=PullRequest)
    repository: Repository = field(default_factory=Repository)
    sender: User = field(default_factory=User)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PullRequestReviewCommentEvent:
        return cls(
            action=data.get("action", ""),
            comment=ReviewComment.from_dict(_section(data, "comment")),
            pull_request=PullRequest.from_dict(_section(data, "pull_request")),
            repository=Repository.from_dict(_section(data, "repository")),
            sender=User.from_dict(_section(data, "sender")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "comment": self.comment.to_dict(),
            "pull_request": self.pull_request.to_dict(),
            "repository": self.repository.to_dict(),
            "sender": self.sender.to_dict(),
        }