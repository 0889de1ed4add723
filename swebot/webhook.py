"""Webhook-side task handling: permissions, dedupe, store records and queueing."""

from __future__ import annotations

import json
import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from http import HTTPStatus

from swebot.dedupe import CommentDeduper
from swebot.taskstore import Store, Task, TaskStatus

logger = logging.getLogger(__name__)

_DEDUPE_TTL = 12 * 3600.0
_REVIEW_COMMENT_EVENT = "pull_request_review_comment"
_ISSUE_COMMENT_EVENT = "issue_comment"


class QueueError(Exception):
    """Base class for dispatcher queue failures."""


class QueueFullError(QueueError):
    """The dispatcher cannot accept new tasks right now."""

    def __init__(self, message: str = "task queue is full") -> None:
        super().__init__(message)


class QueueClosedError(QueueError):
    """The dispatcher has been shut down."""

    def __init__(self, message: str = "task queue is closed") -> None:
        super().__init__(message)


@dataclass
class WebhookTask:
    """A task to be executed for a triggering comment."""

    id: str
    repo: str = ""
    number: int = 0
    branch: str = ""
    base_branch: str = ""
    prompt: str = ""
    prompt_summary: str = ""
    issue_title: str = ""
    issue_body: str = ""
    is_pr: bool = False
    pr_branch: str = ""
    pr_state: str = ""
    username: str = ""
    attempt: int = 0
    prompt_context: dict[str, str] = field(default_factory=dict)
    comment_id: int = 0
    mode: str = ""
    raw_payload: bytes = b""
    event_type: str = ""


class TaskDispatcher(ABC):
    """Queues tasks for asynchronous execution."""

    @abstractmethod
    def enqueue(self, task: WebhookTask) -> None:
        """Queue ``task``; raise :class:`QueueError` subclasses on failure."""


class AuthProvider(ABC):
    """Answers questions about the GitHub App installation."""

    @abstractmethod
    def get_installation_owner(self, repo: str) -> str:
        """Return the login of the user who installed the app on ``repo``."""


def split_repo(full: str) -> tuple[str, str]:
    """Split ``owner/name``; without a slash the whole string is the owner."""
    owner, sep, name = full.partition("/")
    if sep:
        return owner, name
    return full, ""


def is_comment_event(event_type: str) -> bool:
    return event_type in (_ISSUE_COMMENT_EVENT, _REVIEW_COMMENT_EVENT)


def is_bot_comment(payload: bytes | str) -> bool:
    """Report whether ``comment.user.type`` in the payload is ``Bot``."""
    try:
        data = json.loads(payload)
    except (ValueError, TypeError):
        return False
    if not isinstance(data, dict):
        return False
    comment = data.get("comment")
    if not isinstance(comment, dict):
        return False
    user = comment.get("user")
    if not isinstance(user, dict):
        return False
    user_type = user.get("type")
    return isinstance(user_type, str) and user_type == "Bot"


def _env_flag(name: str, value: str) -> bool:
    return os.environ.get(name, "").strip().casefold() == value


class WebhookHandler:
    """Shared state and steps used when handling GitHub comment webhooks."""

    def __init__(
        self,
        webhook_secret: str = "",
        trigger_keyword: str = "",
        dispatcher: TaskDispatcher | None = None,
        store: Store | None = None,
        app_auth: AuthProvider | None = None,
    ) -> None:
        self.webhook_secret = webhook_secret
        self.trigger_keyword = trigger_keyword
        self.dispatcher = dispatcher
        self.store = store
        self.app_auth = app_auth
        self.issue_deduper = CommentDeduper(_DEDUPE_TTL)
        self.review_deduper = CommentDeduper(_DEDUPE_TTL)

    def generate_task_id(self, repo: str, number: int) -> str:
        return f"{repo.replace('/', '-')}-{number}-{time.time_ns()}"

    def verify_permission(self, repo: str, username: str) -> bool:
        """Allow only the app installer, unless overridden or auth is unavailable."""
        if _env_flag("ALLOW_ALL_USERS", "true") or _env_flag("PERMISSION_MODE", "open"):
            logger.info(
                "Permission override enabled via env (ALLOW_ALL_USERS/PERMISSION_MODE), "
                "allowing user %s", username,
            )
            return True

        if self.app_auth is None:
            logger.warning("No app auth provider configured, allowing all users")
            return True

        try:
            owner = self.app_auth.get_installation_owner(repo)
        except Exception as exc:  # fail open for robustness
            logger.warning("Failed to get installation owner: %s (allowing request)", exc)
            return True

        if username != owner:
            logger.info("Permission check failed: user=%s, installer=%s", username, owner)
            return False

        logger.info("Permission check passed: user=%s is the installer", username)
        return True

    def create_store_task(self, task: WebhookTask) -> None:
        """Record ``task`` as pending and supersede older tasks for the same issue."""
        if self.store is None:
            return

        owner, name = split_repo(task.repo)
        self.store.create(
            Task(
                id=task.id,
                title=task.issue_title,
                status=TaskStatus.PENDING,
                repo_owner=owner,
                repo_name=name,
                issue_number=task.number,
                actor=task.username,
            )
        )
        self.store.add_log(task.id, "info", "Task queued")

        superseded = self.store.supersede_older(owner, name, task.number, task.id)
        if superseded > 0:
            logger.info("Superseded %d older task(s) for %s#%d", superseded, task.repo, task.number)
            self.store.add_log(task.id, "info", f"Superseded {superseded} older task(s)")

    def get_deduper(self, event_type: str) -> CommentDeduper:
        if event_type == _REVIEW_COMMENT_EVENT:
            return self.review_deduper
        return self.issue_deduper

    def enqueue_task(self, task: WebhookTask) -> tuple[HTTPStatus, str]:
        """Hand ``task`` to the dispatcher; return the HTTP status and body to send."""
        if self.dispatcher is None:
            logger.error("Failed to enqueue task: no dispatcher configured")
            return HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to enqueue task"
        try:
            self.dispatcher.enqueue(task)
        except QueueFullError as exc:
            logger.error("Failed to enqueue task: %s", exc)
            return HTTPStatus.SERVICE_UNAVAILABLE, "Task queue is busy, try again later"
        except QueueClosedError as exc:
            logger.error("Failed to enqueue task: %s", exc)
            return HTTPStatus.SERVICE_UNAVAILABLE, "Task queue unavailable"
        except Exception as exc:
            logger.error("Failed to enqueue task: %s", exc)
            return HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to enqueue task"

        if task.event_type == _REVIEW_COMMENT_EVENT:
            task.branch = task.base_branch

        return HTTPStatus.ACCEPTED, "Task queued"