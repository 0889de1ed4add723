"""Common request/response types and the interface every AI provider implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class CodeRequest:
    """Everything a provider needs to work on a repository.

    ``prompt`` is the fully built prompt (system + user + GitHub context).
    ``context`` carries values such as ``github_token``, ``repo_owner`` or
    ``comment_id``. Empty tool lists mean "use the provider's defaults".
    """

    prompt: str = ""
    repo_path: str = ""
    context: dict[str, str] = field(default_factory=dict)
    allowed_tools: list[str] = field(default_factory=list)
    disallowed_tools: list[str] = field(default_factory=list)


@dataclass
class CodeResponse:
    """Minimal provider result; the agent applies changes itself."""

    summary: str = ""


class Provider(ABC):
    """Interface implemented by all AI providers."""

    @abstractmethod
    def generate_code(self, request: CodeRequest) -> CodeResponse:
        """Run the provider on ``request`` and return its summary."""

    @abstractmethod
    def name(self) -> str:
        """Return the provider's short name."""