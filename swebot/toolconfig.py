"""Builds the allowed and disallowed tool lists passed to the provider CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _bash(command: str, subcommands: str) -> list[str]:
    """Wrap each ``;``-separated subcommand of ``command`` as a Bash tool name."""
    return [f"Bash({command} {sub.strip()})" for sub in subcommands.split(";")]


def _mcp(pairs: tuple[tuple[str, str], ...]) -> list[str]:
    return [f"mcp__{server}__{tool}" for server, tool in pairs]


_ALLOWED_DEFAULTS: tuple[str, ...] = (
    *"Edit MultiEdit Glob Grep LS Read Write WebSearch Bash".split(),
    *_bash(
        "git",
        "status; diff; log; show; branch; checkout; add; commit; push; pull; fetch; clone; remote",
    ),
    *_bash(
        "gh",
        "pr create; pr list; pr view; pr comment; pr merge; pr close; pr checkout; "
        "issue create; issue list; issue view; issue comment; issue close; "
        "repo clone; repo view; api",
    ),
    *_mcp((
        ("sequential-thinking", "sequentialthinking"),
        ("fetch", "fetch"),
        ("comment_updater", "update_claude_comment"),
    )),
)

# WebFetch is blocked in favour of the fetch MCP server; the rest prevent data
# loss or need an interactive terminal.
_DISALLOWED_DEFAULTS: tuple[str, ...] = (
    "WebFetch",
    *_bash(
        "git",
        "push --force; push -f; push --force-with-lease; reset --hard; clean -fd; "
        "clean -f; branch -D; tag -d; rebase -i; add -i",
    ),
    *_bash("rm", "-rf .git; -rf *"),
    *_bash("gh", "repo delete; api -X DELETE; api --method DELETE"),
)


@dataclass
class Options:
    """Controls how the tool lists are built."""

    use_commit_signing: bool = False
    enable_github_comment_mcp: bool = False
    enable_github_file_ops_mcp: bool = False
    enable_github_ci_mcp: bool = False
    custom_allowed_tools: list[str] = field(default_factory=list)
    custom_disallowed_tools: list[str] = field(default_factory=list)


def build_allowed_tools(opts: Options) -> list[str]:
    """Return the sorted, de-duplicated list of allowed tools."""
    return sorted({*_ALLOWED_DEFAULTS, *opts.custom_allowed_tools})


def build_disallowed_tools(opts: Options) -> list[str]:
    """Return the sorted, de-duplicated list of disallowed tools.

    Defaults explicitly allowed in ``opts`` are dropped; custom entries and
    comma-separated entries from ``DISALLOWED_TOOLS`` are added.
    """
    explicitly_allowed = set(opts.custom_allowed_tools)
    tools = {t for t in _DISALLOWED_DEFAULTS if t not in explicitly_allowed}
    tools.update(opts.custom_disallowed_tools)

    extra = os.environ.get("DISALLOWED_TOOLS", "")
    if extra:
        tools.update(part for part in extra.split(",") if part)

    return sorted(tools)