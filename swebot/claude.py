"""Provider that drives the Claude Code command-line tool."""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Mapping, Sequence

from swebot.parser import ParseError, parse_response
from swebot.provider import CodeRequest, CodeResponse, Provider

logger = logging.getLogger(__name__)

_PREVIEW_LIMIT = 1000
_COMMENT_SERVER = "mcp-comment-server"
_SEQUENTIAL_THINKING_PACKAGE = "@modelcontextprotocol/server-sequential-thinking"
_FETCH_PACKAGE = "mcp-server-fetch"

# Characters the JSON config escapes so it stays safe to embed anywhere.
_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class ClaudeError(RuntimeError):
    """Raised when the Claude CLI cannot be run or reports a failure."""


def _debug_enabled(name: str) -> bool:
    return os.environ.get(name) == "true"


@dataclass
class CLIResult:
    """The JSON document printed by ``claude -p --output-format json``."""

    result: str = ""
    is_error: bool = False
    cost_usd: float = 0.0

    @classmethod
    def from_json(cls, text: str) -> CLIResult:
        """Decode the CLI output; raise ``ValueError`` when it does not fit."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        fields = {str(key).lower(): value for key, value in data.items()}

        result = fields.get("result") or ""
        is_error = fields.get("iserror") or False
        cost = fields.get("costusd") or 0.0
        if not isinstance(result, str):
            raise ValueError("field 'result' is not a string")
        if not isinstance(is_error, bool):
            raise ValueError("field 'isError' is not a boolean")
        if isinstance(cost, bool) or not isinstance(cost, (int, float)):
            raise ValueError("field 'costUSD' is not a number")
        return cls(result=result, is_error=is_error, cost_usd=float(cost))


def truncate_string(s: str, max_len: int) -> str:
    """Cut ``s`` to ``max_len`` characters, marking the cut with ``...``."""
    if len(s) <= max_len:
        return s
    return s[:max_len] + "..."


def build_mcp_config(context: Mapping[str, str] | None) -> str:
    """Return the MCP server configuration JSON for the tools found on PATH."""
    context = context or {}
    servers: dict[str, dict[str, Any]] = {}

    comment_id = context.get("comment_id", "")
    if comment_id:
        owner = context.get("repo_owner", "")
        repo = context.get("repo_name", "")
        github_token = context.get("github_token", "")
        event_name = context.get("event_name", "")
        if owner and repo and github_token:
            if shutil.which(_COMMENT_SERVER):
                env = {
                    "GITHUB_TOKEN": github_token,
                    "REPO_OWNER": owner,
                    "REPO_NAME": repo,
                    "CLAUDE_COMMENT_ID": comment_id,
                    "GITHUB_EVENT_NAME": event_name,
                }
                servers["comment_updater"] = {
                    "command": _COMMENT_SERVER,
                    "env": dict(sorted(env.items())),
                }
                logger.info("[MCP Config] Added comment_updater server (comment ID: %s)", comment_id)
            else:
                logger.warning(
                    "[MCP Config] %s not found in PATH, comment updates via MCP will be unavailable",
                    _COMMENT_SERVER,
                )

    if shutil.which("npx"):
        servers["sequential-thinking"] = {
            "command": "npx",
            "args": ["-y", _SEQUENTIAL_THINKING_PACKAGE],
        }
        logger.info("[MCP Config] Added sequential-thinking server")
    else:
        logger.warning("[MCP Config] npx not found, sequential-thinking MCP will be unavailable")

    if shutil.which("uvx"):
        servers["fetch"] = {
            "command": "uvx",
            "args": ["--from", _FETCH_PACKAGE, _FETCH_PACKAGE],
        }
        logger.info("[MCP Config] Added fetch server")

    if servers:
        logger.info("[MCP Config] Total MCP servers configured: %d (%s)", len(servers), list(servers))
    else:
        logger.warning("[MCP Config] No MCP servers configured")

    blob = json.dumps({"mcpServers": dict(sorted(servers.items()))}, indent=2, ensure_ascii=False)
    for char, escaped in _JSON_ESCAPES.items():
        blob = blob.replace(char, escaped)
    return blob


def _feed(stream: IO[str], text: str) -> None:
    try:
        stream.write(text)
    except (BrokenPipeError, OSError):
        pass
    finally:
        try:
            stream.close()
        except (BrokenPipeError, OSError):
            pass


def _run_streaming(command: Sequence[str], work_dir: str, prompt: str) -> tuple[str, int]:
    """Run ``command``, echoing its stdout live while capturing it."""
    with subprocess.Popen(
        list(command),
        cwd=work_dir,
        env=dict(os.environ),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    ) as proc:
        assert proc.stdin is not None and proc.stdout is not None
        feeder = threading.Thread(target=_feed, args=(proc.stdin, prompt), daemon=True)
        feeder.start()
        chunks = []
        for line in proc.stdout:
            sys.stdout.write(line)
            chunks.append(line)
        sys.stdout.flush()
        feeder.join()
        returncode = proc.wait()
    return "".join(chunks), returncode


def call_claude_cli(
    work_dir: str,
    prompt: str,
    model: str,
    allowed_tools: Sequence[str],
    disallowed_tools: Sequence[str],
    mcp_config: str,
) -> CLIResult:
    """Run the Claude CLI in ``work_dir`` with ``prompt`` on stdin.

    Empty tool lists and an empty config leave the matching flags out.
    """
    args = ["-p", "--output-format", "json"]
    if model:
        args += ["--model", model]
    if allowed_tools:
        allowed_csv = ",".join(allowed_tools)
        args += ["--allowedTools", allowed_csv]
        logger.info("[Claude CLI] Allowed tools (%d): %s", len(allowed_tools), allowed_csv)
    if disallowed_tools:
        disallowed_csv = ",".join(disallowed_tools)
        args += ["--disallowedTools", disallowed_csv]
        logger.info("[Claude CLI] Disallowed tools (%d): %s", len(disallowed_tools), disallowed_csv)
    if mcp_config:
        args += ["--mcp-config", mcp_config]
        logger.info("[Claude CLI] Using dynamic MCP config (%d bytes)", len(mcp_config))

    if _debug_enabled("DEBUG_CLAUDE_PARSING"):
        logger.info("[Claude CLI] Working directory: %s", work_dir)
        logger.info("[Claude CLI] Command: claude %s", " ".join(args))
        logger.info("[Claude CLI] Prompt length: %d chars", len(prompt))

    logger.info("[Claude CLI] Execution started, streaming output...")
    start = time.monotonic()
    try:
        output, returncode = _run_streaming(["claude", *args], work_dir, prompt)
    except OSError as exc:
        logger.error("[Claude CLI] Command failed to start: %s", exc)
        raise ClaudeError(f"claude CLI execution failed: {exc} (output preview: )") from exc
    duration = time.monotonic() - start

    if returncode != 0:
        preview = truncate_string(output, _PREVIEW_LIMIT)
        logger.error("[Claude CLI] Command failed after %.2fs: exit status %d", duration, returncode)
        logger.error("[Claude CLI] Output preview: %s", preview)
        raise ClaudeError(
            f"claude CLI execution failed: exit status {returncode} (output preview: {preview})"
        )

    logger.info("[Claude CLI] Command completed in %.2fs", duration)

    try:
        result = CLIResult.from_json(output)
    except ValueError as exc:
        preview = truncate_string(output, _PREVIEW_LIMIT)
        logger.error("[Claude CLI] Failed to parse JSON response: %s", exc)
        logger.error("[Claude CLI] Raw output preview: %s", preview)
        raise ClaudeError(
            f"failed to parse claude CLI JSON response: {exc} (output preview: {preview})"
        ) from exc

    if result.is_error:
        raise ClaudeError(f"claude CLI error: {result.result}")
    return result


class ClaudeProvider(Provider):
    """Generates code by running the Claude CLI inside the repository."""

    def __init__(self, api_key: str, model: str = "") -> None:
        os.environ["ANTHROPIC_API_KEY"] = api_key
        os.environ["ANTHROPIC_AUTH_TOKEN"] = api_key
        base_url = os.environ.get("ANTHROPIC_BASE_URL", "")
        if base_url:
            logger.info("[Claude] Using custom API endpoint: %s", base_url)
        self.model = model

    def name(self) -> str:
        return "claude"

    def generate_code(self, request: CodeRequest) -> CodeResponse:
        logger.info("[Claude] Starting code generation (prompt length: %d chars)", len(request.prompt))

        if not request.repo_path:
            raise ClaudeError("repository path is required")
        if not Path(request.repo_path).exists():
            raise ClaudeError(f"repository path does not exist: {request.repo_path}")

        logger.info(
            "[Claude] Calling Claude CLI with model: %s in directory: %s",
            self.model, request.repo_path,
        )

        allowed = list(request.allowed_tools)
        disallowed = list(request.disallowed_tools)
        context = request.context or {}
        extra = context.get("disallowed_tools", "")
        if extra.strip():
            disallowed.append(extra)

        try:
            mcp_config = build_mcp_config(context)
        except (TypeError, ValueError) as exc:
            logger.warning("[Claude] failed to build MCP config: %s", exc)
            mcp_config = ""
        else:
            logger.info("[Claude] Dynamic MCP config generated: %d bytes", len(mcp_config))
            if _debug_enabled("DEBUG_MCP_CONFIG"):
                logger.info("[Claude] MCP config content:\n%s", mcp_config)

        try:
            result = call_claude_cli(
                request.repo_path, request.prompt, self.model, allowed, disallowed, mcp_config
            )
        except ClaudeError as exc:
            raise ClaudeError(f"claude CLI error: {exc}") from exc

        text = result.result
        logger.info("[Claude] Response length: %d characters, cost: $%.4f", len(text), result.cost_usd)
        if _debug_enabled("DEBUG_CLAUDE_PARSING"):
            logger.info("[Claude] Raw response: %s", text)
            logger.info("[Parse] Response preview: %s...", truncate_string(text, 200))

        try:
            parsed = parse_response("Claude", text)
        except ParseError as exc:
            raise ClaudeError(f"failed to parse response: {exc}") from exc

        if _debug_enabled("DEBUG_CLAUDE_PARSING"):
            logger.info("[Parse] Summary: %s", truncate_string(parsed.summary, 100))
        return CodeResponse(summary=parsed.summary)