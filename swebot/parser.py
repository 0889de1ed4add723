"""Extracts file edits and a summary from a provider's text response."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_PLACEHOLDER_PATHS = frozenset({"path/to/file.ext", "relative/path/to/file.go"})

_PLACEHOLDER_CONTENT_SNIPPETS = (
    "... full file content here ...",
    "entire updated file content here",
)

_PLACEHOLDER_SUMMARIES = frozenset({
    "brief description of changes made",
    "add user authentication to handler.go",
})

# Phrases that mark a response asking for approval instead of acting.
# Kept as word sequences; matching uses the words joined by single spaces.
_PERMISSION_REQUEST_WORDS = (
    ("would", "you", "like", "me", "to", "proceed"),
    ("would", "you", "like", "me", "to", "continue"),
    ("shall", "i", "proceed"),
    ("if", "you", "grant", "the", "necessary", "permissions"),
    ("if", "you", "grant", "the", "necessary", "permission"),
    ("if", "you", "grant", "me", "permission"),
    ("grant", "the", "necessary", "permissions"),
    ("prefer", "to", "create", "them", "manually"),
    ("let", "me", "know", "if", "you", "want", "me", "to", "proceed"),
    ("i", "can", "start", "implementing", "once", "you", "confirm"),
    ("i", "can", "proceed", "once", "you", "approve"),
)
_PERMISSION_REQUEST_PHRASES = tuple(" ".join(words) for words in _PERMISSION_REQUEST_WORDS)

_FLAGS = re.DOTALL | re.ASCII

_XML_FILE_RE = re.compile(
    r"""<file\s+path=["']([^"']+)["']>\s*<content>\s*(.*?)\s*</content>\s*</file>""",
    _FLAGS,
)
_MD_FENCE_RE = re.compile(
    r"```(\w+)\s+([^\s\n]*[./][^\s\n]*)\s*\n([\s\S]*?)\n```", re.ASCII
)
_MD_HEADER_RE = re.compile(r"\*\*([^*]+)\*\*:?\s*\n`{3}\w*\s*\n(.*?)\n`{3}", _FLAGS)
_SUMMARY_TAG_RE = re.compile(r"<summary>\s*(.*?)\s*</summary>", _FLAGS)
_SUMMARY_HEADER_RE = re.compile(r"#+\s*Summary\s*\n(.*?)(?:\n#+|\Z)", _FLAGS)

_DEFAULT_SUMMARY = "Code changes applied"


class ParseError(ValueError):
    """Raised when a response holds nothing usable."""


@dataclass
class FileChange:
    path: str
    content: str


@dataclass
class ParseResult:
    files: list[FileChange] = field(default_factory=list)
    summary: str = ""


def parse_response(provider_label: str, response: str) -> ParseResult:
    """Parse a raw provider response into file changes and a summary.

    ``provider_label`` prefixes log messages (e.g. "Claude").
    """
    text = response.strip()
    if not text:
        raise ParseError("no content found in response")

    files = _extract_xml_file_blocks(text) or _extract_markdown_file_blocks(text)
    files = _filter_placeholder_files(provider_label, files)

    summary = _extract_summary(text, has_files=bool(files))

    if files:
        if is_placeholder_summary(summary):
            summary = _DEFAULT_SUMMARY
    else:
        if is_placeholder_summary(summary):
            raise ParseError("placeholder summary detected in response")
        if not summary.strip():
            raise ParseError("no content found in response")
        if contains_permission_request(summary):
            raise ParseError("permission request detected in response")

    return ParseResult(files=files, summary=summary)


def contains_permission_request(text: str) -> bool:
    """Report whether the text asks for permission before proceeding."""
    lowered = text.lower()
    return any(phrase in lowered for phrase in _PERMISSION_REQUEST_PHRASES)


def is_placeholder_summary(summary: str) -> bool:
    """Report whether the summary is a template placeholder."""
    if not summary:
        return False
    return summary.strip().lower() in _PLACEHOLDER_SUMMARIES


def _extract_xml_file_blocks(text: str) -> list[FileChange]:
    return [
        FileChange(path=m.group(1).strip(), content=m.group(2))
        for m in _XML_FILE_RE.finditer(text)
        if m.group(1).strip()
    ]


def _extract_markdown_file_blocks(text: str) -> list[FileChange]:
    files = [
        FileChange(path=m.group(2).strip(), content=m.group(3))
        for m in _MD_FENCE_RE.finditer(text)
        if m.group(2).strip()
    ]
    for m in _MD_HEADER_RE.finditer(text):
        path = m.group(1).strip().removesuffix(":")
        if path and ("." in path or "/" in path):
            files.append(FileChange(path=path, content=m.group(2)))
    return files


def _is_placeholder_path(path: str) -> bool:
    return path.strip().lower() in _PLACEHOLDER_PATHS


def _is_placeholder_content(content: str) -> bool:
    return any(snippet in content for snippet in _PLACEHOLDER_CONTENT_SNIPPETS)


def _filter_placeholder_files(provider_label: str, files: list[FileChange]) -> list[FileChange]:
    prefix = f"[{provider_label}] " if provider_label else ""
    kept = []
    for change in files:
        if _is_placeholder_path(change.path):
            logger.info("%sIgnoring placeholder file path entry: %s", prefix, change.path)
            continue
        if _is_placeholder_content(change.content):
            logger.info("%sIgnoring placeholder file content for path: %s", prefix, change.path)
            continue
        kept.append(change)
    return kept


def _extract_summary(text: str, has_files: bool) -> str:
    match = _SUMMARY_TAG_RE.search(text)
    if match:
        return match.group(1).strip()
    match = _SUMMARY_HEADER_RE.search(text)
    if match:
        return match.group(1).strip()
    if not has_files:
        return text.strip()
    return _DEFAULT_SUMMARY