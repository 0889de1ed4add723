import pytest

from swebot.parser import (
    FileChange,
    ParseError,
    contains_permission_request,
    is_placeholder_summary,
    parse_response,
)


def test_xml_blocks_and_summary():
    text = """
<files>
  <file path="src/app.go"><content>package main\\nfunc main() {}</content></file>
  <file path="path/to/file.ext"><content>... full file content here ...</content></file>
  <file path="lib/util.go"><content>package lib</content></file>
</files>
<summary>
Implemented feature X
</summary>"""
    result = parse_response("Claude", text)
    assert len(result.files) == 2
    assert [f.path for f in result.files] == ["src/app.go", "lib/util.go"]
    assert result.files[1] == FileChange(path="lib/util.go", content="package lib")
    assert result.summary == "Implemented feature X"


def test_markdown_blocks():
    text = (
        "```go src/handler.go\npackage handler\n```\n"
        "**internal/util.go**\n```go\npackage util\n```\n"
        "# Summary\nAdd endpoints\n"
    )
    result = parse_response("Codex", text)
    assert len(result.files) == 2
    assert result.summary == "Add endpoints"


def test_markdown_code_block_variants():
    text = "```go handlers/login.go\npackage handlers\n```\n\n**docs/setup.md:**\n```md\n# Setup\n```"
    result = parse_response("ClaudeTest", text)
    assert len(result.files) == 2
    assert result.files[0].path == "handlers/login.go"
    assert result.files[1].path == "docs/setup.md"
    assert result.summary == "Code changes applied"


def test_no_files_requires_non_placeholder_summary():
    with pytest.raises(ParseError):
        parse_response("Claude", "<summary>brief description of changes made</summary>")

    result = parse_response("Claude", "<summary>Real summary</summary>")
    assert result.summary == "Real summary"
    assert result.files == []


def test_placeholder_summary_with_files_is_replaced():
    text = '<file path="a.go"><content>x</content></file><summary>Brief description of changes made</summary>'
    result = parse_response("Claude", text)
    assert result.summary == "Code changes applied"
    assert result.files == [FileChange(path="a.go", content="x")]


def test_empty_response_raises():
    with pytest.raises(ParseError, match="no content found in response"):
        parse_response("Claude", "   \n ")


def test_permission_request_without_files_raises():
    with pytest.raises(ParseError, match="permission request detected"):
        parse_response("Claude", "Would you like me to proceed?")


def test_plain_text_becomes_summary():
    result = parse_response("", "  All good here  ")
    assert result.summary == "All good here"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Would you like me to proceed?", True),
        ("I can proceed once you approve", True),
        ("No permission request here", False),
    ],
)
def test_contains_permission_request(text, expected):
    assert contains_permission_request(text) is expected


def test_is_placeholder_summary():
    assert is_placeholder_summary("  Add user authentication to handler.go ") is True
    assert is_placeholder_summary("") is False
    assert is_placeholder_summary("Implemented feature X") is False