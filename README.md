# swebot

Building blocks for a bot that turns GitHub comments such as
`/code fix the login handler` into code changes. The package checks webhook
signatures and remembers comments it has already seen. It applies the
permission rules and keeps a record of tasks. It builds the tool lists for a
coding agent, runs the `claude` CLI inside a repository and reads back what it
replies.

## Install

From a checkout of the package:

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Modules

- `swebot.signature`
  - `verify_signature(payload, signature, secret)` reports whether a
    `sha256=<hex>` signature is the HMAC-SHA256 of `payload` under `secret`.
    The comparison is constant-time.
  - `validate_signature_header(header)` raises `SignatureError` when the
    header is empty or does not start with `sha256=`.
- `swebot.dedupe.CommentDeduper(ttl)`: `mark_if_new(comment_id)` returns
  `True` the first time it sees an id and `False` while that id is still
  within its time-to-live, given in seconds. A `ttl` of zero or less means one
  hour.
- `swebot.events` holds dataclasses for the fields of issue-comment and
  review-comment payloads: `IssueCommentEvent`, `PullRequestReviewCommentEvent`,
  `Issue`, `Comment`, `ReviewComment`, `Repository`, `PullRequest` and `User`.
  They have `from_dict` and `to_dict`.
- `swebot.webhook`
  - `WebhookHandler(webhook_secret, trigger_keyword, dispatcher, store, app_auth)`
    holds the steps applied to a triggering comment:
    - `verify_permission(repo, username)` allows only the user who installed
      the app, as reported by an `AuthProvider`. It allows everyone when
      `ALLOW_ALL_USERS=true` or `PERMISSION_MODE=open` is set, when there is no
      auth provider, or when the lookup fails.
    - `create_store_task(task)` records a `WebhookTask` as pending in the store,
      logs "Task queued" and marks older pending tasks for the same issue as
      failed.
    - `get_deduper(event_type)` returns the deduper for issue comments or for
      review comments, each keeping ids for 12 hours.
    - `generate_task_id(repo, number)` builds an id from the repository, the
      number and the current time.
    - `enqueue_task(task)` passes the task to the `TaskDispatcher` and returns
      an `(HTTPStatus, body)` pair. A success gives 202. A dispatcher raising
      `QueueFullError` or `QueueClosedError` gives 503, and any other failure
      gives 500.
  - Helpers: `split_repo`, `is_comment_event` and `is_bot_comment`.
- `swebot.taskstore.Store` is a thread-safe, in-memory store of `Task` objects.
  It offers `create`, `get`, `list_tasks` (newest first), `update_status`,
  `add_log` and `supersede_older`.
- `swebot.toolconfig`: `build_allowed_tools(Options())` and
  `build_disallowed_tools(Options())` return sorted, de-duplicated tool lists
  for the agent CLI.
  - Defaults named in `custom_allowed_tools` are dropped from the blocked list.
  - `DISALLOWED_TOOLS`, a comma-separated list, blocks more tools.
- `swebot.parser`: `parse_response(label, text)` takes the file blocks and the
  summary out of an agent's reply, leaving out placeholder output.
  - It raises `ParseError` when the reply is empty, is only a placeholder or
    asks for permission.
  - It also offers `contains_permission_request` and `is_placeholder_summary`.
- `swebot.provider` defines `CodeRequest`, `CodeResponse` and the abstract
  `Provider`.
- `swebot.claude`
  - `ClaudeProvider(api_key, model)` runs `claude -p --output-format json` in
    the request's repository directory. It echoes the CLI's output as it
    arrives and returns the parsed summary. It raises `ClaudeError` on
    failure.
  - `build_mcp_config` writes the MCP server configuration for whichever of
    `mcp-comment-server`, `npx` and `uvx` are on `PATH`.
- `swebot.web.WebHandler.from_directory(store, "templates")` loads Jinja2
  templates. `list_tasks()` and `task_detail(task_id)` return `Response`
  objects rendered from `list.html` and `detail.html`.

## Example

```python
from swebot.taskstore import Store, Task, TaskStatus
from swebot.toolconfig import Options, build_allowed_tools

store = Store()
store.create(Task(id="t1", title="Fix login", repo_owner="octo", repo_name="app",
                  issue_number=7, status=TaskStatus.PENDING))
store.add_log("t1", "info", "Task queued")

tools = build_allowed_tools(Options(custom_allowed_tools=["MyTool"]))
```

## What it does not do

- The package has no command and no HTTP server. `WebhookHandler` and
  `WebHandler` return results; serving them is left to the application.
- There is no single entry point that takes a raw webhook request, builds a
  prompt from it and prepares branches. The application puts the steps above
  together itself.
- No `TaskDispatcher` or `AuthProvider` implementation is included.
- Tasks live only in memory and are lost when the process ends.

## Environment

- `ALLOW_ALL_USERS=true` or `PERMISSION_MODE=open` lets any user trigger tasks.
- `DISALLOWED_TOOLS` blocks more tools.
- `ClaudeProvider` sets `ANTHROPIC_API_KEY` and `ANTHROPIC_AUTH_TOKEN`. It logs
  `ANTHROPIC_BASE_URL` when that is set.
- `DEBUG_CLAUDE_PARSING=true` and `DEBUG_MCP_CONFIG=true` turn on extra logging
  for the Claude provider.