"""Webhook checks, task tracking, agent tool lists and Claude CLI integration for comment-driven code changes."""

__version__ = "0.1.0"