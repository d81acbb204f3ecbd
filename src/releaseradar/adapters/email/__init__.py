"""Email delivery adapter (SendGrid + Jinja2 templates)."""

from __future__ import annotations

from .notifier import (
    DisabledNotifier,
    EmailNotifier,
    EmailSender,
    build_environment,
    release_label,
)
from .sendgrid import SendGridClient

__all__ = [
    "DisabledNotifier",
    "EmailNotifier",
    "EmailSender",
    "SendGridClient",
    "build_environment",
    "release_label",
]
