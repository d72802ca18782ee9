"""Append-only event log for decoration passes.

One line per event: UTC timestamp, bracketed component, message, then any
``key=value`` fields in call order. Credentials are scrubbed before writing.
"""

import os
import re
from datetime import datetime, timezone


DEFAULT_LOG_PATH = "logs/pr-decoration.log"
LOG_PATH_ENV = "PR_DECORATION_LOG_PATH"

_REDACTIONS = (
    (re.compile(r"(?i)authorization\s*[:=]\s*(?:bearer\s+|token\s+)?[^\s,;]+"), "Authorization=[REDACTED]"),
    (re.compile(r"(?i)\b(token|bearer)\s+[A-Za-z0-9._\-]+"), r"\1 [REDACTED]"),
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]+"), "[REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]+"), "[REDACTED]"),
)


def _log_path():
    return os.environ.get(LOG_PATH_ENV, DEFAULT_LOG_PATH)


def _scrub(text):
    value = str(text)
    for pattern, replacement in _REDACTIONS:
        value = pattern.sub(replacement, value)
    return " ".join(value.split())


def format_event(component, message, fields=None, now=None):
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H:%M:%SZ")
    parts = [stamp, f"[{_scrub(component)}]", _scrub(message)]
    for key, value in (fields or {}).items():
        parts.append(f"{key}={_scrub(value)}")
    return " ".join(part for part in parts if part)


def log_event(component: str, message: str, **fields) -> None:
    path = _log_path()
    line = format_event(component, message, fields)
    parent = os.path.dirname(path)
    try:
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")
    except OSError:
        # A broken log sink never aborts a decoration pass.
        return


def read_log_lines():
    try:
        with open(_log_path(), "r", encoding="utf-8") as handle:
            return handle.read().splitlines()
    except FileNotFoundError:
        return []
