from __future__ import annotations

import logging
import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from threading import Lock
from typing import Any, Iterator, Mapping

REDACTED = "<redacted>"
REDACTED_EMAIL = "<redacted-email>"

_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("ledger_trace_id", default=None)
_SENSITIVE_KEY_PARTS = (
    "password",
    "passwd",
    "pwd",
    "token",
    "secret",
    "confirmation",
    "api_key",
    "apikey",
    "authorization",
    "cookie",
    "private_key",
)
_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_SECRET_PAIR_PATTERN = re.compile(
    r"(?i)\b(password|passwd|pwd|token|secret|confirmation[_-]?secret|api[_-]?key|authorization)\b\s*[:=]\s*([^\s,;]+)"
)
_BEARER_PATTERN = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._\-~=+/]+")

_KNOWN_SECRETS: set[str] = set()
_SECRETS_LOCK = Lock()


def create_trace_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"trc-{stamp}-{uuid.uuid4().hex[:8]}"


def current_trace_id() -> str | None:
    value = _TRACE_ID_CTX.get()
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


@contextmanager
def bind_trace_id(trace_id: str | None = None) -> Iterator[str]:
    normalized = (trace_id or "").strip() or create_trace_id()
    token = _TRACE_ID_CTX.set(normalized)
    try:
        yield normalized
    finally:
        _TRACE_ID_CTX.reset(token)


def register_secret(value: str | None) -> None:
    """Mask this literal wherever it shows up in redacted text."""
    cleaned = (value or "").strip()
    if len(cleaned) < 3:
        return
    with _SECRETS_LOCK:
        _KNOWN_SECRETS.add(cleaned)


def _normalize_key(value: object) -> str:
    return str(value or "").strip().lower().replace("-", "_")


def _is_sensitive_key(value: object) -> bool:
    key = _normalize_key(value)
    return any(part in key for part in _SENSITIVE_KEY_PARTS)


def redact_text(value: str) -> str:
    text = str(value or "")
    with _SECRETS_LOCK:
        secrets = sorted(_KNOWN_SECRETS, key=len, reverse=True)
    for secret in secrets:
        text = text.replace(secret, REDACTED)
    text = _EMAIL_PATTERN.sub(REDACTED_EMAIL, text)
    text = _SECRET_PAIR_PATTERN.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
    text = _BEARER_PATTERN.sub(f"Bearer {REDACTED}", text)
    return text


def redact_value(value: Any, *, _depth: int = 0, _max_depth: int = 8) -> Any:
    if _depth >= _max_depth:
        return "<max-depth>"

    if value is None:
        return None
    if isinstance(value, (int, float, bool)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return redact_text(str(value))
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for key, item in value.items():
            key_text = str(key)
            if _is_sensitive_key(key_text):
                out[key_text] = REDACTED
            else:
                out[key_text] = redact_value(item, _depth=_depth + 1, _max_depth=_max_depth)
        return out
    if isinstance(value, (list, tuple)):
        return [redact_value(item, _depth=_depth + 1, _max_depth=_max_depth) for item in value]
    if isinstance(value, set):
        return [
            redact_value(item, _depth=_depth + 1, _max_depth=_max_depth)
            for item in sorted(value, key=lambda v: str(v))
        ]
    return redact_text(str(value))


class TraceIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = current_trace_id() or "-"
        return True


class RedactingLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        record.msg = redact_text(str(record.msg))
        return True


__all__ = [
    "REDACTED",
    "REDACTED_EMAIL",
    "TraceIdLogFilter",
    "RedactingLogFilter",
    "bind_trace_id",
    "create_trace_id",
    "current_trace_id",
    "register_secret",
    "redact_text",
    "redact_value",
]
