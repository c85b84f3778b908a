"""Logging setup.

One stream handler with a structured format, plus a filter that keeps signed
attendance tokens out of log output.
"""

from __future__ import annotations

import logging
import re
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# <base64url payload>.<base64url 32-byte HMAC>
_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]{20,}\.[A-Za-z0-9_-]{43}")


def mask_token(text: str) -> str:
    return _TOKEN_RE.sub("<token:***>", text)


class TokenMaskingFilter(logging.Filter):
    """Mask attendance tokens in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask_token(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: mask_token(v) if isinstance(v, str) else v for k, v in record.args.items()}
            else:
                record.args = tuple(mask_token(a) if isinstance(a, str) else a for a in record.args)
        return True


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    root = logging.getLogger("lesson_attendance")
    root.setLevel(level if isinstance(level, int) else level.upper())

    if not any(getattr(h, "_lesson_attendance", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(TokenMaskingFilter())
        handler._lesson_attendance = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return root
