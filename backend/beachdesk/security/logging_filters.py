"""Logging filters that scrub client identifiers."""

from __future__ import annotations

import logging
import re

# Phone numbers (10 digits) and national ids (7-8 digits, optionally dotted).
_SENSITIVE_PATTERN = re.compile(r"\b(?:\d{10}|\d{1,2}\.?\d{3}\.?\d{3})\b")


class SensitiveFilter(logging.Filter):
    """Replace phone and national-id digit runs with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            message = record.getMessage()
            redacted = _SENSITIVE_PATTERN.sub("**REDACTED**", message)
            if redacted != message:
                record.msg = redacted
                record.args = None
        return True


__all__ = ["SensitiveFilter"]
