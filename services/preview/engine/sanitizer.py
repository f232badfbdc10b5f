"""Bounds and redacts executor results before they are stored or returned."""

import re
from typing import Any, NamedTuple
from shared.constants import (
    MAX_PREVIEW_ARRAY_ITEMS,
    MAX_PREVIEW_DEPTH,
    MAX_PREVIEW_OBJECT_KEYS,
    MAX_PREVIEW_STRING_LENGTH,
    MAX_SAFE_INTEGER,
    REDACTED_PLACEHOLDER,
    SENSITIVE_KEY_PATTERN,
    TRUNCATED_PLACEHOLDER,
)

_SENSITIVE_KEY = re.compile(SENSITIVE_KEY_PATTERN, re.IGNORECASE)


class SanitizedValue(NamedTuple):
    value: Any
    truncated: bool


class _Sanitizer:
    def __init__(self):
        self.truncated = False

    def visit(self, value: Any, depth: int) -> Any:
        if depth >= MAX_PREVIEW_DEPTH:
            self.truncated = True
            return TRUNCATED_PLACEHOLDER

        if value is None or isinstance(value, (bool, float)):
            return value

        if isinstance(value, int):
            if abs(value) > MAX_SAFE_INTEGER:
                return str(value)
            return value

        if isinstance(value, str):
            if len(value) > MAX_PREVIEW_STRING_LENGTH:
                self.truncated = True
                return value[:MAX_PREVIEW_STRING_LENGTH] + "..."
            return value

        if isinstance(value, (bytes, bytearray)):
            return self.visit("0x" + bytes(value).hex(), depth)

        if isinstance(value, (list, tuple, set, frozenset)):
            items = list(value)
            if len(items) > MAX_PREVIEW_ARRAY_ITEMS:
                self.truncated = True
            return [self.visit(item, depth + 1) for item in items[:MAX_PREVIEW_ARRAY_ITEMS]]

        if isinstance(value, dict):
            entries = list(value.items())
            if len(entries) > MAX_PREVIEW_OBJECT_KEYS:
                self.truncated = True
            result = {}
            for key, item in entries[:MAX_PREVIEW_OBJECT_KEYS]:
                key = str(key)
                if _SENSITIVE_KEY.search(key):
                    self.truncated = True
                    result[key] = REDACTED_PLACEHOLDER
                else:
                    result[key] = self.visit(item, depth + 1)
            return result

        return self.visit(str(value), depth)


def sanitize_execution_value(value: Any) -> SanitizedValue:
    """Applies depth, size and string ceilings and redacts sensitive keys at any depth"""
    sanitizer = _Sanitizer()
    sanitized = sanitizer.visit(value, 0)
    return SanitizedValue(sanitized, sanitizer.truncated)
