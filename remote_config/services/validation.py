"""
Input validation rules for config reads and writes.

Every rule is pure: it inspects untrusted input and returns a
``ValidationResult`` that either accepts it or carries a message suitable
for returning to the caller. Composite validation stops at the first
failing rule.
"""
import json
import re
from dataclasses import dataclass
from typing import Any, Optional

from remote_config.models.content import ConfigPayload, MAX_VALUE_BYTES, VALID_APPS, VALID_TYPES

KEY_PATTERN = re.compile(r"[a-z0-9_]+")
SCREEN_PATTERN = re.compile(r"[a-z0-9_]+")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    data: Optional[ConfigPayload] = None

    @classmethod
    def ok(cls, data: Optional[ConfigPayload] = None) -> "ValidationResult":
        return cls(valid=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


def valid_apps_message(prefix: str) -> str:
    return f"{prefix} must be one of: {', '.join(VALID_APPS)}"


def validate_app(app: Any) -> ValidationResult:
    """Validate the app query parameter"""
    if not app or not isinstance(app, str):
        return ValidationResult.fail("Missing required query parameter: app")
    if app not in VALID_APPS:
        return ValidationResult.fail(f"Invalid app. Must be one of: {', '.join(VALID_APPS)}")
    return ValidationResult.ok()


def is_valid_app(app: Any) -> bool:
    return isinstance(app, str) and app in VALID_APPS


def validate_key(key: Any) -> ValidationResult:
    if not key or not isinstance(key, str):
        return ValidationResult.fail("Key is required")
    if not KEY_PATTERN.fullmatch(key):
        return ValidationResult.fail("Key must match /^[a-z0-9_]+$/")
    return ValidationResult.ok()


def validate_screen(screen: Any) -> ValidationResult:
    if not screen or not isinstance(screen, str):
        return ValidationResult.fail("Screen is required")
    if not SCREEN_PATTERN.fullmatch(screen):
        return ValidationResult.fail("Screen must match /^[a-z0-9_]+$/")
    return ValidationResult.ok()


def validate_value_size(value: str) -> ValidationResult:
    """Reject values of 10KB or more once encoded as UTF-8"""
    if len(value.encode("utf-8")) >= MAX_VALUE_BYTES:
        return ValidationResult.fail(f"Value exceeds maximum size of {MAX_VALUE_BYTES // 1024}KB")
    return ValidationResult.ok()


def validate_type(content_type: Any) -> ValidationResult:
    if not content_type or not isinstance(content_type, str):
        return ValidationResult.fail("Type is required")
    if content_type not in VALID_TYPES:
        return ValidationResult.fail(f"Type must be one of: {', '.join(VALID_TYPES)}")
    return ValidationResult.ok()


def stringify_value(value: Any) -> str:
    """Keep strings as-is, serialize anything else to compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps("" if value is None else value, separators=(",", ":"), ensure_ascii=False)


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    return str(raw)


def validate_config_payload(payload: Any) -> ValidationResult:
    """
    Validate a create/update body into a ``ConfigPayload``.

    Checks run screen, key, value size, type and the first failure wins.
    """
    if not isinstance(payload, dict):
        return ValidationResult.fail("Invalid request body")

    screen = _as_text(payload.get("screen"))
    result = validate_screen(screen)
    if not result.valid:
        return result

    key = _as_text(payload.get("key"))
    result = validate_key(key)
    if not result.valid:
        return result

    value = stringify_value(payload.get("value"))
    result = validate_value_size(value)
    if not result.valid:
        return result

    content_type = payload.get("type")
    result = validate_type(content_type)
    if not result.valid:
        return result

    return ValidationResult.ok(ConfigPayload(screen=screen, key=key, value=value, type=content_type))
