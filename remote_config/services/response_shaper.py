"""
Shapes flat store results into the per-screen view served to clients.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable

from remote_config.models.content import ConfigEntry

ConfigByScreen = Dict[str, Dict[str, Any]]


@dataclass(frozen=True)
class DecodedValue:
    """Presentation value of an entry; ``raw`` is True when the stored string is passed through."""
    value: Any
    raw: bool


def decode_value(entry: ConfigEntry) -> DecodedValue:
    if entry.type != "json":
        return DecodedValue(value=entry.value, raw=True)
    try:
        return DecodedValue(value=json.loads(entry.value), raw=False)
    except (TypeError, ValueError):
        # Malformed JSON stays readable as plain text
        return DecodedValue(value=entry.value, raw=True)


def group_by_screen(entries: Iterable[ConfigEntry]) -> ConfigByScreen:
    """Group entries as ``{screen: {key: value}}``, skipping entries without a screen or key."""
    by_screen: ConfigByScreen = {}
    for entry in entries:
        if not entry.screen or not entry.key:
            continue
        by_screen.setdefault(entry.screen, {})[entry.key] = decode_value(entry).value
    return by_screen
