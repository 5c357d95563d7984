"""
Content entry data structures and fixed vocabularies
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

# Client applications allowed to read and own config
VALID_APPS = ("customer", "driver", "restaurant", "admin")

# Supported content value types
VALID_TYPES = ("text", "image", "json")

PUBLISHED_STATUS = "published"

# Max value size in bytes (10KB); values must be strictly smaller
MAX_VALUE_BYTES = 10 * 1024

UNKNOWN_WRITER = "unknown"


@dataclass
class ConfigEntry:
    """A stored config value as read back from the store"""
    app: str
    screen: Optional[str]
    key: Optional[str]
    value: Optional[str]
    type: Optional[str]
    status: str = PUBLISHED_STATUS
    environment: Optional[str] = None
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None


@dataclass(frozen=True)
class ConfigPayload:
    """A create/update body after validation"""
    screen: str
    key: str
    value: str
    type: str


@dataclass(frozen=True)
class ConfigIdentity:
    """Identity echoed back to admins after a write"""
    app: str
    screen: str
    key: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
