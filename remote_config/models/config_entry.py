"""
Config entry table for the SQL store backend.
"""
from sqlalchemy import Column, String, Text

from remote_config.core.database import Base


class ConfigEntryRow(Base):
    """One published config value, addressed by the same pk/sk pair DynamoDB uses."""

    __tablename__ = "config_entries"

    pk = Column(String(128), primary_key=True)
    sk = Column(String(512), primary_key=True)
    app = Column(String(32), nullable=False)
    screen = Column(String(128), nullable=False)
    key = Column(String(128), nullable=False)
    value = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)
    status = Column(String(16), nullable=False, index=True)
    updated_at = Column(String(40), nullable=False)
    updated_by = Column(String(255), nullable=True)
