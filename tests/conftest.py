from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from remote_config.api.application import create_app
from remote_config.core.database import Base, build_engine
from remote_config.services.config_store import SqlConfigStore

FIXED_NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

ADMIN_HEADERS = {"X-Auth-Role": "admin", "X-Auth-Subject": "admin-user-1"}
VIEWER_HEADERS = {"X-Auth-Role": "viewer", "X-Auth-Subject": "viewer-user-1"}


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(session_factory):
    return SqlConfigStore(session_factory=session_factory, environment="production", clock=lambda: FIXED_NOW)


@pytest.fixture
def client(sql_store):
    with TestClient(create_app(store=sql_store)) as test_client:
        yield test_client
