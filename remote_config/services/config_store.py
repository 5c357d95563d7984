"""
Config store adapters.

Both backends expose the same three operations over the pk/sk key scheme in
``remote_config.services.keys``:

- ``fetch_published``: everything under ``APP#{app}`` whose sort key begins
  with ``ENV#{environment}``, limited to published entries
- ``put``: unconditional overwrite, always published, always re-stamped
- ``delete``: exact-key removal, no error when the entry is absent

Writes never check for an existing entry, so create and update have the same
storage effect. Nothing is retried here; store exceptions reach the caller
unchanged.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.config import Config

from remote_config.core.config import settings
from remote_config.core.database import SessionLocal
from remote_config.core.errors import StoreConfigurationError
from remote_config.models.config_entry import ConfigEntryRow
from remote_config.models.content import ConfigEntry, PUBLISHED_STATUS
from remote_config.services.keys import partition_key, sort_key, sort_key_prefix

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ConfigStore(ABC):
    """Common contract for config store backends"""

    def __init__(self, environment: Optional[str] = None, clock: Callable[[], datetime] = utc_now):
        self.environment = environment or settings.ENVIRONMENT
        self._clock = clock

    @abstractmethod
    def fetch_published(self, app: str, environment: Optional[str] = None) -> List[ConfigEntry]:
        pass

    @abstractmethod
    def put(self, app: str, screen: str, key: str, value: str, type: str, updated_by: str) -> None:
        pass

    @abstractmethod
    def delete(self, app: str, screen: str, key: str) -> None:
        pass

    def _build_item(self, app: str, screen: str, key: str, value: str,
                    type: str, updated_by: Optional[str]) -> Dict[str, Any]:
        return {
            "pk": partition_key(app),
            "sk": sort_key(self.environment, screen, key),
            "app": app,
            "screen": screen,
            "key": key,
            "value": value,
            "type": type,
            "status": PUBLISHED_STATUS,
            "updatedAt": format_timestamp(self._clock()),
            "updatedBy": updated_by,
        }


class DynamoConfigStore(ConfigStore):
    """DynamoDB-backed store (table keyed by ``pk`` HASH and ``sk`` RANGE)"""

    def __init__(self, table_name: Optional[str] = None, client=None,
                 environment: Optional[str] = None, clock: Callable[[], datetime] = utc_now):
        super().__init__(environment=environment, clock=clock)
        self._table_name = settings.CONTENT_TABLE_NAME if table_name is None else table_name
        self._client = client
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    @property
    def table_name(self) -> str:
        if not self._table_name:
            raise StoreConfigurationError("CONTENT_TABLE_NAME environment variable is required")
        return self._table_name

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "dynamodb",
                region_name=settings.AWS_REGION,
                endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
                config=Config(
                    connect_timeout=settings.STORE_CONNECT_TIMEOUT_SECONDS,
                    read_timeout=settings.STORE_READ_TIMEOUT_SECONDS,
                    retries={"mode": "standard"},
                ),
            )
        return self._client

    def _serialize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {
            name: self._serializer.serialize(value)
            for name, value in values.items()
            if value is not None
        }

    def _deserialize(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {name: self._deserializer.deserialize(value) for name, value in item.items()}

    def fetch_published(self, app: str, environment: Optional[str] = None) -> List[ConfigEntry]:
        env = environment or self.environment
        params: Dict[str, Any] = {
            "TableName": self.table_name,
            "KeyConditionExpression": "pk = :pk AND begins_with(sk, :skPrefix)",
            "FilterExpression": "#status = :published",
            "ExpressionAttributeNames": {"#status": "status"},
            "ExpressionAttributeValues": self._serialize({
                ":pk": partition_key(app),
                ":skPrefix": sort_key_prefix(env),
                ":published": PUBLISHED_STATUS,
            }),
        }
        client = self._get_client()

        entries: List[ConfigEntry] = []
        while True:
            resp = client.query(**params)
            for raw in resp.get("Items", []):
                entries.append(self._to_entry(self._deserialize(raw), env))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key

        logger.debug("Fetched %d published entries for app=%s env=%s", len(entries), app, env)
        return entries

    def put(self, app: str, screen: str, key: str, value: str, type: str, updated_by: str) -> None:
        item = self._build_item(app, screen, key, value, type, updated_by)
        self._get_client().put_item(TableName=self.table_name, Item=self._serialize(item))

    def delete(self, app: str, screen: str, key: str) -> None:
        item_key = {"pk": partition_key(app), "sk": sort_key(self.environment, screen, key)}
        self._get_client().delete_item(TableName=self.table_name, Key=self._serialize(item_key))

    @staticmethod
    def _to_entry(item: Dict[str, Any], environment: str) -> ConfigEntry:
        return ConfigEntry(
            app=item.get("app"),
            screen=item.get("screen"),
            key=item.get("key"),
            value=item.get("value"),
            type=item.get("type"),
            status=item.get("status", PUBLISHED_STATUS),
            environment=environment,
            updated_at=item.get("updatedAt"),
            updated_by=item.get("updatedBy"),
        )


class SqlConfigStore(ConfigStore):
    """SQLAlchemy-backed store; the sort-key prefix scan becomes a LIKE on ``sk``"""

    def __init__(self, session_factory=None, environment: Optional[str] = None,
                 clock: Callable[[], datetime] = utc_now):
        super().__init__(environment=environment, clock=clock)
        self._session_factory = session_factory or SessionLocal

    def fetch_published(self, app: str, environment: Optional[str] = None) -> List[ConfigEntry]:
        env = environment or self.environment
        db = self._session_factory()
        try:
            rows = (
                db.query(ConfigEntryRow)
                .filter(
                    ConfigEntryRow.pk == partition_key(app),
                    ConfigEntryRow.sk.startswith(sort_key_prefix(env), autoescape=True),
                    ConfigEntryRow.status == PUBLISHED_STATUS,
                )
                .order_by(ConfigEntryRow.sk)
                .all()
            )
            return [self._to_entry(row, env) for row in rows]
        finally:
            db.close()

    def put(self, app: str, screen: str, key: str, value: str, type: str, updated_by: str) -> None:
        item = self._build_item(app, screen, key, value, type, updated_by)
        db = self._session_factory()
        try:
            db.merge(ConfigEntryRow(
                pk=item["pk"],
                sk=item["sk"],
                app=item["app"],
                screen=item["screen"],
                key=item["key"],
                value=item["value"],
                type=item["type"],
                status=item["status"],
                updated_at=item["updatedAt"],
                updated_by=item["updatedBy"],
            ))
            db.commit()
        finally:
            db.close()

    def delete(self, app: str, screen: str, key: str) -> None:
        db = self._session_factory()
        try:
            (
                db.query(ConfigEntryRow)
                .filter(
                    ConfigEntryRow.pk == partition_key(app),
                    ConfigEntryRow.sk == sort_key(self.environment, screen, key),
                )
                .delete(synchronize_session=False)
            )
            db.commit()
        finally:
            db.close()

    @staticmethod
    def _to_entry(row: ConfigEntryRow, environment: str) -> ConfigEntry:
        return ConfigEntry(
            app=row.app,
            screen=row.screen,
            key=row.key,
            value=row.value,
            type=row.type,
            status=row.status,
            environment=environment,
            updated_at=row.updated_at,
            updated_by=row.updated_by,
        )


def get_config_store() -> ConfigStore:
    """Build the backend selected by ``STORE_BACKEND``."""
    if settings.STORE_BACKEND == "sql":
        return SqlConfigStore()
    return DynamoConfigStore()
