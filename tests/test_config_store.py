import pytest
from boto3.dynamodb.types import TypeSerializer

from remote_config.core.errors import StoreConfigurationError
from remote_config.services.config_store import DynamoConfigStore, SqlConfigStore, format_timestamp

from conftest import FIXED_NOW

_serializer = TypeSerializer()


def dynamo_item(**attrs):
    return {name: _serializer.serialize(value) for name, value in attrs.items()}


class StubDynamoClient:
    def __init__(self, pages=None, error=None):
        self.pages = list(pages or [])
        self.error = error
        self.queries = []
        self.puts = []
        self.deletes = []

    def query(self, **params):
        self.queries.append(dict(params))
        if self.error:
            raise self.error
        return self.pages.pop(0) if self.pages else {"Items": []}

    def put_item(self, **params):
        if self.error:
            raise self.error
        self.puts.append(params)
        return {}

    def delete_item(self, **params):
        if self.error:
            raise self.error
        self.deletes.append(params)
        return {}


def make_dynamo_store(client, table_name="content"):
    return DynamoConfigStore(table_name=table_name, client=client, environment="production", clock=lambda: FIXED_NOW)


def test_format_timestamp_uses_utc_millis():
    assert format_timestamp(FIXED_NOW) == "2026-01-01T12:00:00.000Z"


# DynamoDB backend

def test_dynamo_fetch_published_queries_app_partition_and_environment_prefix():
    client = StubDynamoClient(pages=[{
        "Items": [dynamo_item(
            pk="APP#customer", sk="ENV#production#SCREEN#home#KEY#title",
            app="customer", screen="home", key="title", value="Hello", type="text",
            status="published", updatedAt="2026-01-01T12:00:00.000Z", updatedBy="admin-user-1",
        )],
    }])
    store = make_dynamo_store(client)

    entries = store.fetch_published("customer")

    params = client.queries[0]
    assert params["TableName"] == "content"
    assert params["KeyConditionExpression"] == "pk = :pk AND begins_with(sk, :skPrefix)"
    assert params["FilterExpression"] == "#status = :published"
    assert params["ExpressionAttributeNames"] == {"#status": "status"}
    assert params["ExpressionAttributeValues"] == {
        ":pk": {"S": "APP#customer"},
        ":skPrefix": {"S": "ENV#production"},
        ":published": {"S": "published"},
    }
    assert len(entries) == 1
    assert entries[0].screen == "home"
    assert entries[0].key == "title"
    assert entries[0].value == "Hello"
    assert entries[0].updated_by == "admin-user-1"
    assert entries[0].environment == "production"


def test_dynamo_fetch_published_follows_pagination():
    first = dynamo_item(app="customer", screen="home", key="a", value="1", type="text", status="published")
    second = dynamo_item(app="customer", screen="home", key="b", value="2", type="text", status="published")
    last_key = {"pk": {"S": "APP#customer"}, "sk": {"S": "ENV#production#SCREEN#home#KEY#a"}}
    client = StubDynamoClient(pages=[
        {"Items": [first], "LastEvaluatedKey": last_key},
        {"Items": [second]},
    ])
    store = make_dynamo_store(client)

    entries = store.fetch_published("customer")

    assert [e.key for e in entries] == ["a", "b"]
    assert "ExclusiveStartKey" not in client.queries[0]
    assert client.queries[1]["ExclusiveStartKey"] == last_key


def test_dynamo_fetch_published_uses_explicit_environment():
    client = StubDynamoClient()
    store = make_dynamo_store(client)

    assert store.fetch_published("driver", environment="staging") == []
    assert client.queries[0]["ExpressionAttributeValues"][":skPrefix"] == {"S": "ENV#staging"}


def test_dynamo_put_writes_published_item_with_timestamp():
    client = StubDynamoClient()
    store = make_dynamo_store(client)

    store.put("customer", "home", "title", "Hello", "text", "admin-user-1")

    assert client.puts == [{
        "TableName": "content",
        "Item": {
            "pk": {"S": "APP#customer"},
            "sk": {"S": "ENV#production#SCREEN#home#KEY#title"},
            "app": {"S": "customer"},
            "screen": {"S": "home"},
            "key": {"S": "title"},
            "value": {"S": "Hello"},
            "type": {"S": "text"},
            "status": {"S": "published"},
            "updatedAt": {"S": "2026-01-01T12:00:00.000Z"},
            "updatedBy": {"S": "admin-user-1"},
        },
    }]


def test_dynamo_delete_addresses_exact_key():
    client = StubDynamoClient()
    store = make_dynamo_store(client)

    store.delete("customer", "home", "title")

    assert client.deletes == [{
        "TableName": "content",
        "Key": {
            "pk": {"S": "APP#customer"},
            "sk": {"S": "ENV#production#SCREEN#home#KEY#title"},
        },
    }]


def test_dynamo_store_requires_table_name():
    store = make_dynamo_store(StubDynamoClient(), table_name="")
    with pytest.raises(StoreConfigurationError, match="CONTENT_TABLE_NAME"):
        store.fetch_published("customer")


def test_dynamo_store_propagates_client_errors():
    store = make_dynamo_store(StubDynamoClient(error=RuntimeError("throttled")))
    with pytest.raises(RuntimeError, match="throttled"):
        store.put("customer", "home", "title", "Hello", "text", "admin-user-1")


# SQL backend

def test_sql_put_then_fetch_returns_published_entry(sql_store):
    sql_store.put("customer", "home", "title", "Hello", "text", "admin-user-1")

    entries = sql_store.fetch_published("customer")

    assert len(entries) == 1
    entry = entries[0]
    assert (entry.app, entry.screen, entry.key, entry.value, entry.type) == ("customer", "home", "title", "Hello", "text")
    assert entry.status == "published"
    assert entry.updated_at == "2026-01-01T12:00:00.000Z"
    assert entry.updated_by == "admin-user-1"


def test_sql_put_overwrites_existing_identity(sql_store):
    sql_store.put("customer", "home", "title", "Hello", "text", "first")
    sql_store.put("customer", "home", "title", '{"a":1}', "json", "second")

    entries = sql_store.fetch_published("customer")

    assert len(entries) == 1
    assert entries[0].value == '{"a":1}'
    assert entries[0].type == "json"
    assert entries[0].updated_by == "second"


def test_sql_fetch_is_scoped_to_app_and_environment(session_factory):
    production = SqlConfigStore(session_factory=session_factory, environment="production")
    staging = SqlConfigStore(session_factory=session_factory, environment="staging")
    production.put("customer", "home", "title", "Prod", "text", "a")
    production.put("driver", "home", "title", "Driver", "text", "a")
    staging.put("customer", "home", "title", "Staging", "text", "a")

    assert [e.value for e in production.fetch_published("customer")] == ["Prod"]
    assert [e.value for e in staging.fetch_published("customer")] == ["Staging"]
    assert [e.value for e in production.fetch_published("customer", environment="staging")] == ["Staging"]
    assert production.fetch_published("restaurant") == []


def test_sql_fetch_ignores_unpublished_entries(sql_store, session_factory):
    from remote_config.models.config_entry import ConfigEntryRow

    sql_store.put("customer", "home", "title", "Hello", "text", "a")
    db = session_factory()
    try:
        db.add(ConfigEntryRow(
            pk="APP#customer", sk="ENV#production#SCREEN#home#KEY#draft",
            app="customer", screen="home", key="draft", value="WIP", type="text",
            status="draft", updated_at="2026-01-01T12:00:00.000Z", updated_by="a",
        ))
        db.commit()
    finally:
        db.close()

    assert [e.key for e in sql_store.fetch_published("customer")] == ["title"]


def test_sql_delete_is_idempotent(sql_store):
    sql_store.put("customer", "home", "title", "Hello", "text", "a")

    sql_store.delete("customer", "home", "title")
    sql_store.delete("customer", "home", "title")

    assert sql_store.fetch_published("customer") == []
