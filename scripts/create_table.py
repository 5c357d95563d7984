"""
Create the DynamoDB content table used by the DynamoDB store backend.

Usage: python scripts/create_table.py [--wait]
"""
import argparse
import sys
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR))

from remote_config.core.config import settings  # noqa: E402


def build_table_definition(table_name):
    return {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": "pk", "KeyType": "HASH"},
            {"AttributeName": "sk", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "sk", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def create_table(client, table_name, wait=False):
    try:
        client.create_table(**build_table_definition(table_name))
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ResourceInUseException":
            print(f"Table {table_name} already exists")
            return False
        raise
    print(f"Creating table {table_name}...")
    if wait:
        client.get_waiter("table_exists").wait(TableName=table_name)
        print(f"Table {table_name} is active")
    return True


def main():
    parser = argparse.ArgumentParser(description="Create the remote config DynamoDB table")
    parser.add_argument("--wait", action="store_true", help="wait until the table is active")
    args = parser.parse_args()

    if not settings.CONTENT_TABLE_NAME:
        print("CONTENT_TABLE_NAME is not set")
        sys.exit(1)

    client = boto3.client(
        "dynamodb",
        region_name=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
    )
    create_table(client, settings.CONTENT_TABLE_NAME, wait=args.wait)


if __name__ == "__main__":
    main()
