"""Create hrledger DynamoDB tables and seed a verified admin account.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566 \
        --admin-email admin@example.com --admin-password 'change-me-now'
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3

from hrledger.auth.passwords import hash_password
from hrledger.core.exceptions import DuplicateRecord
from hrledger.models.user import Role, UserAccount
from hrledger.persistence.dynamodb_backend import DynamoDBUserRegistry

TABLE_DEFINITIONS: list[dict[str, Any]] = [
    {"name": "hrledger-employees"},
    {"name": "hrledger-users"},
]


def create_tables(ddb: Any, suffix: str = "") -> None:
    """Create both DynamoDB tables. Skips if table already exists."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])

    for defn in TABLE_DEFINITIONS:
        table_name = f"{defn['name']}{suffix}"
        if table_name in existing:
            print(f"  Table {table_name} already exists, skipping")
            continue
        client.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        print(f"  Created table {table_name}")


def seed_admin(registry: DynamoDBUserRegistry, username: str, email: str,
               password: str) -> UserAccount | None:
    """Create a verified ADMIN account. Returns None if the email or username is taken."""
    admin = UserAccount(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=Role.ADMIN,
        is_verified=True,
    )
    try:
        created = registry.create(admin)
    except DuplicateRecord as exc:
        print(f"  Admin not created: {exc.message}")
        return None
    print(f"  Seeded admin {created.username} ({created.id})")
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed DynamoDB tables for hrledger")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--admin-username", default="administrator")
    parser.add_argument("--admin-email", default=None, help="Seed an admin with this email")
    parser.add_argument("--admin-password", default=None)
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating tables...")
    create_tables(ddb, suffix=args.table_suffix)

    if args.admin_email and args.admin_password:
        print("Seeding admin...")
        registry = DynamoDBUserRegistry(
            table_suffix=args.table_suffix, region=args.region, endpoint_url=args.endpoint_url,
        )
        seed_admin(registry, args.admin_username, args.admin_email, args.admin_password)

    print("Done!")


if __name__ == "__main__":
    main()
