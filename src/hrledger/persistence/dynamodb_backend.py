"""DynamoDB backends implementing IEmployeeStore and IUserRegistry.

Each entity lives in its own PK/SK table. Unique secondary fields (work email,
work phone, user email, username) are enforced with guard items written in the
same transaction as the profile item, each conditioned on
``attribute_not_exists(PK)``.

All calls go through the resource's low-level client, which is shared by the
worker threads the import pipeline runs store calls on. That client takes and
returns plain Python values; boto3 handles the attribute-value encoding.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from hrledger.core.exceptions import DuplicateRecord, NotFoundError, StoreError
from hrledger.models.employee import EmployeeRecord
from hrledger.models.imports import BulkInsertOutcome, FailureKind, ItemFailure
from hrledger.models.user import UserAccount

logger = logging.getLogger(__name__)

PROFILE = "PROFILE"
UNIQUE = "UNIQUE"
_NOT_EXISTS = "attribute_not_exists(PK)"
_EXISTS = "attribute_exists(PK)"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _strip_keys(item: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in item.items() if k not in ("PK", "SK")}


class _DynamoDBTable:
    """Shared table plumbing: client, transactions, paginated scans."""

    table_base: str = ""

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_suffix = table_suffix
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.resource("dynamodb", **kwargs).meta.client

    @property
    def table_name(self) -> str:
        return f"{self.table_base}{self._table_suffix}"

    def _put(self, item: dict[str, Any], condition: str | None = _NOT_EXISTS) -> dict[str, Any]:
        op: dict[str, Any] = {"TableName": self.table_name, "Item": item}
        if condition:
            op["ConditionExpression"] = condition
        return {"Put": op}

    def _delete(self, pk: str, sk: str) -> dict[str, Any]:
        return {"Delete": {"TableName": self.table_name, "Key": {"PK": pk, "SK": sk}}}

    def _transact(self, ops: list[dict[str, Any]], unique_fields: list[tuple[str, str] | None]) -> None:
        """Run ``ops`` atomically. ``unique_fields[i]`` names the field op ``i`` guards.

        A failed condition on a guarded op raises DuplicateRecord for that field.
        """
        try:
            self._client.transact_write_items(TransactItems=ops)
        except BotoCoreError as exc:
            raise StoreError(f"DynamoDB write to {self.table_name} failed: {exc}") from exc
        except ClientError as exc:
            if exc.response["Error"]["Code"] != "TransactionCanceledException":
                raise StoreError(f"DynamoDB write to {self.table_name} failed: {exc}") from exc
            reasons = exc.response.get("CancellationReasons") or []
            for idx, reason in enumerate(reasons):
                if reason.get("Code") == "ConditionalCheckFailed" and idx < len(unique_fields):
                    guarded = unique_fields[idx]
                    if guarded is not None:
                        raise DuplicateRecord(*guarded) from exc
            if not reasons and unique_fields and unique_fields[0] is not None:
                raise DuplicateRecord(*unique_fields[0]) from exc
            raise StoreError(f"DynamoDB transaction on {self.table_name} cancelled: {exc}") from exc

    def _get_item(self, pk: str, sk: str) -> dict[str, Any] | None:
        try:
            resp = self._client.get_item(TableName=self.table_name, Key={"PK": pk, "SK": sk})
        except (BotoCoreError, ClientError) as exc:
            raise StoreError(f"DynamoDB read {pk!r} failed: {exc}") from exc
        return resp.get("Item")

    def _scan(self, condition: Any) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {"TableName": self.table_name, "FilterExpression": condition}
        try:
            while True:
                resp = self._client.scan(**kwargs)
                items.extend(resp.get("Items", []))
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    return items
                kwargs["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as exc:
            raise StoreError(f"DynamoDB scan of {self.table_name} failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

class DynamoDBEmployeeStore(_DynamoDBTable):
    """Production IEmployeeStore backed by DynamoDB."""

    table_base = "hrledger-employees"

    @staticmethod
    def _pk(employee_id: str) -> str:
        return f"EMPLOYEE#{employee_id}"

    def _from_item(self, item: dict[str, Any]) -> EmployeeRecord:
        return EmployeeRecord.from_wire(_strip_keys(item))

    def insert(self, record: EmployeeRecord) -> EmployeeRecord:
        now = _now()
        stored = record.model_copy(update={"created_at": now, "updated_at": now}, deep=True)
        contact = stored.contact_info

        ops = [
            self._put({"PK": self._pk(stored.employee_id), "SK": PROFILE, **stored.to_wire()}),
            self._put({"PK": f"WORKEMAIL#{contact.work_email}", "SK": UNIQUE,
                       "employeeId": stored.employee_id}),
        ]
        guards: list[tuple[str, str] | None] = [
            ("employeeId", stored.employee_id),
            ("contactInfo.workEmail", contact.work_email),
        ]
        if contact.work_phone_number:
            ops.append(self._put({"PK": f"WORKPHONE#{contact.work_phone_number}", "SK": UNIQUE,
                                  "employeeId": stored.employee_id}))
            guards.append(("contactInfo.workPhoneNumber", contact.work_phone_number))

        self._transact(ops, guards)
        return stored

    def insert_many(self, records: list[EmployeeRecord], ordered: bool = False) -> BulkInsertOutcome:
        outcome = BulkInsertOutcome()
        for idx, record in enumerate(records):
            try:
                outcome.inserted.append(self.insert(record))
                continue
            except DuplicateRecord as exc:
                failure = ItemFailure(index=idx, employee_id=record.employee_id,
                                      kind=FailureKind.DUPLICATE, field=exc.field,
                                      message=exc.message)
            except StoreError as exc:
                logger.error("Insert of employee %s failed: %s", record.employee_id, exc)
                failure = ItemFailure(index=idx, employee_id=record.employee_id,
                                      kind=FailureKind.INTERNAL, message=exc.message)
            outcome.failures.append(failure)
            if ordered:
                break
        return outcome

    def get(self, employee_id: str) -> EmployeeRecord | None:
        item = self._get_item(self._pk(employee_id), PROFILE)
        return self._from_item(item) if item else None

    def find_by_user_account(self, user_id: str) -> EmployeeRecord | None:
        items = self._scan(Attr("SK").eq(PROFILE) & Attr("userAccount").eq(user_id))
        return self._from_item(items[0]) if items else None

    def list_all(self) -> list[EmployeeRecord]:
        return [self._from_item(item) for item in self._scan(Attr("SK").eq(PROFILE))]

    def delete(self, employee_id: str) -> bool:
        record = self.get(employee_id)
        if record is None:
            return False
        ops = [
            self._delete(self._pk(employee_id), PROFILE),
            self._delete(f"WORKEMAIL#{record.contact_info.work_email}", UNIQUE),
        ]
        if record.contact_info.work_phone_number:
            ops.append(self._delete(f"WORKPHONE#{record.contact_info.work_phone_number}", UNIQUE))
        self._transact(ops, [])
        return True


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class DynamoDBUserRegistry(_DynamoDBTable):
    """Production IUserRegistry backed by DynamoDB."""

    table_base = "hrledger-users"
    BATCH_GET_LIMIT = 100

    @staticmethod
    def _pk(user_id: str) -> str:
        return f"USER#{user_id}"

    @staticmethod
    def _item(user: UserAccount) -> dict[str, Any]:
        body = user.model_dump(by_alias=True, mode="json", exclude_none=True)
        return {"PK": f"USER#{user.id}", "SK": PROFILE, **body}

    @staticmethod
    def _from_item(item: dict[str, Any]) -> UserAccount:
        return UserAccount.model_validate(_strip_keys(item))

    def create(self, user: UserAccount) -> UserAccount:
        now = _now()
        stored = user.model_copy(update={"created_at": now, "updated_at": now})
        ops = [
            self._put(self._item(stored)),
            self._put({"PK": f"EMAIL#{stored.email}", "SK": UNIQUE, "userId": stored.id}),
            self._put({"PK": f"USERNAME#{stored.username}", "SK": UNIQUE, "userId": stored.id}),
        ]
        self._transact(ops, [("id", stored.id), ("email", stored.email),
                             ("username", stored.username)])
        return stored

    def get(self, user_id: str) -> UserAccount | None:
        item = self._get_item(self._pk(user_id), PROFILE)
        return self._from_item(item) if item else None

    def find_by_email(self, email: str) -> UserAccount | None:
        guard = self._get_item(f"EMAIL#{email.strip().lower()}", UNIQUE)
        return self.get(guard["userId"]) if guard else None

    def find_by_ids(self, user_ids: list[str]) -> list[UserAccount]:
        unique_ids = list(dict.fromkeys(user_ids))
        found: list[UserAccount] = []
        for start in range(0, len(unique_ids), self.BATCH_GET_LIMIT):
            chunk = unique_ids[start:start + self.BATCH_GET_LIMIT]
            request: dict[str, Any] = {
                self.table_name: {"Keys": [{"PK": self._pk(uid), "SK": PROFILE} for uid in chunk]}
            }
            try:
                while request:
                    resp = self._client.batch_get_item(RequestItems=request)
                    found.extend(self._from_item(i) for i in resp["Responses"].get(self.table_name, []))
                    request = resp.get("UnprocessedKeys") or {}
            except (BotoCoreError, ClientError) as exc:
                raise StoreError(f"DynamoDB batch lookup of users failed: {exc}") from exc
        return found

    def set_verified(self, user_id: str) -> bool:
        try:
            self._client.update_item(
                TableName=self.table_name,
                Key={"PK": self._pk(user_id), "SK": PROFILE},
                UpdateExpression="SET isVerified = :true, updatedAt = :now",
                ConditionExpression=_EXISTS,
                ExpressionAttributeValues={":true": True, ":now": _now().isoformat()},
            )
        except ClientError as exc:
            if exc.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise StoreError(f"DynamoDB verify of user {user_id!r} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise StoreError(f"DynamoDB verify of user {user_id!r} failed: {exc}") from exc
        return True

    def update(self, user: UserAccount) -> UserAccount:
        current = self.get(user.id)
        if current is None:
            raise NotFoundError(f"User {user.id} does not exist")
        stored = user.model_copy(update={"updated_at": _now()})

        ops = [self._put(self._item(stored), condition=_EXISTS)]
        guards: list[tuple[str, str] | None] = [None]
        if stored.email != current.email:
            ops.append(self._put({"PK": f"EMAIL#{stored.email}", "SK": UNIQUE, "userId": stored.id}))
            ops.append(self._delete(f"EMAIL#{current.email}", UNIQUE))
            guards += [("email", stored.email), None]
        if stored.username != current.username:
            ops.append(self._put({"PK": f"USERNAME#{stored.username}", "SK": UNIQUE,
                                  "userId": stored.id}))
            ops.append(self._delete(f"USERNAME#{current.username}", UNIQUE))
            guards += [("username", stored.username), None]

        self._transact(ops, guards)
        return stored
