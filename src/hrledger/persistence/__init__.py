"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

import logging
from typing import NamedTuple

from hrledger.core.config import AppSettings
from hrledger.core.protocols import ICacheBackend, IEmployeeStore, IUserRegistry

logger = logging.getLogger(__name__)


class Persistence(NamedTuple):
    employees: IEmployeeStore
    users: IUserRegistry
    cache: ICacheBackend


def create_persistence(settings: AppSettings | None = None) -> Persistence:
    """Create wired-up persistence backends from application settings."""
    if settings is None:
        settings = AppSettings()

    if settings.backend == "memory":
        from hrledger.persistence.memory_backend import (
            MemoryCacheBackend,
            MemoryEmployeeStore,
            MemoryUserRegistry,
        )

        logger.info("Using in-memory persistence")
        return Persistence(MemoryEmployeeStore(), MemoryUserRegistry(), MemoryCacheBackend())

    from hrledger.persistence.dynamodb_backend import DynamoDBEmployeeStore, DynamoDBUserRegistry
    from hrledger.persistence.redis_backend import RedisCacheBackend

    cache = RedisCacheBackend(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        namespace=settings.redis.namespace,
    )

    employees = DynamoDBEmployeeStore(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )

    users = DynamoDBUserRegistry(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )

    logger.info("Using DynamoDB persistence (suffix=%r)", settings.dynamodb.table_suffix)
    return Persistence(employees, users, cache)
