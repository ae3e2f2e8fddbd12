#!/usr/bin/env python
"""
pytest configuration file

This file contains shared fixtures for all tests.
"""

import fakeredis
import pytest

from docspace.components.namespace.object_storage import MemoryObjectStorage, reset_object_storage
from docspace.components.namespace.redis_storage import NamespaceRedisStorage
from docspace.components.namespace.service import NamespaceService, reset_namespace_service
from docspace.components.namespace.sql_storage import NamespaceSqlStorage
from docspace.components.namespace.storage import NamespaceMemoryStorage
from docspace.components.namespace.storage_provider import reset_namespace_storage
from docspace.db.mysql import create_db_engine, create_session_factory, init_db
from docspace.db.redis_cache import RedisCache

ACTOR = "user_test"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Drop cached store/service singletons around every test."""
    reset_namespace_storage()
    reset_object_storage()
    reset_namespace_service()
    yield
    reset_namespace_storage()
    reset_object_storage()
    reset_namespace_service()


@pytest.fixture
def actor() -> str:
    """Actor recorded as provenance"""
    return ACTOR


@pytest.fixture
def fake_redis_client():
    """
    Create a fakeredis client for unit tests.

    This provides an in-memory Redis implementation that allows
    unit tests to run without a real Redis server.
    """
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.close()


@pytest.fixture
def memory_storage() -> NamespaceMemoryStorage:
    """Fresh in-memory store"""
    return NamespaceMemoryStorage()


@pytest.fixture
def redis_storage(fake_redis_client) -> NamespaceRedisStorage:
    """Redis store backed by fakeredis"""
    return NamespaceRedisStorage(cache=RedisCache(client=fake_redis_client))


@pytest.fixture
def sql_engine():
    """In-memory SQLite engine with the namespace tables."""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_storage(sql_engine) -> NamespaceSqlStorage:
    """SQL store on in-memory SQLite"""
    return NamespaceSqlStorage(create_session_factory(sql_engine))


@pytest.fixture(params=["memory", "redis", "sql"])
def storage(request):
    """Every store backend in turn."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def object_storage() -> MemoryObjectStorage:
    """Fresh in-memory object store"""
    return MemoryObjectStorage()


@pytest.fixture
def service(storage, object_storage) -> NamespaceService:
    """Namespace service over each store backend."""
    return NamespaceService(storage=storage, object_storage=object_storage, max_workers=4)


@pytest.fixture
def memory_service(memory_storage, object_storage) -> NamespaceService:
    """Namespace service over the in-memory store only."""
    return NamespaceService(storage=memory_storage, object_storage=object_storage, max_workers=4)
