from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool
from sqlalchemy.engine import Engine
from sqlmodel import create_engine

from src.bookshelf.api.http.app import create_app
from src.bookshelf.core.services import DbSessionService, StorageGateway

__all__ = [
    "engine",
    "database_service",
    "gateway",
    "file_gateway",
    "client",
    "make_client",
]


@pytest.fixture
def engine() -> Generator[Engine]:
    """Fresh in-memory SQLite engine shared by every thread of one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def database_service(engine: Engine) -> DbSessionService:
    return DbSessionService(engine=engine)


@pytest.fixture
def gateway(database_service: DbSessionService) -> StorageGateway:
    """Storage gateway over an initialized, empty in-memory database."""
    gateway = StorageGateway(database_service)
    gateway.initialize_schema()
    return gateway


@pytest.fixture
def file_gateway(tmp_path: Path) -> Generator[StorageGateway]:
    """Storage gateway over a file database with a real connection pool.

    Used where several threads need their own connections at the same time.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'books.db'}",
        connect_args={"check_same_thread": False, "timeout": 20},
    )
    gateway = StorageGateway(DbSessionService(engine=engine))
    gateway.initialize_schema()
    try:
        yield gateway
    finally:
        engine.dispose()


@pytest.fixture
def make_client():
    """Factory that starts the app (lifespan included) around a given gateway."""
    clients: list[TestClient] = []

    def _make(storage_gateway: StorageGateway) -> TestClient:
        test_client = TestClient(create_app(storage_gateway))
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(gateway: StorageGateway) -> Generator[TestClient]:
    with TestClient(create_app(gateway)) as test_client:
        yield test_client
