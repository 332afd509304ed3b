"""Core services exports."""

from .database.db_session import DbSessionService
from .storage_gateway import SEED_BOOKS, StorageGateway

__all__ = [
    "DbSessionService",
    "SEED_BOOKS",
    "StorageGateway",
]
