"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Request

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.core.services import DbSessionService, StorageGateway


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the dependencies published on the application state at startup."""
    return request.app.state.app_dependencies


def get_storage_gateway(request: Request) -> StorageGateway:
    """Get the shared storage gateway instance."""
    return get_app_dependencies(request).storage_gateway


def get_database_service(request: Request) -> DbSessionService:
    """Get the database session service instance."""
    return get_app_dependencies(request).database_service
