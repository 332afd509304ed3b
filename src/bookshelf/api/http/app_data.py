from dataclasses import dataclass

from src.bookshelf.core.services import DbSessionService, StorageGateway


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    storage_gateway: StorageGateway
