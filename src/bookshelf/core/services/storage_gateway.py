"""Storage gateway: the only component that talks to the relational store."""

from collections.abc import Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from src.bookshelf.core.exceptions import BookNotFoundError, StorageError
from src.bookshelf.core.services.database.db_session import DbSessionService
from src.bookshelf.entities.book import Book, BookCreate, BookRepository, BookTable

SEED_BOOKS: tuple[BookCreate, ...] = (
    BookCreate(author="John Doe", title="Dummy Book 1", publisher="Publisher A"),
    BookCreate(author="Jane Smith", title="Dummy Book 2", publisher="Publisher B"),
    BookCreate(author="Alice Johnson", title="Dummy Book 3", publisher="Publisher C"),
    BookCreate(author="Bob Brown", title="Dummy Book 4", publisher="Publisher D"),
    BookCreate(author="Emma White", title="Dummy Book 5", publisher="Publisher E"),
)


class StorageGateway:
    """Typed create/read/delete operations on books.

    Each public method is one store round trip in its own transaction.
    SQLAlchemy errors, and driver overflow on out-of-range ids, are wrapped in
    ``StorageError`` with the original chained.
    """

    def __init__(self, database_service: DbSessionService) -> None:
        self._db = database_service

    @property
    def database_service(self) -> DbSessionService:
        return self._db

    def initialize_schema(self) -> None:
        """Create the books table if it does not exist. Safe to call repeatedly."""
        try:
            SQLModel.metadata.create_all(self._db.engine, tables=[BookTable.__table__])
        except SQLAlchemyError as exc:
            raise StorageError("initialize_schema") from exc
        logger.info("Database schema initialized")

    def seed(self, books: Sequence[BookCreate] = SEED_BOOKS) -> int:
        """Insert ``books`` if the table is empty; return how many rows were added."""
        try:
            with self._db.session_scope() as session:
                repository = BookRepository(session)
                existing = repository.count()
                if existing:
                    logger.info("Skipping seed data, {} books already stored", existing)
                    return 0
                inserted = repository.create_many(list(books))
        except SQLAlchemyError as exc:
            raise StorageError("seed") from exc
        logger.info("Seeded {} books", inserted)
        return inserted

    def create_book(self, book: BookCreate) -> Book:
        try:
            with self._db.session_scope() as session:
                created = BookRepository(session).create(book)
        except SQLAlchemyError as exc:
            raise StorageError("create_book") from exc
        logger.debug("Created book {}", created.id)
        return created

    def delete_book(self, book_id: int) -> int:
        """Delete a book by id and return the number of rows removed (0 or 1)."""
        try:
            with self._db.session_scope() as session:
                deleted = BookRepository(session).delete(book_id)
        except (SQLAlchemyError, OverflowError) as exc:
            raise StorageError("delete_book") from exc
        logger.debug("Deleted {} row(s) for book {}", deleted, book_id)
        return deleted

    def list_books(self) -> list[Book]:
        try:
            with self._db.session_scope() as session:
                return BookRepository(session).list_all()
        except SQLAlchemyError as exc:
            raise StorageError("list_books") from exc

    def get_book(self, book_id: int) -> Book:
        try:
            with self._db.session_scope() as session:
                book = BookRepository(session).get(book_id)
        except (SQLAlchemyError, OverflowError) as exc:
            raise StorageError("get_book") from exc
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def count_books(self) -> int:
        try:
            with self._db.session_scope() as session:
                return BookRepository(session).count()
        except SQLAlchemyError as exc:
            raise StorageError("count_books") from exc

    def health_check(self) -> bool:
        return self._db.health_check()

    def close(self) -> None:
        self._db.dispose()
