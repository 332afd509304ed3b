"""Tests for the storage gateway."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from src.bookshelf.core.exceptions import BookNotFoundError, StorageError
from src.bookshelf.core.services import SEED_BOOKS, DbSessionService, StorageGateway
from src.bookshelf.entities.book import Book, BookCreate


class TestSchema:
    def test_initialize_schema_is_idempotent(self, gateway: StorageGateway):
        gateway.create_book(BookCreate(title="kept"))

        gateway.initialize_schema()
        gateway.initialize_schema()

        assert [b.title for b in gateway.list_books()] == ["kept"]

    def test_operations_fail_without_schema(self, engine):
        gateway = StorageGateway(DbSessionService(engine=engine))

        with pytest.raises(StorageError) as exc_info:
            gateway.create_book(BookCreate(title="nowhere"))

        assert exc_info.value.operation == "create_book"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_initialize_schema_wraps_driver_errors(self, gateway, monkeypatch):
        from src.bookshelf.core.services import storage_gateway as module

        def boom(*args, **kwargs):
            raise OperationalError("CREATE TABLE", {}, Exception("unreachable"))

        monkeypatch.setattr(module.SQLModel.metadata, "create_all", boom)

        with pytest.raises(StorageError) as exc_info:
            gateway.initialize_schema()
        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)


class TestCreateAndRead:
    def test_create_then_get_roundtrip(self, gateway: StorageGateway):
        created = gateway.create_book(BookCreate(author="A", title="T", publisher="P"))

        fetched = gateway.get_book(created.id)

        assert created.id > 0
        assert fetched == Book(id=created.id, author="A", title="T", publisher="P")

    def test_duplicate_creates_produce_distinct_rows(self, gateway: StorageGateway):
        payload = BookCreate(author="A", title="Same", publisher="P")

        first = gateway.create_book(payload)
        second = gateway.create_book(payload)

        assert first.id != second.id
        assert gateway.count_books() == 2

    def test_get_missing_raises_not_found(self, gateway: StorageGateway):
        with pytest.raises(BookNotFoundError) as exc_info:
            gateway.get_book(12345)

        assert exc_info.value.book_id == 12345
        # Not-found is a storage error for callers that do not care about the difference
        assert isinstance(exc_info.value, StorageError)

    def test_list_returns_every_row_in_insertion_order(self, gateway: StorageGateway):
        titles = [f"Book {i}" for i in range(5)]
        for title in titles:
            gateway.create_book(BookCreate(title=title))

        assert [b.title for b in gateway.list_books()] == titles

    def test_list_empty_store(self, gateway: StorageGateway):
        assert gateway.list_books() == []


class TestDelete:
    def test_delete_existing_returns_one(self, gateway: StorageGateway):
        created = gateway.create_book(BookCreate(title="bye"))

        assert gateway.delete_book(created.id) == 1
        with pytest.raises(BookNotFoundError):
            gateway.get_book(created.id)

    def test_delete_missing_is_not_an_error(self, gateway: StorageGateway):
        assert gateway.delete_book(999) == 0

    def test_delete_only_removes_matching_row(self, gateway: StorageGateway):
        keep = gateway.create_book(BookCreate(title="keep"))
        drop = gateway.create_book(BookCreate(title="drop"))

        gateway.delete_book(drop.id)

        assert [b.id for b in gateway.list_books()] == [keep.id]


class TestSeed:
    def test_seed_inserts_example_books_into_empty_table(self, gateway: StorageGateway):
        inserted = gateway.seed()

        assert inserted == len(SEED_BOOKS) == 5
        books = gateway.list_books()
        assert [b.title for b in books] == [f"Dummy Book {i}" for i in range(1, 6)]
        assert books[0].author == "John Doe"
        assert books[-1].publisher == "Publisher E"

    def test_seed_is_idempotent(self, gateway: StorageGateway):
        gateway.seed()

        assert gateway.seed() == 0
        assert gateway.count_books() == 5

    def test_seed_skips_when_user_data_exists(self, gateway: StorageGateway):
        gateway.create_book(BookCreate(title="mine"))

        assert gateway.seed() == 0
        assert [b.title for b in gateway.list_books()] == ["mine"]

    def test_seed_accepts_custom_batch(self, gateway: StorageGateway):
        assert gateway.seed([BookCreate(title="custom")]) == 1


class TestConcurrency:
    def test_concurrent_creates_get_distinct_ids(self, file_gateway: StorageGateway):
        payloads = [BookCreate(title=f"Concurrent {i}") for i in range(20)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            created = list(pool.map(file_gateway.create_book, payloads))

        ids = [b.id for b in created]
        assert len(set(ids)) == len(payloads)
        assert file_gateway.count_books() == len(payloads)


def test_health_check(gateway: StorageGateway):
    assert gateway.health_check() is True


class TestOutOfRangeIds:
    """SQLite integers are 64-bit; larger ids fail inside the driver."""

    def test_get_wraps_driver_overflow(self, gateway: StorageGateway):
        with pytest.raises(StorageError) as exc_info:
            gateway.get_book(2**70)

        assert exc_info.value.operation == "get_book"
        assert not isinstance(exc_info.value, BookNotFoundError)

    def test_delete_wraps_driver_overflow(self, gateway: StorageGateway):
        with pytest.raises(StorageError) as exc_info:
            gateway.delete_book(2**70)

        assert exc_info.value.operation == "delete_book"
