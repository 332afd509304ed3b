"""Errors raised by the storage layer."""


class StorageError(Exception):
    """A store operation failed (connection loss, constraint violation, bad query)."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"Storage operation '{operation}' failed")


class BookNotFoundError(StorageError):
    """No book row matches the requested id."""

    def __init__(self, book_id: int) -> None:
        self.book_id = book_id
        super().__init__("get_book", f"Book {book_id} not found")
