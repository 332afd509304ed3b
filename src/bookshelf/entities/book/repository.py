"""Book repository."""

from sqlalchemy import func
from sqlmodel import Session, select

from .entity import Book, BookCreate
from .table import BookTable


class BookRepository:
    """Data-access layer for books.

    The repository never commits; the owning session scope decides.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, book: BookCreate) -> Book:
        row = BookTable(author=book.author, title=book.title, publisher=book.publisher)
        self._session.add(row)
        # Flush so the store assigns the id before we return
        self._session.flush()
        self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def create_many(self, books: list[BookCreate]) -> int:
        rows = [
            BookTable(author=b.author, title=b.title, publisher=b.publisher)
            for b in books
        ]
        self._session.add_all(rows)
        self._session.flush()
        return len(rows)

    def get(self, book_id: int) -> Book | None:
        row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def list_all(self) -> list[Book]:
        rows = self._session.exec(select(BookTable)).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def delete(self, book_id: int) -> int:
        """Delete the row with ``book_id`` and return the affected-row count."""
        row = self._session.get(BookTable, book_id)
        if row is None:
            return 0
        self._session.delete(row)
        self._session.flush()
        return 1

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(BookTable)).one()
