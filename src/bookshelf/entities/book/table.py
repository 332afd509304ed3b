"""Book database table model."""

from sqlmodel import Field, SQLModel


class BookTable(SQLModel, table=True):
    """Database persistence model for books.

    This represents how the Book entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "books"

    # Assigned by the store on insert
    id: int | None = Field(default=None, primary_key=True)
    author: str = Field(default="")
    title: str = Field(default="")
    publisher: str = Field(default="")
