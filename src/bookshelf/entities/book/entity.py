"""Entity: Book."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookCreate(BaseModel):
    """Payload accepted when creating a book.

    Every field is optional and defaults to an empty string. Unknown keys,
    including a caller supplied ``id``, are ignored because the store assigns
    identifiers.
    """

    model_config = ConfigDict(extra="ignore")

    author: str = Field(default="", description="Book author")
    title: str = Field(default="", description="Book title")
    publisher: str = Field(default="", description="Book publisher")

    @field_validator("author", "title", "publisher", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Book(BookCreate):
    """Book entity representing a stored book."""

    id: int = Field(description="Store-assigned identifier")
