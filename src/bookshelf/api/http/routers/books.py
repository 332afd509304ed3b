"""Book API router with create, read and delete operations.

Every response uses the ``Envelope`` shape. Store failures are logged here and
answered with a fixed message; the underlying error never reaches the caller.
"""

import re

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from pydantic import ValidationError
from starlette.responses import JSONResponse

from src.bookshelf.api.http.deps import get_storage_gateway
from src.bookshelf.core.exceptions import BookNotFoundError, StorageError
from src.bookshelf.core.models import Envelope
from src.bookshelf.core.services import StorageGateway
from src.bookshelf.entities.book import BookCreate

router = APIRouter(prefix="/api", tags=["books"])

MSG_CREATED = "book has been added"
MSG_DELETED = "book deleted successfully"
MSG_FETCHED_ONE = "book fetched successfully"
MSG_FETCHED_ALL = "books fetched successfully"

ERR_CREATE = "could not create book"
ERR_DELETE = "could not delete book"
ERR_GET_ONE = "could not get the book"
ERR_GET_ALL = "could not get books"

_BOOK_ID_PATTERN = re.compile(r"-?[0-9]+")
# Book ids are stored as signed 64-bit integers
_BOOK_ID_MIN = -(2**63)
_BOOK_ID_MAX = 2**63 - 1


def _respond(status_code: int, **fields) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=Envelope(**fields).to_content())


def _parse_book_id(raw: str) -> int | None:
    """Return the id as an int, or None when it is not a decimal 64-bit integer."""
    if not _BOOK_ID_PATTERN.fullmatch(raw):
        return None
    book_id = int(raw)
    if not _BOOK_ID_MIN <= book_id <= _BOOK_ID_MAX:
        return None
    return book_id


async def read_book_payload(request: Request) -> BookCreate:
    """Decode the request body as a book, whatever its Content-Type header says."""
    try:
        return BookCreate.model_validate_json(await request.body())
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


@router.post(
    "/create_books",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": BookCreate.model_json_schema()}
            },
        }
    },
)
def create_book(
    book: BookCreate = Depends(read_book_payload),
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> JSONResponse:
    """Create a new book."""
    try:
        gateway.create_book(book)
    except StorageError:
        logger.exception("Failed to create book")
        return _respond(400, error=ERR_CREATE)
    return _respond(200, message=MSG_CREATED)


@router.delete("/delete_book/{book_id}")
def delete_book(
    book_id: str,
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> JSONResponse:
    """Delete a book. Deleting an id that does not exist still succeeds."""
    parsed_id = _parse_book_id(book_id)
    if parsed_id is None:
        logger.warning("Rejected delete for invalid book id {!r}", book_id)
        return _respond(400, error=ERR_DELETE)

    try:
        deleted = gateway.delete_book(parsed_id)
    except StorageError:
        logger.exception("Failed to delete book {}", parsed_id)
        return _respond(400, error=ERR_DELETE)

    if not deleted:
        logger.info("Delete for book {} matched no rows", parsed_id)
    return _respond(200, message=MSG_DELETED)


@router.get("/get_books/{book_id}")
def get_book(
    book_id: str,
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> JSONResponse:
    """Get a book by ID.

    Not-found and store failures share the 400 response; only the logs tell
    them apart.
    """
    parsed_id = _parse_book_id(book_id)
    if parsed_id is None:
        logger.warning("Rejected lookup for invalid book id {!r}", book_id)
        return _respond(400, error=ERR_GET_ONE)

    try:
        book = gateway.get_book(parsed_id)
    except BookNotFoundError:
        logger.warning("Book {} not found", parsed_id)
        return _respond(400, error=ERR_GET_ONE)
    except StorageError:
        logger.exception("Failed to get book {}", parsed_id)
        return _respond(400, error=ERR_GET_ONE)
    return _respond(200, message=MSG_FETCHED_ONE, data=book)


@router.get("/books")
def list_books(
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> JSONResponse:
    """List all books."""
    try:
        books = gateway.list_books()
    except StorageError:
        logger.exception("Failed to list books")
        return _respond(400, error=ERR_GET_ALL)
    return _respond(200, message=MSG_FETCHED_ALL, data=books)
