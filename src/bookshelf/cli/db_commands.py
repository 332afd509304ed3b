"""Database maintenance CLI commands."""

import typer
from rich.table import Table

from src.bookshelf.core.exceptions import StorageError

from .utils import build_gateway, console, fail

db_app = typer.Typer(help="🗄️  Database commands")


@db_app.command("init")
def init_db() -> None:
    """Create the books table if it does not exist."""
    gateway = build_gateway()
    try:
        gateway.initialize_schema()
    except StorageError as exc:
        raise fail(f"Could not initialize the schema: {exc.__cause__ or exc}") from exc
    finally:
        gateway.close()
    console.print("[green]✅ Schema is up to date[/green]")


@db_app.command("seed")
def seed() -> None:
    """Insert the example books, only when the table is empty."""
    gateway = build_gateway()
    try:
        gateway.initialize_schema()
        inserted = gateway.seed()
    except StorageError as exc:
        raise fail(f"Could not seed the database: {exc.__cause__ or exc}") from exc
    finally:
        gateway.close()

    if inserted:
        console.print(f"[green]✅ Inserted {inserted} example books[/green]")
    else:
        console.print("[yellow]Books table is not empty; nothing inserted[/yellow]")


@db_app.command("list")
def list_books() -> None:
    """Print every stored book."""
    gateway = build_gateway()
    try:
        books = gateway.list_books()
    except StorageError as exc:
        raise fail(f"Could not list books: {exc.__cause__ or exc}") from exc
    finally:
        gateway.close()

    table = Table(title=f"Books ({len(books)})")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Publisher")
    for book in books:
        table.add_row(str(book.id), book.title, book.author, book.publisher)
    console.print(table)
