"""Shared utilities for CLI commands."""

import typer
from rich.console import Console

from src.bookshelf.core.services import DbSessionService, StorageGateway
from src.bookshelf.runtime.context import get_config

# Initialize Rich console for colored output
console = Console()


def build_gateway() -> StorageGateway:
    """Build a storage gateway from the active configuration."""
    return StorageGateway(DbSessionService(get_config()))


def fail(message: str) -> typer.Exit:
    console.print(f"[red]{message}[/red]")
    return typer.Exit(1)
