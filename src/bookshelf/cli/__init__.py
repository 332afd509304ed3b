"""Main CLI application module."""

import typer

from src.bookshelf.runtime.context import get_config

from .db_commands import db_app

# Create the main CLI application
app = typer.Typer(
    help="📚 Bookshelf CLI - run the API and manage its database",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(db_app, name="db")


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind address (defaults to config)"),
    port: int | None = typer.Option(None, help="Port (defaults to config)"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "src.bookshelf.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        access_log=False,  # Access logging happens in the middleware
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
