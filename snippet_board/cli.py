"""Command-line interface for the Snippet Board service."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from typing_extensions import Annotated

from snippet_board.config.settings import get_settings
from snippet_board.core.store import JsonStore, StoreWriteError
from snippet_board.utils.logging_utils import setup_logging

app = typer.Typer(help="Snippet Board - share code snippets linked to Reddit comments")

logger = logging.getLogger(__name__)


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option(help="Bind address (defaults to API_HOST)")] = None,
    port: Annotated[Optional[int], typer.Option(help="Port (defaults to API_PORT)")] = None,
    reload: Annotated[bool, typer.Option(help="Reload on code changes")] = False,
) -> None:
    """Run the API server."""
    settings = get_settings()
    setup_logging()

    store = JsonStore(settings.STORE_PATH)
    if store.init():
        typer.echo(f"Created empty store at {store.path}")

    uvicorn.run(
        "snippet_board.api.main:app",
        host=host or settings.API_HOST,
        port=port or settings.API_PORT,
        reload=reload,
        log_config=None,
    )


@app.command("init-store")
def init_store(
    path: Annotated[Optional[Path], typer.Option(help="Store file (defaults to STORE_PATH)")] = None,
) -> None:
    """Create an empty store document if none exists."""
    store = JsonStore(path or get_settings().STORE_PATH)
    try:
        created = store.init()
    except StoreWriteError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)

    if created:
        typer.echo(f"Created empty store at {store.path}")
    else:
        typer.echo(f"Store already exists at {store.path}")


@app.command("show-config")
def show_config() -> None:
    """Print the effective settings as JSON."""
    typer.echo(json.dumps(get_settings().model_dump(), indent=2, default=str))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
