import logging
from typing import Annotated

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from typer import Argument, Exit, Option, Typer

from .chat import compose_reply
from .config import load_config
from .errors import ProviderError, VaultValidationError
from .server import VaultServices, result_payload, run_server
from .tags import suggest_tags

app = Typer(help="Store notes and vault items and search them semantically.")

DbPathOption = Annotated[
    str | None,
    Option("--db-path", help="DuckDB file to use instead of the default location."),
]


def _build_services(db_path: str | None) -> VaultServices:
    return VaultServices.build(load_config(db_path=db_path))


def _fail(console: Console, message: str) -> None:
    console.print(f"[bold red]{message}[/]")
    raise Exit(code=1)


@app.callback()
def configure(
    verbose: Annotated[
        bool, Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("add-note")
def add_note(
    title: Annotated[str, Option("--title", "-t", help="Note title.")],
    content: Annotated[str, Option("--content", "-c", help="Note body.")],
    db_path: DbPathOption = None,
) -> None:
    """Embed and store a note."""
    console = Console()
    services = _build_services(db_path)
    try:
        note = services.ingestor.add_note(title=title, content=content)
    except (VaultValidationError, ProviderError) as exc:
        _fail(console, str(exc))
    console.print(f"[bold green]Stored note #{note.id}[/] {note.title}")


@app.command("add-item")
def add_item(
    title: Annotated[str, Option("--title", "-t", help="Item title.")],
    content: Annotated[str, Option("--content", "-c", help="Item body.")] = "",
    tag: Annotated[
        list[str] | None, Option("--tag", help="Tag to attach; repeat for several.")
    ] = None,
    item_type: Annotated[str, Option("--type", help="Item type.")] = "document",
    category: Annotated[str, Option("--category", help="Item category.")] = "Recent files",
    db_path: DbPathOption = None,
) -> None:
    """Embed and store a vault item."""
    console = Console()
    services = _build_services(db_path)
    try:
        item = services.ingestor.add_vault_item(
            title=title,
            content=content,
            tags=tag or [],
            type=item_type,
            category=category,
        )
    except (VaultValidationError, ProviderError) as exc:
        _fail(console, str(exc))
    console.print(f"[bold green]Stored vault item #{item.id}[/] {item.title}")


@app.command()
def search(
    query: Annotated[str, Argument(help="Free-text search query.")],
    db_path: DbPathOption = None,
) -> None:
    """Rank stored notes and vault items against a query."""
    console = Console()
    services = _build_services(db_path)
    try:
        results = services.pipeline.search(query)
    except (VaultValidationError, ProviderError) as exc:
        _fail(console, str(exc))

    if not results:
        console.print("[yellow]No matching items.[/]")
        return

    table = Table(title=f"Results for {query!r}")
    table.add_column("Type")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Score", justify="right")
    for result in results:
        payload = result_payload(result)
        table.add_row(
            payload["type"],
            str(payload["id"]),
            payload["title"],
            f"{payload['score']:.3f}",
        )
    console.print(table)


@app.command()
def chat(
    message: Annotated[str, Argument(help="Question about your vault.")],
    db_path: DbPathOption = None,
) -> None:
    """Answer a question from the closest vault items."""
    console = Console()
    services = _build_services(db_path)
    try:
        reply = compose_reply(services.pipeline.retrieve_for_chat(message))
    except (VaultValidationError, ProviderError) as exc:
        _fail(console, str(exc))

    sources = "\n".join(
        f"- {source.title} ({source.similarity}%)" for source in reply.sources
    )
    body = f"{reply.response}\n\n{sources}" if sources else reply.response
    console.print(
        Panel(body, title="Vault", title_align="left", border_style="bold green")
    )


@app.command()
def tags(
    title: Annotated[str, Option("--title", "-t", help="Item title.")] = "",
    content: Annotated[str, Option("--content", "-c", help="Item body.")] = "",
) -> None:
    """Suggest tags for a title and body."""
    console = Console()
    if not title and not content:
        _fail(console, "Title or content required")
    console.print(", ".join(suggest_tags(title, content)))


@app.command()
def serve(
    host: Annotated[str, Option("--host", help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, Option("--port", help="Bind port.")] = 8000,
    db_path: DbPathOption = None,
) -> None:
    """Run the HTTP API."""
    run_server(host=host, port=port, db_path=db_path)
