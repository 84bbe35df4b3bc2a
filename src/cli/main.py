"""docdash CLI entry point."""

from typing import Optional

import typer
from rich.markup import escape

from docdash import DocdashError, load_config

from . import __version__
from .console import console, create_table, print_error, print_info, print_table
from .context import configure_logging, open_session
from .docsets import app as docsets_app

app = typer.Typer(
    name="docdash",
    help="docdash - search offline documentation docsets",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"docdash version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to config.yaml (default: ~/.docdash/config.yaml)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """docdash - search offline documentation docsets."""
    try:
        config = load_config(config_path)
    except DocdashError as e:
        print_error(str(e))
        raise typer.Exit(1)

    configure_logging(config, verbose)
    ctx.obj = {"config_path": config_path, "config": config}


@app.command(name="search")
def search(
    ctx: typer.Context,
    pattern: list[str] = typer.Argument(
        ..., help="Search terms, optionally prefixed by a docset name"
    ),
    context: Optional[str] = typer.Option(
        None,
        "--context",
        "-c",
        help="File extension whose contextual docsets to search first (e.g. py)",
    ),
    docset: Optional[list[str]] = typer.Option(
        None,
        "--docset",
        "-d",
        help="Also search this docset first (repeatable)",
    ),
    limit: int = typer.Option(
        50,
        "--limit",
        "-n",
        help="Maximum number of results to show",
    ),
    show_urls: bool = typer.Option(
        False,
        "--urls",
        "-u",
        help="Show the URL of each result",
    ),
) -> None:
    """Search the active docsets.

    Start the pattern with a docset name to search that docset only,
    e.g. 'docdash search redis blpop'.
    """
    session = open_session(ctx, extension=context, docsets=docset)
    query = " ".join(pattern)

    try:
        candidates = session.engine.search(query)
    except DocdashError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not candidates:
        if len(query) < session.engine.min_length:
            print_info(
                f"Search terms must be at least {session.engine.min_length} characters."
            )
        elif not session.engine.docset_names():
            print_info("No active docsets. Activate one with 'docdash docsets activate'.")
        else:
            console.print("[dim]No results.[/dim]")
        return

    table = create_table()
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Result", style="green")
    table.add_column("Docset", style="magenta")
    if show_urls:
        table.add_column("URL", style="dim")

    for index, candidate in enumerate(candidates[:limit], start=1):
        cells = [str(index), escape(candidate.display), candidate.docset_name]
        if show_urls:
            cells.append(session.engine.result_url(candidate))
        table.add_row(*cells)

    print_table(table)
    if len(candidates) > limit:
        console.print(f"\n[dim]Showing {limit} of {len(candidates)} results.[/dim]")


@app.command(name="open")
def open_result(
    ctx: typer.Context,
    pattern: list[str] = typer.Argument(..., help="Search terms"),
    index: int = typer.Option(
        1,
        "--index",
        "-i",
        help="Which result to open (1 = first)",
    ),
    context: Optional[str] = typer.Option(
        None,
        "--context",
        "-c",
        help="File extension whose contextual docsets to search first",
    ),
    print_only: bool = typer.Option(
        False,
        "--print",
        "-p",
        help="Print the URL instead of opening it",
    ),
) -> None:
    """Open a search result in the browser."""
    session = open_session(ctx, extension=context)

    try:
        candidates = session.engine.search(" ".join(pattern))
    except DocdashError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not 1 <= index <= len(candidates):
        print_error(f"No result #{index} ({len(candidates)} results).")
        raise typer.Exit(1)

    candidate = candidates[index - 1]
    url = session.engine.result_url(candidate)
    if print_only:
        console.print(url, markup=False, highlight=False, soft_wrap=True)
        return

    console.print(f"Opening [green]{escape(candidate.display)}[/green]")
    typer.launch(url)


# Register the docsets subcommand group
app.add_typer(docsets_app, name="docsets")


if __name__ == "__main__":
    app()
