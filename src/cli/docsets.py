"""Docset CLI commands for installing and activating docsets."""

from pathlib import Path
from typing import Optional

import typer

from docdash import DocdashError, create_session
from docdash.install import InstallationPipeline
from docdash.paths import resolve_docset_path

from .console import (
    console,
    create_table,
    print_error,
    print_panel,
    print_success,
    print_table,
    print_warning,
)
from .context import common_docsets, get_config, open_session
from .preferences import (
    activate_docset,
    deactivate_docset,
    load_preferences,
    set_contextual_docsets,
)

app = typer.Typer(
    name="docsets",
    help="Install, activate and list docsets",
    no_args_is_help=True,
)


def _pipeline(ctx: typer.Context) -> InstallationPipeline:
    """Installation pipeline over an unpopulated registry."""
    return create_session(get_config(ctx)).pipeline


@app.command(name="installed")
def list_installed(ctx: typer.Context) -> None:
    """List docsets installed in the docsets root."""
    config = get_config(ctx)
    pipeline = _pipeline(ctx)
    names = pipeline.installed()

    if not names:
        console.print(f"[dim]No docsets installed in {pipeline.docsets_path}.[/dim]")
        console.print("[dim]Install one with 'docdash docsets install <name>'.[/dim]")
        return

    active = set(common_docsets(config, load_preferences()))
    table = create_table(f"Installed docsets ({pipeline.docsets_path})")
    table.add_column("Docset", style="green")
    table.add_column("Active", style="cyan")
    for name in names:
        table.add_row(name, "yes" if name in active else "")
    print_table(table)


@app.command(name="active")
def list_active(
    ctx: typer.Context,
    context: Optional[str] = typer.Option(
        None,
        "--context",
        "-c",
        help="Include the contextual docsets for this file extension",
    ),
) -> None:
    """List the docsets a search would query, in search order."""
    session = open_session(ctx, extension=context)
    connections = session.registry.available()

    if not connections:
        console.print("[dim]No active docsets.[/dim]")
        return

    contextual = set(session.registry.contextual)
    table = create_table("Active docsets")
    table.add_column("Docset", style="green")
    table.add_column("Set", style="magenta")
    table.add_column("Schema", style="blue", no_wrap=True)
    table.add_column("Database", style="dim")
    for connection in connections:
        table.add_row(
            connection.name,
            "contextual" if connection.name in contextual else "common",
            connection.dialect.name,
            str(connection.db_path),
        )
    print_table(table)


@app.command(name="activate")
def activate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Installed docset name"),
) -> None:
    """Activate an installed docset for every search."""
    pipeline = _pipeline(ctx)
    try:
        resolve_docset_path(pipeline.docsets_path, name)
    except DocdashError as e:
        print_error(str(e))
        raise typer.Exit(1)

    activate_docset(name)
    print_success(f"Activated {name}")


@app.command(name="deactivate")
def deactivate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Docset name"),
) -> None:
    """Stop searching a docset by default."""
    config = get_config(ctx)
    before = load_preferences()
    deactivate_docset(name)

    if name in (config.get("docsets", {}).get("common") or []):
        print_warning(
            f"{name} is listed under docsets.common in config.yaml; remove it there too."
        )
    elif name not in before["common"] and not any(
        name in names for names in before["contextual"].values()
    ):
        print_warning(f"{name} was not active.")
        return
    print_success(f"Deactivated {name}")


@app.command(name="context")
def set_context(
    extension: str = typer.Argument(..., help="File extension, e.g. py"),
    names: Optional[list[str]] = typer.Argument(
        None, help="Docsets for this extension (omit to clear)"
    ),
) -> None:
    """Set the docsets searched first for a file extension."""
    set_contextual_docsets(extension, names or [])
    if names:
        print_success(f"Docsets for .{extension.lstrip('.')}: {', '.join(names)}")
    else:
        print_success(f"Cleared docsets for .{extension.lstrip('.')}")


@app.command(name="official")
def list_official(ctx: typer.Context) -> None:
    """List official docsets available for installation."""
    try:
        names = _pipeline(ctx).official()
    except DocdashError as e:
        print_error(str(e))
        raise typer.Exit(1)

    for name in names:
        console.print(name, markup=False, highlight=False)
    console.print(f"\n[dim]{len(names)} official docsets.[/dim]")


@app.command(name="unofficial")
def list_unofficial(ctx: typer.Context) -> None:
    """List contributed docsets available for installation."""
    try:
        docsets = _pipeline(ctx).unofficial()
    except DocdashError as e:
        print_error(str(e))
        raise typer.Exit(1)

    table = create_table("Contributed docsets")
    table.add_column("Docset", style="green")
    table.add_column("Archive", style="dim")
    for name, url in docsets:
        table.add_row(name, url)
    print_table(table)


@app.command(name="install")
def install(
    ctx: typer.Context,
    source: str = typer.Argument(
        ..., help="Official docset name, archive URL, or downloaded archive path"
    ),
    unofficial: bool = typer.Option(
        False,
        "--unofficial",
        "-u",
        help="Install a contributed docset by name",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        help="Expected docset name when installing from a URL or file",
    ),
) -> None:
    """Install a docset and activate it."""
    pipeline = _pipeline(ctx)
    is_url = source.startswith(("http://", "https://"))
    is_file = Path(source).expanduser().is_file()

    console.print(f"[bold]Installing {source}...[/bold]")
    try:
        if is_url or is_file:
            installed = pipeline.install(source, name)
        elif unofficial:
            installed = pipeline.install_unofficial(source)
        else:
            installed = pipeline.install_official(source)
    except DocdashError as e:
        print_error(str(e))
        raise typer.Exit(1)

    activate_docset(installed)
    print_panel(
        f"Installed {installed}",
        f"Location: {pipeline.docsets_path}\nActivated for every search.",
        style="green",
    )
