"""Shared plumbing for CLI commands: configuration, logging and sessions."""

import logging
from typing import Any, Optional

import typer

from docdash import DocdashError, Session, create_session, load_config
from docdash.session import contextual_docsets

from .console import print_error
from .preferences import get_contextual_docsets, load_preferences

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: dict[str, Any], verbose: bool = False) -> None:
    """Configure root logging from the ``logging`` config section."""
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_config(ctx: typer.Context) -> dict[str, Any]:
    """Configuration loaded by the app callback (loaded here if missing)."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        try:
            obj["config"] = load_config(obj.get("config_path"))
        except DocdashError as e:
            print_error(str(e))
            raise typer.Exit(1)
    return obj["config"]


def common_docsets(config: dict[str, Any], preferences: dict[str, Any]) -> list[str]:
    """Configured common docsets followed by activated ones, each once."""
    names = list(config.get("docsets", {}).get("common") or [])
    names += [name for name in preferences.get("common", []) if name not in names]
    return names


def open_session(
    ctx: typer.Context,
    extension: Optional[str] = None,
    docsets: Optional[list[str]] = None,
) -> Session:
    """Build a session with both active sets registered.

    Args:
        ctx: Typer context
        extension: File extension selecting the contextual set
        docsets: Explicit contextual docsets (added before the extension's)

    Exits with status 1 when an active docset cannot be resolved.
    """
    config = get_config(ctx)
    preferences = load_preferences()

    contextual = list(docsets or [])
    contextual += contextual_docsets(config, extension)
    contextual += get_contextual_docsets(preferences, extension)

    session = create_session(config)
    try:
        session.activate(
            common=common_docsets(config, preferences),
            contextual=contextual,
        )
    except DocdashError as e:
        print_error(str(e))
        print_error(
            "Install it with 'docdash docsets install' "
            "or remove it with 'docdash docsets deactivate'."
        )
        raise typer.Exit(1)
    return session
