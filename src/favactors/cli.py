"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .appctx import AppContext
from .domain.models import ActorDescriptor, Person
from .errors import (
    CommitError,
    FavActorsError,
    PersonNotFoundError,
    RemoteServiceError,
    SettingsError,
)
from .settings.manager import SettingsManager
from .store.results_controller import ResultsController
from .utils.logging import configure_logging

app = typer.Typer(help="Keep a list of favorite actors from The Movie Database")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (PersonNotFoundError, RemoteServiceError, CommitError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except FavActorsError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _context(ctx: typer.Context) -> AppContext:
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Folder holding the database and image cache."),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings file to use."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    """Open the favorites store shared with the desktop app."""

    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    settings = SettingsManager(settings_path)
    try:
        settings.load()
    except SettingsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc
    context = AppContext(settings=settings, data_dir=data_dir)
    ctx.obj = context
    ctx.call_on_close(context.shutdown)


@app.command("list")
@_handle_errors
def list_(ctx: typer.Context) -> None:
    """List favorite actors sorted by name."""

    results = ResultsController(_context(ctx).record_context)
    results.perform_fetch()
    try:
        if results.count() == 0:
            print("[yellow]No favorite actors yet")
            return
        table = Table("ID", "Name", "Photo")
        for person in results.fetched_objects:
            table.add_row(str(person.id), person.name, person.image_path or "-")
        print(table)
    finally:
        results.close()


@app.command()
@_handle_errors
def add(
    ctx: typer.Context,
    person_id: int = typer.Argument(..., metavar="ID", help="TMDb person id."),
    name: str = typer.Argument(..., help="Display name."),
    profile_path: Optional[str] = typer.Option(None, "--profile-path", help="TMDb profile image path."),
) -> None:
    """Add (or rename) a favorite actor."""

    context = _context(ctx).record_context
    descriptor = ActorDescriptor(id=person_id, name=name, image_path=profile_path or None)

    def _write() -> Person:
        person = context.create(descriptor)
        context.commit()
        return person

    person = context.perform_and_wait(_write)
    print(f"[green]Added {person.name} ({person.id})")


@app.command()
@_handle_errors
def remove(
    ctx: typer.Context,
    person_id: int = typer.Argument(..., metavar="ID", help="TMDb person id."),
) -> None:
    """Remove a favorite actor."""

    context = _context(ctx).record_context
    person = context.get(person_id)
    if person is None:
        raise PersonNotFoundError(f"No favorite actor with id {person_id}")

    def _write() -> None:
        context.delete(person)
        context.commit()

    context.perform_and_wait(_write)
    print(f"[green]Removed {person.name} ({person.id})")


@app.command()
@_handle_errors
def search(ctx: typer.Context, query: str = typer.Argument(..., help="Actor name to look up.")) -> None:
    """Search TMDb for actors."""

    results = _context(ctx).tmdb.search_person(query)
    if not results:
        print(f"[yellow]No actors match {query!r}")
        return
    table = Table("ID", "Name", "Photo")
    for descriptor in results:
        table.add_row(str(descriptor.id), descriptor.name, descriptor.image_path or "-")
    print(table)


if __name__ == "__main__":  # pragma: no cover - manual launch
    app()
