"""
Notes CLI.

Command-line access to the shared note store. The acting identity is
taken from --user (or NOTES_USER); authenticating it is the caller's job.

Usage:
    python cli.py --user alice add --title "Plan" --category work
    python cli.py --user alice edit NOTE_ID --title "Plan v2"
    python cli.py list --category work
    python cli.py history NOTE_ID
    python cli.py revert NOTE_ID 1
    python cli.py --user alice delete NOTE_ID
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.table import Table

from modules.notes.core.exceptions import ApplicationError
from modules.notes.core.logging import get_logger, setup_logging
from modules.notes.schemas.note import Category
from modules.notes.services.note import NoteService
from modules.notes.store.sql import SqlDocumentStore

logger = get_logger(__name__)

T = TypeVar("T")

CATEGORY_CHOICE = click.Choice([c.value for c in Category])


def _run(ctx: click.Context, operation: Callable[[NoteService], Awaitable[T]]) -> T:
    """Open the store, run ``operation`` against a started service, close everything."""
    database: str | None = ctx.obj["database"]

    async def runner() -> T:
        store = SqlDocumentStore(database) if database else SqlDocumentStore.from_config()
        try:
            await store.create_schema()
            service = NoteService.from_config(store)
            await service.start()
            try:
                return await operation(service)
            finally:
                await service.stop()
        finally:
            await store.close()

    try:
        return asyncio.run(runner())
    except ApplicationError as e:
        logger.debug("Command failed", extra={"code": e.code, "error": e.message})
        click.echo(click.style(f"Error [{e.code}]: {e.message}", fg="red"), err=True)
        ctx.exit(1)


def _require_user(ctx: click.Context) -> str:
    user = ctx.obj["user"]
    if not user:
        raise click.UsageError("--user (or NOTES_USER) is required for this command.")
    return user


def _notes_table(title: str, rows: list[dict[str, Any]], columns: list[str]) -> Table:
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(str(row[column]) for column in columns))
    return table


@click.group()
@click.option("--user", "-u", envvar="NOTES_USER", default=None, help="Acting identity.")
@click.option("--database", envvar="NOTES_DATABASE_URL", default=None, help="SQLAlchemy URL; defaults to database.yaml.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.pass_context
def cli(ctx: click.Context, user: str | None, database: str | None, verbose: bool, debug: bool) -> None:
    """Shared notes with per-note history."""
    if debug:
        setup_logging(level="DEBUG")
    elif verbose:
        setup_logging(level="INFO")
    else:
        setup_logging(level="WARNING")

    ctx.ensure_object(dict)
    ctx.obj["user"] = user
    ctx.obj["database"] = database


@cli.command()
@click.option("--title", "-t", required=True, help="Note title.")
@click.option("--content", "-c", default="", help="Note content.")
@click.option("--category", "-k", type=CATEGORY_CHOICE, required=True, help="Note category.")
@click.pass_context
def add(ctx: click.Context, title: str, content: str, category: str) -> None:
    """Create a note."""
    user = _require_user(ctx)
    fields = {"title": title, "content": content, "category": category}
    note = _run(ctx, lambda service: service.create_note(fields, owner_id=user))
    click.echo(f"Created note {note.id}")


@cli.command()
@click.argument("note_id")
@click.option("--title", "-t", default=None, help="New title.")
@click.option("--content", "-c", default=None, help="New content.")
@click.option("--category", "-k", type=CATEGORY_CHOICE, default=None, help="New category.")
@click.pass_context
def edit(ctx: click.Context, note_id: str, title: str | None, content: str | None, category: str | None) -> None:
    """Update a note. The previous version is kept in its history."""
    user = _require_user(ctx)

    async def operation(service: NoteService):
        current = await service.get_note(note_id)
        fields = {
            "title": title if title is not None else current.title,
            "content": content if content is not None else current.content,
            "category": category if category is not None else current.category.value,
        }
        return await service.update_note(
            note_id, fields, owner_id=user, expected_updated_at=current.updated_at,
        )

    note = _run(ctx, operation)
    click.echo(f"Updated note {note.id}")


@cli.command()
@click.argument("note_id")
@click.pass_context
def delete(ctx: click.Context, note_id: str) -> None:
    """Delete a note you own. Its history is kept."""
    user = _require_user(ctx)
    _run(ctx, lambda service: service.delete_note(note_id, acting_identity=user))
    click.echo(f"Deleted note {note_id}")


@cli.command(name="list")
@click.option("--category", "-k", type=CATEGORY_CHOICE, default=None, help="Only show this category.")
@click.pass_context
def list_notes(ctx: click.Context, category: str | None) -> None:
    """List notes."""
    user = ctx.obj["user"]

    async def operation(service: NoteService):
        await service.wait_for_sync()
        service.set_category_filter(category)
        return service.current_filtered_notes()

    notes = _run(ctx, operation)
    rows = [
        {
            "ID": note.id,
            "Title": note.title,
            "Category": note.category.value,
            "Owner": note.owner_id or "-",
            "Updated": note.updated_at.isoformat(timespec="seconds"),
            "Mine": "yes" if user and note.owner_id == user else "",
        }
        for note in notes
    ]
    Console().print(
        _notes_table("Notes", rows, ["ID", "Title", "Category", "Owner", "Updated", "Mine"])
    )


@cli.command()
@click.argument("note_id")
@click.pass_context
def history(ctx: click.Context, note_id: str) -> None:
    """Show a note's previous versions, oldest first."""
    entries = _run(ctx, lambda service: service.view_history(note_id))
    rows = [
        {
            "#": index,
            "Saved": entry.saved_at.isoformat(timespec="seconds"),
            "Title": entry.title,
            "Content": entry.content,
            "Category": entry.category.value,
        }
        for index, entry in enumerate(entries, start=1)
    ]
    Console().print(
        _notes_table(f"History of {note_id}", rows, ["#", "Saved", "Title", "Content", "Category"])
    )


@cli.command()
@click.argument("note_id")
@click.argument("index", type=click.IntRange(min=1))
@click.pass_context
def revert(ctx: click.Context, note_id: str, index: int) -> None:
    """Revert a note to version INDEX of its history (as numbered by `history`)."""

    async def operation(service: NoteService):
        entries = await service.view_history(note_id)
        if index > len(entries):
            raise click.BadParameter(
                f"Note has {len(entries)} history entries", param_hint="INDEX",
            )
        return await service.revert_note(note_id, entries[index - 1])

    note = _run(ctx, operation)
    click.echo(f"Reverted note {note.id} to version {index}: {note.title}")
