"""
blobfs CLI Tool

Command-line interface for browsing and editing a local blob location.

Usage:
    blobfs containers            - List one page of containers
    blobfs ls CONTAINER          - List one page of items
    blobfs cat CONTAINER ITEM    - Print an item's content
    blobfs put CONTAINER NAME F  - Upload a file (or - for stdin)
    blobfs rm CONTAINER ITEM     - Remove an item
"""
import os
import sys
from contextlib import contextmanager

import click
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from blobfs import __version__
from blobfs.config import configure_logging, get_settings
from blobfs.storage import (
    CURSOR_END,
    CURSOR_START,
    ErrorKind,
    Location,
    dial,
    error_kind,
    is_cursor_end,
    walk_containers,
    walk_items,
)

# Load environment variables
load_dotenv()

console = Console()

EXIT_CODES = {
    ErrorKind.NOT_FOUND: 2,
    ErrorKind.BAD_CURSOR: 3,
    ErrorKind.UNEXPECTED_DIRECTORY: 4,
    ErrorKind.SIZE_MISMATCH: 5,
    ErrorKind.IO_FAILURE: 6,
}


@contextmanager
def storage_errors():
    """Turn storage and I/O failures into a message and an exit code."""
    try:
        yield
    except Exception as e:
        kind = error_kind(e)
        if kind is None:
            raise
        console.print(f"[red]✗ {kind.value}:[/red] {e}")
        sys.exit(EXIT_CODES[kind])


def format_size(size: int) -> str:
    """Human-readable byte count."""
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


def items_table(title: str, items) -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Modified", style="dim")
    for item in items:
        table.add_row(
            item.name,
            format_size(item.size),
            item.last_modified.strftime("%Y-%m-%d %H:%M:%S"),
        )
    return table


@click.group()
@click.version_option(version=__version__, prog_name="blobfs")
@click.option("--root", type=click.Path(), default=None, help="Location root (overrides BLOBFS_STORAGE_PATH)")
@click.pass_context
def main(ctx: click.Context, root: str | None):
    """
    blobfs - browse a directory tree as paginated blob containers.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    path = root or settings.STORAGE_PATH
    try:
        location = dial(settings.STORAGE_KIND, {"path": path})
    except (ValidationError, ValueError) as e:
        console.print(f"[red]✗ Cannot open storage at {path}[/red]")
        console.print(str(e))
        sys.exit(1)

    ctx.obj = {"location": location, "page_size": settings.DEFAULT_PAGE_SIZE}
    ctx.call_on_close(location.close)


def _location(ctx: click.Context) -> Location:
    return ctx.obj["location"]


@main.command()
@click.option("--prefix", default="", help="Only containers whose name starts with this")
@click.option("--cursor", default=CURSOR_START, help="Cursor from a previous page")
@click.option("--count", type=click.IntRange(min=1), default=None, help="Page size")
@click.option("--all", "all_pages", is_flag=True, help="Follow cursors to the last page")
@click.pass_context
def containers(ctx: click.Context, prefix: str, cursor: str, count: int | None, all_pages: bool):
    """List one page of containers."""
    _check_all_pages(all_pages, cursor)
    count = count or ctx.obj["page_size"]
    location = _location(ctx)
    with storage_errors():
        if all_pages:
            found = list(walk_containers(location, prefix, count))
            next_cursor = CURSOR_END
        else:
            found, next_cursor = location.containers(prefix, cursor, count)

    if not found:
        console.print("[yellow]No containers found[/yellow]")
    else:
        table = Table(title=f"Containers in {location.root}")
        table.add_column("Name", style="cyan")
        table.add_column("URL", style="dim")
        for container in found:
            table.add_row(container.name, container.url)
        console.print(table)

    if not is_cursor_end(next_cursor):
        console.print(f"Next cursor: [cyan]{next_cursor}[/cyan]")


def _check_all_pages(all_pages: bool, cursor: str) -> None:
    if all_pages and cursor != CURSOR_START:
        raise click.UsageError("--all always starts from the first page; drop --cursor")


@main.command()
@click.argument("name")
@click.pass_context
def mkcontainer(ctx: click.Context, name: str):
    """Create a container."""
    with storage_errors():
        container = _location(ctx).create_container(name)
    console.print(f"[green]✓[/green] Created container [cyan]{container.name}[/cyan]")


@main.command()
@click.argument("name")
@click.confirmation_option(prompt="Remove the container and everything in it?")
@click.pass_context
def rmcontainer(ctx: click.Context, name: str):
    """Remove a container and all of its items."""
    with storage_errors():
        _location(ctx).remove_container(name)
    console.print(f"[green]✓[/green] Removed container [cyan]{name}[/cyan]")


@main.command()
@click.argument("container")
@click.option("--prefix", default="", help="Path prefix, relative to the container")
@click.option("--cursor", default=CURSOR_START, help="Cursor from a previous page")
@click.option("--count", type=click.IntRange(min=1), default=None, help="Page size")
@click.option("--depth", type=click.IntRange(min=0), default=0, help="Max nesting below prefix (0 = unlimited)")
@click.option("--all", "all_pages", is_flag=True, help="Follow cursors to the last page")
@click.pass_context
def ls(ctx: click.Context, container: str, prefix: str, cursor: str, count: int | None, depth: int, all_pages: bool):
    """
    List items in a container.

    Example:
        blobfs ls photos --prefix 2024 --depth 1
    """
    _check_all_pages(all_pages, cursor)
    count = count or ctx.obj["page_size"]
    with storage_errors():
        target = _location(ctx).container(container)
        if all_pages:
            items = list(walk_items(target, prefix, count, depth))
            next_cursor = CURSOR_END
        else:
            items, next_cursor = target.items(prefix, cursor, count, depth)
        table = items_table(f"{target.name} ({len(items)} items)", items)

    console.print(table)
    if not is_cursor_end(next_cursor):
        console.print(f"Next cursor: [cyan]{next_cursor}[/cyan]")


@main.command()
@click.argument("container")
@click.argument("item")
@click.pass_context
def cat(ctx: click.Context, container: str, item: str):
    """Write an item's content to stdout."""
    out = click.get_binary_stream("stdout")
    with storage_errors():
        target = _location(ctx).container(container).item(item)
        with target.open() as f:
            while chunk := f.read(64 * 1024):
                out.write(chunk)
    out.flush()


@main.command()
@click.argument("container")
@click.argument("name")
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--size", type=click.IntRange(min=0), default=None, help="Expected size (default: size of SOURCE)")
@click.pass_context
def put(ctx: click.Context, container: str, name: str, source, size: int | None):
    """
    Upload a file as an item.

    Example:
        blobfs put photos 2024/beach.jpg ~/beach.jpg
    """
    if size is None:
        size = _source_size(source)
    with storage_errors():
        item = _location(ctx).container(container).put(name, source, size)
    console.print(f"[green]✓[/green] Wrote [cyan]{item.name}[/cyan] ({format_size(item.size)})")


def _source_size(source) -> int:
    """Size of a regular file source, 0 (unchecked) for pipes and stdin."""
    try:
        return os.fstat(source.fileno()).st_size if os.path.isfile(source.name) else 0
    except (AttributeError, OSError, ValueError):
        return 0


@main.command()
@click.argument("container")
@click.argument("item")
@click.pass_context
def rm(ctx: click.Context, container: str, item: str):
    """Remove an item."""
    with storage_errors():
        parent = _location(ctx).container(container)
        target = parent.item(item)
        parent.remove_item(target.id)
    console.print(f"[green]✓[/green] Removed [cyan]{target.name}[/cyan]")


if __name__ == "__main__":
    main()
