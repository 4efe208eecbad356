"""
sfokit CLI - inspect and edit PlayStation SFO metadata files.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .common.exceptions import SfoError, format_exception_chain
from .common.formatting import format_value, printable, to_jsonable, type_name
from .config import DEFAULT_SFO_NAME
from .logging_cfg import configure_logging
from .sfo.models import DataType
from .sfo.parser import SfoFile

app = typer.Typer(
    help="Read and edit PlayStation SFO (PARAM.SFO) metadata files.",
    rich_markup_mode="rich",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

HELP_SFO_PATH = "Path to the SFO file."

_TYPE_CHOICES = {
    "bytes": DataType.BYTES,
    "text": DataType.TEXT,
    "int": DataType.INT32,
    "int32": DataType.INT32,
}
_EMPTY_VALUES = {DataType.BYTES: b"", DataType.TEXT: "", DataType.INT32: 0}


@app.callback()
def global_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log output format: auto, human or json."
    ),
):
    configure_logging(log_format, logging.DEBUG if verbose else logging.WARNING)


def _fail(exc: SfoError) -> NoReturn:
    err_console.print(
        f"[bold red]Error:[/bold red] {escape(format_exception_chain(exc))}", highlight=False
    )
    sys.exit(1)


def _load(path: Path) -> SfoFile:
    try:
        return SfoFile.open(path)
    except SfoError as e:
        _fail(e)


@app.command("show")
def cmd_show(
    path: Path = typer.Argument(Path(DEFAULT_SFO_NAME), help=HELP_SFO_PATH),
):
    """Print every entry as ``key: value``."""
    try:
        sfo = SfoFile.open(path)
        for i in range(sfo.length()):
            key = sfo.get_key_by_index(i)
            value = sfo.get_value(key)
            typer.echo(f"{printable(key)}: {format_value(value)}")
    except SfoError as e:
        typer.echo(f"Error: {e}")
        sys.exit(1)


@app.command("table")
def cmd_table(
    path: Path = typer.Argument(Path(DEFAULT_SFO_NAME), help=HELP_SFO_PATH),
):
    """Show entries together with their layout in a table."""
    sfo = _load(path)
    table = Table(show_header=True, header_style="bold cyan", title=str(path))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key")
    table.add_column("Type")
    table.add_column("Used", justify="right")
    table.add_column("Reserved", justify="right")
    table.add_column("Value", overflow="fold")
    for i, entry in enumerate(sfo):
        table.add_row(
            str(i),
            printable(entry.label),
            type_name(entry.type),
            str(entry.section.used_size),
            str(entry.section.reserved_size),
            format_value(entry.value),
        )
    console.print(table)


@app.command("get")
def cmd_get(
    key: str = typer.Argument(..., help="Key to look up."),
    path: Path = typer.Option(Path(DEFAULT_SFO_NAME), "--path", "-p", help=HELP_SFO_PATH),
):
    """Print the value of one key."""
    sfo = _load(path)
    try:
        typer.echo(format_value(sfo.get_value(key)))
    except SfoError as e:
        _fail(e)


@app.command("set")
def cmd_set(
    index: int = typer.Argument(..., help="Entry position."),
    value: str = typer.Argument(..., help="New value, parsed according to the entry type."),
    path: Path = typer.Option(Path(DEFAULT_SFO_NAME), "--path", "-p", help=HELP_SFO_PATH),
):
    """Set the value of an entry and save the file."""
    sfo = _load(path)
    try:
        sfo.set_value_by_index(index, value)
        sfo.save()
    except SfoError as e:
        _fail(e)
    console.print(f"[bold green]✔[/bold green] {escape(sfo.get_key_by_index(index))} updated")


@app.command("rename")
def cmd_rename(
    index: int = typer.Argument(..., help="Entry position."),
    label: str = typer.Argument(..., help="New key."),
    path: Path = typer.Option(Path(DEFAULT_SFO_NAME), "--path", "-p", help=HELP_SFO_PATH),
):
    """Replace the key of an entry and save the file."""
    sfo = _load(path)
    try:
        sfo.set_label_by_index(index, label)
        sfo.save()
    except SfoError as e:
        _fail(e)
    console.print(f"[bold green]✔[/bold green] entry {index} renamed to {escape(label)}")


@app.command("add")
def cmd_add(
    label: str = typer.Argument(..., help="Key of the new entry."),
    kind: str = typer.Argument(..., help="Entry type: bytes, text or int."),
    value: str = typer.Argument(..., help="Value of the new entry."),
    path: Path = typer.Option(Path(DEFAULT_SFO_NAME), "--path", "-p", help=HELP_SFO_PATH),
):
    """Append an entry and save the file."""
    dtype = _TYPE_CHOICES.get(kind.lower())
    if dtype is None:
        err_console.print(f"[bold red]Error:[/bold red] unknown type {escape(repr(kind))}")
        sys.exit(2)
    sfo = _load(path)
    try:
        index = sfo.add_entry(label, dtype, _EMPTY_VALUES[dtype])
        sfo.set_value_by_index(index, value)
        sfo.save()
    except SfoError as e:
        _fail(e)
    console.print(f"[bold green]✔[/bold green] {escape(label)} added at position {index}")


@app.command("remove")
def cmd_remove(
    index: int = typer.Argument(..., help="Entry position."),
    path: Path = typer.Option(Path(DEFAULT_SFO_NAME), "--path", "-p", help=HELP_SFO_PATH),
):
    """Delete an entry and save the file."""
    sfo = _load(path)
    try:
        entry = sfo.remove_entry(index)
        sfo.save()
    except SfoError as e:
        _fail(e)
    console.print(f"[bold yellow]✔[/bold yellow] {escape(entry.label)} removed")


@app.command("json")
def cmd_json(
    path: Path = typer.Argument(Path(DEFAULT_SFO_NAME), help=HELP_SFO_PATH),
):
    """Dump entries as JSON (bytes values as hex)."""
    sfo = _load(path)
    payload = [
        {"key": printable(e.label), "type": type_name(e.type), "value": to_jsonable(e.value)}
        for e in sfo
    ]
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def main():
    app()


if __name__ == "__main__":
    main()
