"""autoreset undo command."""

from __future__ import annotations

from pathlib import Path

import click

from autoreset.core.output import console, print_write_result
from autoreset.host.undo import UndoManager


@click.command()
@click.argument("file", required=False, type=click.Path(path_type=Path))
@click.option("--list", "list_all", is_flag=True, help="List backups that can be restored")
@click.option("--target", "-t", "target", default=".", help="Project directory (default: current dir)")
def undo(file: Path | None, list_all: bool, target: str):
    """Restore files written by `expand --write` or `check --fix`.

    With FILE, restore its latest backup; otherwise undo the last session.
    """
    manager = UndoManager(Path(target).resolve())

    if list_all:
        entries = manager.list_undoable()
        if not entries:
            console.print("\n  Nothing to undo.\n")
            return
        console.print()
        for entry in entries:
            console.print(f"  {entry.timestamp}  {entry.action:<7} {entry.file}")
        console.print()
        return

    if file is not None:
        print_write_result(manager.undo(file))
        return

    results = manager.undo_last_session()
    if not results:
        console.print("\n  Nothing to undo.\n")
        return
    for result in results:
        print_write_result(result)
