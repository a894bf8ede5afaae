"""autoreset expand command."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.prompt import Confirm

from autoreset.core.config import load_config
from autoreset.core.output import (
    console,
    print_expansion,
    print_summary,
    print_write_result,
)
from autoreset.host.applier import ExpansionApplier
from autoreset.host.expander import SourceExpander


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--write", is_flag=True, help="Write the expanded source back to each file")
@click.option("--diff", "show_diff", is_flag=True, help="Show a unified diff instead of the generated methods")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompts")
def expand(path: Path, write: bool, show_diff: bool, yes: bool):
    """Expand @auto_resettable declarations under PATH.

    Without --write this only previews. Files are backed up before they are
    written; run `autoreset undo` to restore them.
    """
    target_path = path.resolve()
    project_path = target_path if target_path.is_dir() else target_path.parent
    config = load_config(project_path)
    expander = SourceExpander(project_path, config)

    reports = [r for r in expander.expand_path(target_path) if r.outcomes]
    if not reports:
        console.print("\n  No @auto_resettable declarations found.\n")
        return

    for report in reports:
        print_expansion(report, show_diff=show_diff)
    print_summary(reports)

    if write:
        changed = [r for r in reports if r.changed]
        if changed and (yes or Confirm.ask(f"  Write {len(changed)} file(s)?", default=True)):
            applier = ExpansionApplier(project_path, backup=config.expand.backup_before_write)
            for report in changed:
                print_write_result(applier.write_expansion(report))
            console.print("  [dim]Run `autoreset undo` to revert.[/dim]\n")

    if any(r.error_count for r in reports):
        sys.exit(1)
