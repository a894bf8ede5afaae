"""autoreset check command."""

from __future__ import annotations

import sys
from collections import defaultdict
from pathlib import Path

import click
from rich.prompt import Confirm

from autoreset.core.config import load_config
from autoreset.core.models import Diagnostic
from autoreset.core.output import console, print_diagnostics, print_write_result
from autoreset.host.applier import ExpansionApplier
from autoreset.host.expander import SourceExpander


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--fix", "apply_fixes", is_flag=True, help="Apply the suggested fix-its")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompts")
def check(path: Path, apply_fixes: bool, yes: bool):
    """Report misplaced @auto_resettable markers under PATH.

    Exits with status 1 while any error remains.
    """
    target_path = path.resolve()
    project_path = target_path if target_path.is_dir() else target_path.parent
    config = load_config(project_path)
    expander = SourceExpander(project_path, config)

    diagnostics = [d for r in expander.expand_path(target_path) for d in r.diagnostics]
    if not diagnostics:
        console.print("\n  [green]No problems found.[/green]\n")
        return

    console.print()
    print_diagnostics(diagnostics)
    console.print()

    if apply_fixes:
        by_file: dict[Path, list[Diagnostic]] = defaultdict(list)
        for diagnostic in diagnostics:
            if diagnostic.file is not None and diagnostic.fix_it is not None:
                by_file[diagnostic.file].append(diagnostic)

        if by_file and (yes or Confirm.ask(f"  Apply fix-its in {len(by_file)} file(s)?", default=False)):
            applier = ExpansionApplier(project_path, backup=config.expand.backup_before_write)
            results = [applier.apply_fix_its(file, items) for file, items in by_file.items()]
            for result in results:
                print_write_result(result)
            console.print()
            if all(r.success for r in results):
                return

    sys.exit(1)
