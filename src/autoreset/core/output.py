"""Rich terminal formatting for autoreset output."""

from __future__ import annotations

import difflib

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from autoreset.core.models import (
    Diagnostic,
    ExpansionReport,
    Severity,
    WriteResult,
)

console = Console()
error_console = Console(stderr=True)


SEVERITY_ICONS = {
    Severity.ERROR: "[red]●[/red]",
}


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Format a single diagnostic for terminal output."""
    icon = SEVERITY_ICONS.get(diagnostic.severity, "●")
    location = ""
    if diagnostic.file:
        location = f"  {diagnostic.file}:{diagnostic.anchor.line}:{diagnostic.anchor.column + 1}"

    text = f"  {icon} {diagnostic.severity.value}: {diagnostic.message}{location}\n     [dim]{diagnostic.id}[/dim]"
    if diagnostic.fix_it is not None:
        text += f"\n     Fix-it: {diagnostic.fix_it.message}"
    return text


def print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        console.print(format_diagnostic(diagnostic))


def print_expansion(report: ExpansionReport, show_diff: bool = False) -> None:
    """Print the generated methods of one file, or a unified diff."""
    lines = []
    for outcome in report.outcomes:
        method = outcome.result.method
        if method is None:
            lines.append(f"  [red]❌ {outcome.name}[/red]  line {outcome.line}: not expanded")
            continue
        count = len(method.plan)
        lines.append(
            f"  [green]✅ {outcome.name}[/green]  line {outcome.line}: "
            f"{count} field(s) reset"
        )

    body = "\n".join(lines) if lines else "  [dim]No @auto_resettable declarations.[/dim]"
    border = "red" if report.error_count else "green"
    console.print(Panel(
        body,
        title=f"[bold]{report.file or '<source>'}[/bold]",
        border_style=border,
        padding=(0, 1),
    ))

    if report.changed:
        if show_diff:
            console.print(Syntax(unified_diff(report), "diff", theme="ansi_dark"))
        else:
            for outcome in report.outcomes:
                method = outcome.result.method
                if method is not None:
                    console.print(Syntax(method.render(indent=""), "python", theme="ansi_dark"))

    print_diagnostics(report.diagnostics)


def unified_diff(report: ExpansionReport) -> str:
    name = str(report.file or "<source>")
    return "".join(difflib.unified_diff(
        report.original.splitlines(keepends=True),
        report.expanded.splitlines(keepends=True),
        fromfile=f"a/{name}",
        tofile=f"b/{name}",
    ))


def print_write_result(result: WriteResult) -> None:
    """Print a single write result."""
    label = result.file or ""
    if result.success:
        console.print(f"  [green]✅ {label}[/green]  {result.message}")
    else:
        console.print(f"  [red]❌ {label}[/red]  {result.message}")


def print_summary(reports: list[ExpansionReport]) -> None:
    expanded = sum(r.expanded_count for r in reports)
    errors = sum(r.error_count for r in reports)
    console.print()
    console.print(f"  {expanded} declaration(s) expanded | {errors} error(s) | {len(reports)} file(s)")
    console.print()
