"""Expander engine — finds marked declarations and splices reset methods."""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from autoreset.core.config import AutoResetConfig, load_config
from autoreset.core.models import (
    DeclarationOutcome,
    Diagnostic,
    ExpansionReport,
    ExpansionResult,
    SynthesizedMember,
)
from autoreset.host.frontend import DeclarationBuilder, MarkedNode
from autoreset.macro.diagnostics import DiagnosticMessage, make_diagnostic
from autoreset.macro.engine import expand

logger = logging.getLogger(__name__)


@dataclass
class _Splice:
    """A pending edit on one marked class, applied bottom-up."""

    node: ast.ClassDef
    depth: int
    member: SynthesizedMember


class SourceExpander:
    """Runs the reset pipeline over every marked declaration in a module."""

    def __init__(
        self,
        project_path: Path | None = None,
        config: AutoResetConfig | None = None,
    ):
        self.project_path = (project_path or Path.cwd()).resolve()
        self.config = config or load_config(self.project_path)

    def expand_source(self, source: str, filename: Path | None = None) -> ExpansionReport:
        """Expand one module's source. Raises ``SyntaxError`` on unparsable input."""
        tree = ast.parse(source, filename=str(filename) if filename else "<unknown>")
        builder = DeclarationBuilder(source, self.config.expand)

        report = ExpansionReport(file=filename, original=source, expanded=source)
        splices: list[_Splice] = []

        for marked in builder.find_marked(tree):
            result = self._expand_one(builder, marked)
            report.outcomes.append(
                DeclarationOutcome(name=marked.node.name, line=marked.node.lineno, result=result)
            )
            for diagnostic in result.diagnostics:
                report.diagnostics.append(_with_file(diagnostic, filename))
            if result.method is not None and isinstance(marked.node, ast.ClassDef):
                splices.append(_Splice(node=marked.node, depth=marked.depth, member=result.method))

        if splices:
            report.expanded = self._apply_splices(source, builder, splices)
        logger.debug(
            "Expanded %s: %d declaration(s), %d diagnostic(s)",
            filename or "<source>",
            len(report.outcomes),
            len(report.diagnostics),
        )
        return report

    def expand_file(self, file_path: Path) -> ExpansionReport:
        source = file_path.read_text(encoding="utf-8")
        return self.expand_source(source, filename=self._display_path(file_path))

    def expand_path(self, target_path: Path | None = None) -> list[ExpansionReport]:
        """Expand every Python file under ``target_path``; unparsable files are skipped."""
        reports: list[ExpansionReport] = []
        for py_file in self._collect_python_files(target_path or self.project_path):
            try:
                reports.append(self.expand_file(py_file))
            except (SyntaxError, UnicodeDecodeError) as exc:
                logger.warning("Skipping %s: %s", py_file, exc)
                continue
        return reports

    def _expand_one(self, builder: DeclarationBuilder, marked: MarkedNode) -> ExpansionResult:
        # Duplicate attachment is the host's to reject, before the pipeline runs.
        markers = builder.markers(marked.node)
        if len(markers) > 1:
            diagnostics = tuple(
                make_diagnostic(
                    DiagnosticMessage.DUPLICATE_ATTACHMENT,
                    builder.anchor(extra),
                    declaration=marked.node.name,
                )
                for extra in markers[1:]
            )
            return ExpansionResult(declaration=marked.node.name, diagnostics=diagnostics)
        return expand(builder.build(marked.node))

    def _apply_splices(
        self, source: str, builder: DeclarationBuilder, splices: list[_Splice]
    ) -> str:
        lines = source.splitlines(keepends=True)
        if lines and not lines[-1].endswith("\n"):
            lines[-1] += "\n"

        # Edits run bottom-up so earlier line numbers stay valid. On a shared
        # last line the outer class goes first, leaving the inner method above.
        edits: list[tuple[tuple[int, int], _Splice | ast.expr]] = []
        for splice in splices:
            edits.append(((splice.node.end_lineno or splice.node.lineno, -splice.depth), splice))
            for marker in builder.markers(splice.node):
                edits.append(((marker.lineno, 0), marker))

        for _, edit in sorted(edits, key=lambda e: e[0], reverse=True):
            if isinstance(edit, _Splice):
                self._splice_method(lines, edit)
            else:
                del lines[edit.lineno - 1 : edit.end_lineno or edit.lineno]
        return "".join(lines)

    def _splice_method(self, lines: list[str], splice: _Splice) -> None:
        node = splice.node
        end = node.end_lineno or node.lineno
        header_indent = _leading_whitespace(lines[node.lineno - 1])
        first = node.body[0]

        if first.lineno == node.lineno:
            # ``class A: pass`` — move the body onto its own line.
            body_indent = header_indent + "    "
            header = lines[node.lineno - 1].encode("utf-8")
            head = header[: first.col_offset].decode("utf-8")
            body = header[first.col_offset :].decode("utf-8")
            lines[end:end] = ["\n", splice.member.render(indent=body_indent)]
            lines[node.lineno - 1 : node.lineno] = [head.rstrip() + "\n", body_indent + body]
            return

        body_indent = _leading_whitespace(lines[first.lineno - 1])
        method = splice.member.render(indent=body_indent)
        lines[end:end] = ["\n", method]

    def _display_path(self, file_path: Path) -> Path:
        try:
            return file_path.resolve().relative_to(self.project_path)
        except ValueError:
            return file_path  # path is not under the project root; keep as-is

    def _collect_python_files(self, path: Path) -> list[Path]:
        """Collect all Python files, excluding configured patterns."""
        if path.is_file():
            return [path] if path.suffix == ".py" else []

        py_files: list[Path] = []
        for py_file in path.rglob("*.py"):
            rel = str(py_file.relative_to(path))
            if any(excl.rstrip("/") in rel for excl in self.config.exclude):
                continue
            py_files.append(py_file)
        return sorted(py_files)


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _with_file(diagnostic: Diagnostic, filename: Path | None) -> Diagnostic:
    if filename is None:
        return diagnostic
    return replace(diagnostic, file=filename)
