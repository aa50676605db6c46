"""Markdown table renderer."""

from __future__ import annotations

from typing import Iterable, List

from ..model import AnalysisResult, CandidateRegister, ModuleSummary
from .base import ReportRenderer, renderer_registry


def _table(headers: List[str], rows: Iterable[List[object]]) -> str:
    header_line = "| " + " | ".join(headers) + " |"
    align_line = "|" + "|".join([":" + "-" * (len(h) + 1) for h in headers]) + "|"
    lines = [header_line, align_line]
    for row in rows:
        lines.append("| " + " | ".join(str(cell) for cell in row) + " |")
    return "\n".join(lines)


@renderer_registry.register("markdown")
class MarkdownTableRenderer(ReportRenderer):
    """Render tables in GitHub Flavoured Markdown format."""

    def render_register_table(self, registers: Iterable[CandidateRegister]) -> str:
        headers = ["Register", "Module", "Type", "Width", "Clock", "Reset", "File", "Line"]
        rows = (
            [reg.name, reg.module, reg.classification, reg.width,
             reg.clock or "", reg.reset or "", reg.file, reg.line]
            for reg in registers
        )
        return _table(headers, rows)

    def render_module_table(self, modules: Iterable[ModuleSummary]) -> str:
        headers = ["Module", "Registers", "File", "Line"]
        rows = ([mod.name, mod.register_count, mod.file, mod.line] for mod in modules)
        return _table(headers, rows)

    def render_summary(self, result: AnalysisResult) -> str:
        lines = [
            f"- Total registers: {result.total_registers}",
            f"- Total bits: {result.total_bits}",
        ]
        for kind, count in result.by_type.items():
            lines.append(f"- {kind}: {count}")
        if result.failures:
            lines.append(f"- Failed files: {len(result.failures)}")
        return "\n".join(lines)

    def render_report(
        self,
        result: AnalysisResult,
        include_registers: bool = True,
        include_modules: bool = True,
    ) -> str:
        sections = ["# Register Analysis", self.render_summary(result)]
        if include_modules:
            sections.extend(["## Modules", self.render_module_table(result.modules)])
        if include_registers:
            sections.extend(["## Registers", self.render_register_table(result.registers)])
        if result.failures:
            failures = "\n".join(f"- `{f.file}`: {f.reason}" for f in result.failures)
            sections.extend(["## Failures", failures])
        return "\n\n".join(sections)
