"""CSV table renderer.

Registers are written one per row; a module table is a separate CSV
document.  The full report contains only the section(s) requested so
that its output can be loaded directly into a spreadsheet.
"""

from __future__ import annotations

import csv
import io
from typing import Iterable, List

from ..model import CandidateRegister, ModuleSummary
from .base import ReportRenderer, renderer_registry


def _write(headers: List[str], rows: Iterable[List[object]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return output.getvalue().rstrip("\r\n")


@renderer_registry.register("csv")
class CsvTableRenderer(ReportRenderer):
    """Render tables in CSV format."""

    def render_register_table(self, registers: Iterable[CandidateRegister]) -> str:
        headers = ["Register", "Module", "Type", "Width", "Clock", "Reset", "File", "Line"]
        return _write(headers, (
            [reg.name, reg.module, reg.classification, reg.width,
             reg.clock or "", reg.reset or "", reg.file, reg.line]
            for reg in registers
        ))

    def render_module_table(self, modules: Iterable[ModuleSummary]) -> str:
        headers = ["Module", "Registers", "File", "Line"]
        return _write(headers, ([mod.name, mod.register_count, mod.file, mod.line] for mod in modules))
