"""JSON renderer producing the serialised :class:`AnalysisResult`."""

from __future__ import annotations

import json
from typing import Iterable

from ..model import AnalysisResult, CandidateRegister, ModuleSummary
from .base import ReportRenderer, renderer_registry


@renderer_registry.register("json")
class JsonRenderer(ReportRenderer):
    """Render results as indented JSON."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render_register_table(self, registers: Iterable[CandidateRegister]) -> str:
        return json.dumps([reg.to_dict() for reg in registers], indent=self.indent)

    def render_module_table(self, modules: Iterable[ModuleSummary]) -> str:
        return json.dumps([mod.to_dict() for mod in modules], indent=self.indent)

    def render_report(
        self,
        result: AnalysisResult,
        include_registers: bool = True,
        include_modules: bool = True,
    ) -> str:
        data = result.to_dict()
        if not include_registers:
            for key in ("registers", "byModule"):
                data.pop(key)
        if not include_modules:
            data.pop("modules")
        return json.dumps(data, indent=self.indent)
