"""Base renderer class and registry.

This module defines the abstract :class:`ReportRenderer` interface and
the :data:`renderer_registry` used for plugin-style registration of
concrete output formats.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..model import AnalysisResult, CandidateRegister, ModuleSummary
from ..registry import Registry

# Registry for renderer implementations
renderer_registry = Registry("renderer")


class ReportRenderer(ABC):
    """Abstract base class for rendering analysis results."""

    @abstractmethod
    def render_register_table(self, registers: Iterable[CandidateRegister]) -> str:
        """Render a table of registers.

        Args:
            registers: Iterable of :class:`CandidateRegister` objects.

        Returns:
            A string containing the formatted table.
        """
        raise NotImplementedError

    @abstractmethod
    def render_module_table(self, modules: Iterable[ModuleSummary]) -> str:
        """Render a table of modules.

        Args:
            modules: Iterable of :class:`ModuleSummary` objects.

        Returns:
            A string containing the formatted table.
        """
        raise NotImplementedError

    def render_report(
        self,
        result: AnalysisResult,
        include_registers: bool = True,
        include_modules: bool = True,
    ) -> str:
        """Render the selected sections of ``result`` one after another."""
        sections = []
        if include_modules:
            sections.append(self.render_module_table(result.modules))
        if include_registers:
            sections.append(self.render_register_table(result.registers))
        return "\n\n".join(sections)
