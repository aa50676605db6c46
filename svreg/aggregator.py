"""Merging of per-file analysis results.

Each file is analysed on its own; the aggregator is the only place
where results meet.  Registers, modules and failures are concatenated
in the order the results are given, which keeps declaration order
within a file and discovery order across files.  The per-type counts,
per-module groupings and bit totals are properties of
:class:`svreg.model.AnalysisResult`, so they are recomputed from the
merged register list rather than added up.
"""

from __future__ import annotations

from typing import Iterable

from .model import AnalysisResult


def merge_results(results: Iterable[AnalysisResult]) -> AnalysisResult:
    """Concatenate ``results`` into a new :class:`AnalysisResult`."""
    merged = AnalysisResult()
    for result in results:
        merged.registers.extend(result.registers)
        merged.modules.extend(result.modules)
        merged.failures.extend(result.failures)
    return merged


def filter_module(result: AnalysisResult, module: str) -> AnalysisResult:
    """Return the part of ``result`` that belongs to ``module``."""
    return AnalysisResult(
        registers=[reg for reg in result.registers if reg.module == module],
        modules=[mod for mod in result.modules if mod.name == module],
        failures=list(result.failures),
    )
