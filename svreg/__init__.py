"""Top level package for Verilog/SystemVerilog register analysis.

This package inventories the storage elements of a design.  It does
not parse Verilog itself: an external syntax tool prints the parse
tree of each file and the package rebuilds and walks that tree.  It
is intended for design engineers who want to know how many flip-flops
and latches each module holds and how many bits of state a design
carries.

Key concepts:

* **Model classes** represent the rebuilt tree and the analysis
  results.  See :mod:`svreg.model`.
* **Tree reconstruction** turns the tool's text dump back into a tree.
  See :mod:`svreg.tree_dump` and :mod:`svreg.query`.
* **Extraction and classification** find declarations and decide
  their role from ``always`` blocks.  See :mod:`svreg.extractor` and
  :mod:`svreg.classifier`.
* **Tree sources** produce the dump, with Verible or pyslang.  See
  :mod:`svreg.sources` and :mod:`svreg.slang_backend`.
* **Analyzer** runs the pipeline over files and directories and merges
  the results.  See :mod:`svreg.analyzer` and :mod:`svreg.aggregator`.
* **Renderers** provide pluggable output formats (Markdown, CSV, JSON,
  HTML).  See :mod:`svreg.renderers`.
"""

from .model import (
    FLIP_FLOP,
    LATCH,
    POTENTIAL_REGISTER,
    TreeNode,
    TreeLeaf,
    CandidateRegister,
    ModuleSummary,
    FileFailure,
    AnalysisResult,
)
from .errors import (
    SvregError,
    ParseFailure,
    UnresolvedModuleName,
    UnresolvedWidth,
    AssignmentTargetAmbiguous,
    ConfigError,
    ToolNotFoundError,
    ToolExecutionError,
)
from .registry import Registry
from .tree_dump import TreeDumpParser, parse_tree_dump
from .query import find_all_by_tag, find_first_by_tag, collect_leaves
from .extractor import DeclarationExtractor
from .classifier import ProceduralBlockClassifier
from .aggregator import merge_results
from .config import AnalyzerConfig, load_config
from .cache import ResultCache
from .sources import TreeSource, VeribleTreeSource, tree_source_registry
from .slang_backend import SlangTreeSource  # noqa: F401
from .analyzer import RegisterAnalyzer, analyze_dump
from .renderers import ReportRenderer, renderer_registry

__all__ = [
    "FLIP_FLOP",
    "LATCH",
    "POTENTIAL_REGISTER",
    "TreeNode",
    "TreeLeaf",
    "CandidateRegister",
    "ModuleSummary",
    "FileFailure",
    "AnalysisResult",
    "SvregError",
    "ParseFailure",
    "UnresolvedModuleName",
    "UnresolvedWidth",
    "AssignmentTargetAmbiguous",
    "ConfigError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "Registry",
    "TreeDumpParser",
    "parse_tree_dump",
    "find_all_by_tag",
    "find_first_by_tag",
    "collect_leaves",
    "DeclarationExtractor",
    "ProceduralBlockClassifier",
    "merge_results",
    "AnalyzerConfig",
    "load_config",
    "ResultCache",
    "TreeSource",
    "VeribleTreeSource",
    "SlangTreeSource",
    "tree_source_registry",
    "RegisterAnalyzer",
    "analyze_dump",
    "ReportRenderer",
    "renderer_registry",
]
