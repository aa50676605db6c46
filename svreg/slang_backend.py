"""Slang-backed tree source.

This module defines :class:`SlangTreeSource`, a tree source that uses
the ``pyslang`` Python bindings instead of the Verible binaries.  It
parses a file into slang's concrete syntax tree and prints that tree
in the same indentation-based format as
``verible-verilog-syntax --printtree``, so the rest of the pipeline
cannot tell the two sources apart.

The syntax trees of the two front-ends are close but not identical.
Slang syntax kinds and token kinds are translated to the Verible tags
the extractor and classifier look for (:data:`NODE_TAGS`,
:data:`TOKEN_TAGS`); kinds without a counterpart keep their slang
name.  Two structural differences are bridged while printing:

* a ``VariableDimension`` is printed as ``kPackedDimensions`` when it
  belongs to a data type and as ``kUnpackedDimensions`` when it hangs
  off a declarator (``reg mem [0:255]``);
* the left operand of an assignment is wrapped in a synthetic
  ``kLPValue`` node, which Verible prints but slang does not have.

Because this source depends on compiled extensions, it raises an
exception if the ``pyslang`` package cannot be imported.  There is
intentionally no fallback to Verible; choose the ``verible`` source
instead when ``pyslang`` is not available.
"""

from __future__ import annotations

import importlib
import logging
import time
from typing import Any, List, Optional

from .config import AnalyzerConfig
from .errors import ToolExecutionError
from .executor import ToolOutput
from .sources import TreeSource, tree_source_registry

logger = logging.getLogger(__name__)

# Attempt to import the pyslang package.  If unavailable we set the
# module to None; calling :meth:`SlangTreeSource.print_tree` will then
# raise an ImportError.
try:
    import pyslang  # type: ignore[import]
except ImportError:
    pyslang = None  # type: ignore

NODE_TAGS = {
    "CompilationUnit": "kDescriptionList",
    "ModuleDeclaration": "kModuleDeclaration",
    "ModuleHeader": "kModuleHeader",
    "AnsiPortList": "kPortDeclarationList",
    "ImplicitAnsiPort": "kPortDeclaration",
    "ExplicitAnsiPort": "kPortDeclaration",
    "PortDeclaration": "kModulePortDeclaration",
    "DataDeclaration": "kDataDeclaration",
    "NetDeclaration": "kNetDeclaration",
    "Declarator": "kRegisterVariable",
    "AlwaysBlock": "kAlwaysStatement",
    "AlwaysFFBlock": "kAlwaysStatement",
    "AlwaysCombBlock": "kAlwaysStatement",
    "AlwaysLatchBlock": "kAlwaysStatement",
    "SignalEventExpression": "kEventExpression",
    "AssignmentExpression": "kBlockingAssignmentStatement",
    "NonblockingAssignmentExpression": "kNonblockingAssignmentStatement",
    "ContinuousAssign": "kContinuousAssignmentStatement",
}

TOKEN_TAGS = {
    "Identifier": "SymbolIdentifier",
    "SystemIdentifier": "SystemTFIdentifier",
    "IntegerLiteral": "TK_DecNumber",
    "IntegerBase": "TK_NumberBase",
    "UnbasedUnsizedLiteral": "TK_UnBasedNumber",
    "RealLiteral": "TK_RealTime",
    "TimeLiteral": "TK_TimeLiteral",
    "StringLiteral": "TK_StringLiteral",
}

_ASSIGNMENT_KINDS = ("AssignmentExpression", "NonblockingAssignmentExpression")


def _kind_name(obj: Any) -> str:
    kind = getattr(obj, "kind", None)
    return getattr(kind, "name", None) or str(kind)


def _is_token(obj: Any) -> bool:
    return hasattr(obj, "rawText")


def _children(node: Any) -> List[Any]:
    """Return the non-empty children of a slang syntax node."""
    try:
        count = len(node)
    except TypeError:
        return []
    children = []
    for i in range(count):
        child = node[i]
        if child is not None:
            children.append(child)
    return children


class SyntaxTreePrinter:
    """Print a slang syntax tree in Verible's ``--printtree`` format."""

    def __init__(self, indent_width: int = 2) -> None:
        self.indent_width = indent_width

    def render(self, root: Any) -> str:
        lines: List[str] = ["Parse Tree:"]
        self._emit_node(root, 0, 0, lines, in_declarator=False)
        return "\n".join(lines) + "\n"

    def _indent(self, depth: int) -> str:
        return " " * (depth * self.indent_width)

    def _node_tag(self, kind: str, in_declarator: bool) -> str:
        if kind == "VariableDimension":
            return "kUnpackedDimensions" if in_declarator else "kPackedDimensions"
        return NODE_TAGS.get(kind, kind)

    def _emit(self, obj: Any, depth: int, index: int, lines: List[str], in_declarator: bool) -> None:
        if _is_token(obj):
            self._emit_token(obj, depth, index, lines)
        else:
            self._emit_node(obj, depth, index, lines, in_declarator)

    def _emit_node(self, node: Any, depth: int, index: int, lines: List[str], in_declarator: bool) -> None:
        kind = _kind_name(node)
        indent = self._indent(depth)
        lines.append(f"{indent}Node @{index} (tag: {self._node_tag(kind, in_declarator)}) {{")
        # Dimensions of a data type nested in a declarator are still packed
        child_in_declarator = (kind == "Declarator") or (in_declarator and not kind.endswith("Type"))

        children = _children(node)
        if kind in _ASSIGNMENT_KINDS and children:
            lines.append(f"{self._indent(depth + 1)}Node @0 (tag: kLPValue) {{")
            self._emit(children[0], depth + 2, 0, lines, child_in_declarator)
            lines.append(f"{self._indent(depth + 1)}}}")
            for i, child in enumerate(children[1:], start=1):
                self._emit(child, depth + 1, i, lines, child_in_declarator)
        else:
            for i, child in enumerate(children):
                self._emit(child, depth + 1, i, lines, child_in_declarator)
        lines.append(f"{indent}}}")

    def _emit_token(self, token: Any, depth: int, index: int, lines: List[str]) -> None:
        text = str(getattr(token, "rawText", ""))
        if not text or getattr(token, "isMissing", False):
            return
        kind = _kind_name(token)
        tag = TOKEN_TAGS.get(kind)
        tag_repr = tag if tag else '"' + text.replace('"', "'") + '"'
        start = int(getattr(getattr(token, "location", None), "offset", 0))
        end = start + len(text.encode("utf-8"))
        escaped = text.replace("\n", "\\n")
        lines.append(f'{self._indent(depth)}Leaf @{index} (#{tag_repr} @{start}-{end}: "{escaped}")')


def syntax_tree_type() -> Any:
    """Return pyslang's ``SyntaxTree`` class.

    pyslang 11 moved the syntax classes out of the top-level module into
    ``pyslang.syntax``; older releases only have the top-level name.
    """
    if hasattr(pyslang, "SyntaxTree"):
        return pyslang.SyntaxTree
    syntax = getattr(pyslang, "syntax", None)
    if syntax is None:
        syntax = importlib.import_module("pyslang.syntax")
    return syntax.SyntaxTree


@tree_source_registry.register("slang")
class SlangTreeSource(TreeSource):
    """Parse files with pyslang and print their tree like Verible does."""

    name = "pyslang"

    def __init__(self, config: Optional[AnalyzerConfig] = None) -> None:
        super().__init__(config)
        self.printer = SyntaxTreePrinter()

    def print_tree(self, path: str) -> ToolOutput:
        """Parse ``path`` and return its tree dump.

        Syntax errors reported by slang produce a non-zero exit code and
        are listed in :attr:`ToolOutput.stderr`, mirroring the Verible
        tool.

        Raises:
            ImportError: If the ``pyslang`` package is not available.
            ToolExecutionError: If pyslang fails while reading or walking
                the tree.
        """
        if pyslang is None:
            raise ImportError(
                "pyslang is required for the slang tree source but is not installed. "
                "Install it via `pip install pyslang`."
            )

        start = time.monotonic()
        try:
            tree = syntax_tree_type().fromFile(path)
            dump = self.printer.render(tree.root)
        except (AttributeError, RuntimeError, ValueError, TypeError) as exc:
            raise ToolExecutionError(f"pyslang failed on {path}: {exc}") from exc

        errors: List[str] = []
        for diag in getattr(tree, "diagnostics", []):
            if getattr(diag, "isError", lambda: False)():
                try:
                    errors.append(str(diag))
                except Exception:
                    errors.append(repr(diag))

        logger.debug("pyslang parsed %s with %d error(s)", path, len(errors))
        return ToolOutput(
            exit_code=1 if errors else 0,
            stdout=dump,
            stderr="\n".join(errors),
            duration=time.monotonic() - start,
        )

    def version(self) -> str:
        if pyslang is None:
            return "unknown"
        return getattr(pyslang, "__version__", "unknown")
