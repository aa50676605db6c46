"""Reconstruction of parse trees from their text dump.

``verible-verilog-syntax --printtree`` prints the concrete syntax tree
of a file as one line per element, nesting expressed purely through
indentation (two spaces per level)::

    Parse Tree:
    Node @0 (tag: kDescriptionList) {
      Node @0 (tag: kModuleDeclaration) {
        Node @0 (tag: kModuleHeader) {
          Leaf @0 (#"module" @0-6: "module")
          Leaf @2 (#SymbolIdentifier @7-14: "counter")
    ...

:class:`TreeDumpParser` turns this text back into a
:class:`svreg.model.TreeNode`.  It keeps a stack of the interior nodes
that are still open, one per indentation level, so no grammar is
needed: a line's indentation alone tells which open node is its
parent.  The parser is deliberately forgiving.  Lines that are neither
nodes nor leaves (headers, closing braces, stray tool output) are
skipped, and a line indented deeper than any open node is attached to
the deepest one instead of being rejected.

Example usage::

    from svreg.tree_dump import parse_tree_dump
    from svreg.query import find_all_by_tag

    tree = parse_tree_dump(dump_text)
    modules = find_all_by_tag(tree, "kModuleDeclaration")
"""

from __future__ import annotations

import re
from typing import List, Optional

from .errors import ParseFailure
from .model import TreeLeaf, TreeNode

INDENT_WIDTH = 2

_NODE_RE = re.compile(r"^(?P<indent>\s*)Node @\d+ \(tag: (?P<tag>\w+)\)")
_LEAF_RE = re.compile(
    r"^(?P<indent>\s*)Leaf @\d+ \(#(?P<tag>\"[^\"]*\"|'[^']*'|\w+) "
    r"@(?P<start>\d+)-(?P<end>\d+): \"(?P<text>.*)\"\)\s*$"
)


class TreeDumpParser:
    """Rebuild a tree from the indentation-based dump of a syntax tool."""

    def __init__(self, indent_width: int = INDENT_WIDTH) -> None:
        self.indent_width = indent_width

    def parse_file(self, path: str) -> TreeNode:
        """Parse a dump previously saved to ``path``."""
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
        return self.parse_text(text)

    def parse_text(self, text: str) -> TreeNode:
        """Parse dump text and return its root node.

        Raises:
            ParseFailure: If no interior node was found in ``text``.
        """
        root: Optional[TreeNode] = None
        stack: List[TreeNode] = []

        for line in text.splitlines():
            m = _NODE_RE.match(line)
            if m:
                node = TreeNode(tag=m.group("tag"))
                self._unwind(stack, m.group("indent"))
                if stack:
                    stack[-1].children.append(node)
                else:
                    root = node
                stack.append(node)
                continue

            m = _LEAF_RE.match(line)
            if m:
                leaf = TreeLeaf(
                    tag=m.group("tag").strip("\"'"),
                    text=m.group("text"),
                    start=int(m.group("start")),
                    end=int(m.group("end")),
                )
                self._unwind(stack, m.group("indent"))
                # A leaf with no open node has nowhere to go
                if stack:
                    stack[-1].children.append(leaf)

        if root is None:
            raise ParseFailure("tree dump contains no nodes")
        return root

    def _unwind(self, stack: List[TreeNode], indent: str) -> None:
        """Close open nodes until the stack depth matches ``indent``.

        Indentation deeper than the stack is clamped to the stack depth,
        which leaves every open node in place.
        """
        level = min(len(indent) // self.indent_width, len(stack))
        del stack[level:]


def parse_tree_dump(text: str) -> TreeNode:
    """Convenience wrapper around :meth:`TreeDumpParser.parse_text`."""
    return TreeDumpParser().parse_text(text)
