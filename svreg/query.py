"""Generic traversals over reconstructed parse trees.

These helpers know nothing about hardware description languages; they
only walk :class:`svreg.model.TreeNode` objects.  All of them are pure
pre-order traversals and none of them caches anything, so callers
simply walk again when they need to.  The walks use an explicit stack
rather than recursion because syntax trees of long expressions can be
nested deeper than Python's recursion limit.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from .model import TreeElement, TreeLeaf, TreeNode


def iter_preorder(node: TreeElement) -> Iterator[TreeElement]:
    """Yield ``node`` and every element below it in document order."""
    pending: List[TreeElement] = [node]
    while pending:
        current = pending.pop()
        yield current
        if isinstance(current, TreeNode):
            pending.extend(reversed(current.children))


def find_all_by_tag(node: TreeElement, tag: str) -> List[TreeNode]:
    """Return every interior node tagged ``tag``, ``node`` included."""
    return [
        n for n in iter_preorder(node)
        if isinstance(n, TreeNode) and n.tag == tag
    ]


def find_first_by_tag(node: TreeElement, tag: str) -> Optional[TreeNode]:
    """Return the first interior node tagged ``tag``, or ``None``."""
    for n in iter_preorder(node):
        if isinstance(n, TreeNode) and n.tag == tag:
            return n
    return None


def collect_leaves(node: TreeElement) -> List[TreeLeaf]:
    """Return every leaf under ``node`` from left to right."""
    return [n for n in iter_preorder(node) if isinstance(n, TreeLeaf)]
