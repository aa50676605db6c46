"""Classification of candidate registers from procedural blocks.

A module's ``always`` blocks decide what its declared storage really
is.  A block whose event control contains ``posedge`` or ``negedge``
is edge-triggered and everything it assigns is a flip-flop; any other
block (``always @*``, ``always_comb``, ``always_latch``) is
level-sensitive and everything it assigns is a latch candidate.

The scan produces a :class:`BlockSignals` value holding two frozen
sets of assigned names, which :meth:`ProceduralBlockClassifier.classify`
then consults for every candidate of the module:

1. assigned in an edge-triggered block -> ``flip_flop``
2. otherwise assigned in a level-sensitive block -> ``latch``
3. never assigned -> ``flip_flop``

Only the first identifier of an assignment's left-hand side is used,
so ``{a, b} <= ...`` counts as an assignment to ``a`` alone and
``mem[i] <= ...`` as an assignment to ``mem``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .errors import AssignmentTargetAmbiguous
from .model import FLIP_FLOP, LATCH, POTENTIAL_REGISTER, CandidateRegister, TreeNode
from .query import collect_leaves, find_all_by_tag, find_first_by_tag

logger = logging.getLogger(__name__)

ALWAYS_STATEMENT = "kAlwaysStatement"
EVENT_EXPRESSION = "kEventExpression"
LHS_VALUE = "kLPValue"
IDENTIFIER = "SymbolIdentifier"
ASSIGNMENT_TAGS = (
    "kNetVariableAssignment",
    "kBlockingAssignmentStatement",
    "kNonblockingAssignmentStatement",
)
EDGE_KEYWORDS = ("posedge", "negedge")


@dataclass(frozen=True)
class BlockSignals:
    """Names assigned in a module's procedural blocks.

    ``edges`` maps each clocked name to the ``(clock, reset)`` pair of
    the first edge-triggered block that assigns it.
    """

    clocked: frozenset = frozenset()
    latch: frozenset = frozenset()
    edges: Dict[str, Tuple[Optional[str], Optional[str]]] = field(default_factory=dict)


def assignment_target(assignment: TreeNode) -> str:
    """Return the name assigned by ``assignment``.

    Raises:
        AssignmentTargetAmbiguous: If the left-hand side is missing or
            holds no identifier.
    """
    lhs = find_first_by_tag(assignment, LHS_VALUE)
    if lhs is None:
        raise AssignmentTargetAmbiguous(f"{assignment.tag} has no left-hand side")
    for leaf in collect_leaves(lhs):
        if leaf.tag == IDENTIFIER:
            return leaf.text
    raise AssignmentTargetAmbiguous(f"{assignment.tag} left-hand side has no identifier")


def edge_signals(block: TreeNode) -> List[str]:
    """Return the signals named after ``posedge``/``negedge`` in ``block``."""
    signals: List[str] = []
    for event in find_all_by_tag(block, EVENT_EXPRESSION):
        after_edge = False
        for leaf in collect_leaves(event):
            if leaf.text in EDGE_KEYWORDS:
                after_edge = True
            elif after_edge and leaf.tag == IDENTIFIER:
                signals.append(leaf.text)
                after_edge = False
    return signals


def is_edge_triggered(block: TreeNode) -> bool:
    for event in find_all_by_tag(block, EVENT_EXPRESSION):
        if any(leaf.text in EDGE_KEYWORDS for leaf in collect_leaves(event)):
            return True
    return False


class ProceduralBlockClassifier:
    """Assign final classifications to a module's candidate registers."""

    def scan(self, blocks: Iterable[TreeNode]) -> BlockSignals:
        """Collect the names assigned in ``blocks``, split by block kind."""
        clocked: Set[str] = set()
        latch: Set[str] = set()
        edges: Dict[str, Tuple[Optional[str], Optional[str]]] = {}

        for block in blocks:
            assigned = self.assigned_signals(block)
            if is_edge_triggered(block):
                clocked.update(assigned)
                names = edge_signals(block)
                clock = names[0] if names else None
                reset = names[1] if len(names) > 1 else None
                for name in assigned:
                    edges.setdefault(name, (clock, reset))
            else:
                latch.update(assigned)

        return BlockSignals(clocked=frozenset(clocked), latch=frozenset(latch), edges=edges)

    def assigned_signals(self, block: TreeNode) -> List[str]:
        """Return the target of every assignment inside ``block``."""
        names: List[str] = []
        for tag in ASSIGNMENT_TAGS:
            for assignment in find_all_by_tag(block, tag):
                try:
                    names.append(assignment_target(assignment))
                except AssignmentTargetAmbiguous as exc:
                    logger.debug("Ignoring assignment: %s", exc)
        return names

    def classify(self, registers: Iterable[CandidateRegister], signals: BlockSignals) -> None:
        """Set the classification of every still-unclassified register."""
        for reg in registers:
            if reg.classification != POTENTIAL_REGISTER:
                continue
            if reg.name in signals.clocked:
                reg.classification = FLIP_FLOP
                reg.clock, reg.reset = signals.edges.get(reg.name, (None, None))
            elif reg.name in signals.latch:
                reg.classification = LATCH
            else:
                # Declared but never assigned in a procedural block
                reg.classification = FLIP_FLOP

    def classify_module(self, module_node: TreeNode, registers: Iterable[CandidateRegister]) -> BlockSignals:
        """Scan the ``always`` blocks of ``module_node`` and classify ``registers``."""
        signals = self.scan(find_all_by_tag(module_node, ALWAYS_STATEMENT))
        self.classify(registers, signals)
        return signals
