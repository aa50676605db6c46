"""Data model for register analysis.

Two families of classes live here.  The first describes the parse
tree rebuilt from the external tool's text dump: :class:`TreeNode`
(an interior node carrying a tag and ordered children) and
:class:`TreeLeaf` (a token with its source text and byte span).  The
tree has no parent pointers and no sharing; one tree is built per
analysed file and thrown away once extraction finishes.

The second family describes what the analysis finds:
:class:`CandidateRegister` for each storage element,
:class:`ModuleSummary` for each module and :class:`AnalysisResult` for
the collection of both.  The per-type and per-module groupings of an
:class:`AnalysisResult` are computed from its register list every time
they are read, so they can never drift from it.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

FLIP_FLOP = "flip_flop"
LATCH = "latch"
POTENTIAL_REGISTER = "potential_register"

CLASSIFICATIONS = (FLIP_FLOP, LATCH, POTENTIAL_REGISTER)


@dataclass(frozen=True)
class TreeLeaf:
    """A token of the parse tree.

    ``start`` and ``end`` are byte offsets into the analysed source
    file, exactly as printed by the syntax tool.
    """

    tag: str
    text: str
    start: int
    end: int


@dataclass
class TreeNode:
    """An interior node of the parse tree."""

    tag: str
    children: List[Union["TreeNode", TreeLeaf]] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.tag} ({len(self.children)} children)"


TreeElement = Union[TreeNode, TreeLeaf]


@dataclass
class CandidateRegister:
    """A declared storage element and the role it plays.

    Every candidate is created as ``potential_register`` and receives
    its final classification once the module's procedural blocks have
    been scanned.  ``clock`` and ``reset`` are only known for
    flip-flops driven from an edge-triggered block.
    """

    name: str
    width: int
    line: int
    module: str
    file: str
    classification: str = POTENTIAL_REGISTER
    clock: Optional[str] = None
    reset: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "declaredWidth": self.width,
            "declarationLine": self.line,
            "classification": self.classification,
            "module": self.module,
            "file": self.file,
        }
        if self.clock is not None:
            data["clock"] = self.clock
        if self.reset is not None:
            data["reset"] = self.reset
        return data

    def __str__(self) -> str:
        return f"{self.classification} {self.module}.{self.name} [{self.width}]"


@dataclass
class ModuleSummary:
    """A module discovered in a file."""

    name: str
    file: str
    line: int
    register_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "file": self.file,
            "declarationLine": self.line,
            "registerCount": self.register_count,
        }

    def __str__(self) -> str:
        return f"module {self.name}"


@dataclass
class FileFailure:
    """A file whose analysis could not be completed."""

    file: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "reason": self.reason}


@dataclass
class AnalysisResult:
    """Registers, modules and failures for one file or many."""

    registers: List[CandidateRegister] = field(default_factory=list)
    modules: List[ModuleSummary] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)

    @property
    def total_registers(self) -> int:
        return len(self.registers)

    @property
    def total_bits(self) -> int:
        return sum(reg.width for reg in self.registers)

    @property
    def by_type(self) -> Dict[str, int]:
        """Number of registers per classification.

        Known classifications come first in :data:`CLASSIFICATIONS` order;
        classifications with no register are left out.
        """
        counts = Counter(reg.classification for reg in self.registers)
        ordered = {kind: counts.pop(kind) for kind in CLASSIFICATIONS if kind in counts}
        ordered.update(counts)
        return ordered

    @property
    def by_module(self) -> Dict[str, List[CandidateRegister]]:
        """Registers grouped by owning module, in declaration order."""
        groups: Dict[str, List[CandidateRegister]] = {}
        for reg in self.registers:
            groups.setdefault(reg.module, []).append(reg)
        return groups

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain record suitable for ``json.dumps``."""
        return {
            "registers": [reg.to_dict() for reg in self.registers],
            "totalRegisters": self.total_registers,
            "byType": self.by_type,
            "byModule": {
                name: [reg.to_dict() for reg in regs]
                for name, regs in self.by_module.items()
            },
            "totalBits": self.total_bits,
            "modules": [mod.to_dict() for mod in self.modules],
            "failures": [failure.to_dict() for failure in self.failures],
        }
