"""Discovery of modules and storage-element declarations.

:class:`DeclarationExtractor` walks a tree produced by
:mod:`svreg.tree_dump` and, for every module declaration, produces a
:class:`svreg.model.ModuleSummary` and the list of
:class:`svreg.model.CandidateRegister` objects declared in it.  Two
places declare storage:

* data declarations in the module body (``reg [7:0] q;``,
  ``logic valid;``); ``wire`` declarations are ignored;
* ANSI port declarations in the module header, but only for outputs
  of type ``reg`` or ``logic`` (``output reg [3:0] state``).

Every candidate starts out as ``potential_register``; working out
whether it is a flip-flop or a latch is left to
:mod:`svreg.classifier`.

The extractor relies on the node tags printed by Verible.  Bit widths
are only resolved for literal ranges: ``[7:0]`` is 8 bits, while a
range that does not contain two plain numbers falls back to 1.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .errors import UnresolvedModuleName, UnresolvedWidth
from .model import CandidateRegister, ModuleSummary, TreeLeaf, TreeNode
from .query import collect_leaves, find_all_by_tag, find_first_by_tag

logger = logging.getLogger(__name__)

MODULE_DECLARATION = "kModuleDeclaration"
MODULE_HEADER = "kModuleHeader"
DATA_DECLARATION = "kDataDeclaration"
PORT_DECLARATION = "kPortDeclaration"
PACKED_DIMENSIONS = "kPackedDimensions"
REGISTER_VARIABLE = "kRegisterVariable"
IDENTIFIER = "SymbolIdentifier"
NUMERIC_TAG_PREFIX = "TK_"

STORAGE_KINDS = ("wire", "reg", "logic")
REGISTER_KINDS = ("reg", "logic")
PORT_DIRECTIONS = ("input", "output", "inout")


@dataclass
class ModuleExtraction:
    """The declarations found in one module, plus the module's subtree."""

    summary: ModuleSummary
    node: TreeNode
    registers: List[CandidateRegister] = field(default_factory=list)


def line_number_at(source: bytes, offset: int) -> int:
    """Return the 1-based line holding byte ``offset`` of ``source``."""
    return source.count(b"\n", 0, max(offset, 0)) + 1


def resolve_width(dimensions: TreeNode) -> int:
    """Compute the bit width of a packed dimension subtree.

    The first two numeric literals are read as MSB and LSB.

    Raises:
        UnresolvedWidth: If fewer than two literals are present or one
            of them is not a plain integer.
    """
    numbers = [
        leaf for leaf in collect_leaves(dimensions)
        if leaf.tag.startswith(NUMERIC_TAG_PREFIX)
    ]
    if len(numbers) < 2:
        raise UnresolvedWidth(f"expected two numeric literals, found {len(numbers)}")
    try:
        msb = int(numbers[0].text)
        lsb = int(numbers[1].text)
    except ValueError as exc:
        raise UnresolvedWidth(str(exc)) from exc
    return abs(msb - lsb) + 1


def declared_width(declaration: TreeNode) -> int:
    """Width of a declaration, 1 when it has no usable packed dimension."""
    dimensions = find_first_by_tag(declaration, PACKED_DIMENSIONS)
    if dimensions is None:
        return 1
    try:
        return resolve_width(dimensions)
    except UnresolvedWidth as exc:
        logger.debug("Defaulting width to 1: %s", exc)
        return 1


class DeclarationExtractor:
    """Extract modules and candidate registers from a parse tree."""

    def extract(self, tree: TreeNode, source: Union[bytes, str], file: str) -> List[ModuleExtraction]:
        """Return one :class:`ModuleExtraction` per named module in ``tree``.

        Args:
            tree: Root of the reconstructed tree for ``file``.
            source: Raw contents of ``file``; only used to turn byte
                offsets into line numbers.  Text is encoded as UTF-8.
            file: Path reported in the results.
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        extractions: List[ModuleExtraction] = []
        for module_node in find_all_by_tag(tree, MODULE_DECLARATION):
            try:
                extractions.append(self.extract_module(module_node, source, file))
            except UnresolvedModuleName as exc:
                logger.debug("Skipping module in %s: %s", file, exc)
        return extractions

    def extract_module(self, module_node: TreeNode, source: bytes, file: str) -> ModuleExtraction:
        """Extract one module.

        Raises:
            UnresolvedModuleName: If the module header has no name.
        """
        name = self.module_name(module_node)
        leaves = collect_leaves(module_node)
        line = line_number_at(source, leaves[0].start) if leaves else 1

        registers: List[CandidateRegister] = []
        for decl in find_all_by_tag(module_node, DATA_DECLARATION):
            registers.extend(self._from_data_declaration(decl, source, name, file))

        header = find_first_by_tag(module_node, MODULE_HEADER)
        if header is not None:
            for port in find_all_by_tag(header, PORT_DECLARATION):
                registers.extend(self._from_port_declaration(port, source, name, file))

        summary = ModuleSummary(name=name, file=file, line=line, register_count=len(registers))
        return ModuleExtraction(summary=summary, node=module_node, registers=registers)

    def module_name(self, module_node: TreeNode) -> str:
        """Return the declared name of ``module_node``.

        Raises:
            UnresolvedModuleName: If no identifier leaf is found.
        """
        header = find_first_by_tag(module_node, MODULE_HEADER)
        if header is not None:
            for leaf in collect_leaves(header):
                if leaf.tag == IDENTIFIER and leaf.text != "module":
                    return leaf.text
        raise UnresolvedModuleName("module header has no identifier")

    # ------------------------------------------------------------------
    # Declaration helpers

    def _from_data_declaration(
        self, decl: TreeNode, source: bytes, module: str, file: str
    ) -> List[CandidateRegister]:
        kind = _first_keyword(collect_leaves(decl), STORAGE_KINDS) or "wire"
        if kind not in REGISTER_KINDS:
            return []

        width = declared_width(decl)
        names: List[TreeLeaf] = []
        for variable in find_all_by_tag(decl, REGISTER_VARIABLE):
            leaf = _first_identifier(collect_leaves(variable))
            if leaf is not None:
                names.append(leaf)
        return self._candidates(names, width, source, module, file)

    def _from_port_declaration(
        self, port: TreeNode, source: bytes, module: str, file: str
    ) -> List[CandidateRegister]:
        leaves = collect_leaves(port)
        is_output = False
        kind = "wire"
        for leaf in leaves:
            if leaf.text == "output":
                is_output = True
            elif leaf.text in STORAGE_KINDS:
                kind = leaf.text
        if not is_output or kind not in REGISTER_KINDS:
            return []

        width = declared_width(port)
        excluded = PORT_DIRECTIONS + STORAGE_KINDS
        names = [
            leaf for leaf in leaves
            if leaf.tag == IDENTIFIER and leaf.text not in excluded
        ]
        return self._candidates(names, width, source, module, file)

    def _candidates(
        self,
        names: Iterable[TreeLeaf],
        width: int,
        source: bytes,
        module: str,
        file: str,
    ) -> List[CandidateRegister]:
        return [
            CandidateRegister(
                name=leaf.text,
                width=width,
                line=line_number_at(source, leaf.start),
                module=module,
                file=file,
            )
            for leaf in names
        ]


def _first_keyword(leaves: Sequence[TreeLeaf], keywords: Tuple[str, ...]) -> Optional[str]:
    for leaf in leaves:
        if leaf.text in keywords:
            return leaf.text
    return None


def _first_identifier(leaves: Iterable[TreeLeaf]) -> Optional[TreeLeaf]:
    for leaf in leaves:
        if leaf.tag == IDENTIFIER:
            return leaf
    return None
