"""Sources of parse-tree dumps.

The analysis never parses Verilog itself.  It asks a *tree source* for
the text dump of a file's syntax tree and rebuilds the tree from that
text (see :mod:`svreg.tree_dump`).  A tree source only has to provide
:meth:`TreeSource.print_tree`, returning the exit status and captured
output of the run.

Two sources are registered in :data:`tree_source_registry`:

* ``verible`` (:class:`VeribleTreeSource`) runs
  ``verible-verilog-syntax --printtree``.
* ``slang`` (:class:`svreg.slang_backend.SlangTreeSource`) parses the
  file with ``pyslang`` and prints the same dump format.
"""

from __future__ import annotations

import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Optional

from .config import AnalyzerConfig
from .errors import ToolNotFoundError
from .executor import CommandExecutor, ToolOutput
from .registry import Registry

logger = logging.getLogger(__name__)

tree_source_registry = Registry("tree source")

_VERSION_RE = re.compile(r"v[\d.]+-\d+-g[a-f0-9]+")


class TreeSource(ABC):
    """Produce the text dump of a file's syntax tree."""

    name = "tree source"

    def __init__(self, config: Optional[AnalyzerConfig] = None) -> None:
        self.config = config or AnalyzerConfig()

    @abstractmethod
    def print_tree(self, path: str) -> ToolOutput:
        """Return the tree dump of ``path`` in :attr:`ToolOutput.stdout`."""
        raise NotImplementedError

    def version(self) -> str:
        return "unknown"


@tree_source_registry.register("verible")
class VeribleTreeSource(TreeSource):
    """Run ``verible-verilog-syntax --printtree`` on a file."""

    name = "verible-verilog-syntax"

    def __init__(self, config: Optional[AnalyzerConfig] = None, executor: Optional[CommandExecutor] = None) -> None:
        super().__init__(config)
        self.executor = executor or CommandExecutor(timeout=self.config.timeout)
        self._binary: Optional[str] = None

    def binary(self) -> str:
        """Return the path of the syntax tool, locating it on first use.

        Raises:
            ToolNotFoundError: If the tool is not installed.
        """
        if self._binary is not None:
            return self._binary

        configured = os.path.expanduser(self.config.syntax_binary)
        if os.sep in configured:
            if os.path.isfile(configured) and os.access(configured, os.X_OK):
                self._binary = configured
                return configured
            raise ToolNotFoundError(f"Configured syntax tool is not executable: {configured}")

        found = self.executor.find_command(configured, self.config.search_paths)
        if found is None:
            raise ToolNotFoundError(
                f"{configured} not found on PATH or in search paths. "
                "Install Verible or set SVREG_VERIBLE_PATH."
            )
        logger.info("Using %s", found)
        self._binary = found
        return found

    def print_tree(self, path: str) -> ToolOutput:
        return self.executor.execute(self.binary(), ["--printtree", path], timeout=self.config.timeout)

    def version(self) -> str:
        """Return the Verible version string, or ``"unknown"``."""
        output = self.executor.execute(self.binary(), ["--version"])
        m = _VERSION_RE.search(output.stdout)
        if m:
            return m.group(0)
        first = output.stdout.strip().splitlines()
        return first[0] if first else "unknown"
