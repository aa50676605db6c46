"""Register analysis of files and directory trees.

:class:`RegisterAnalyzer` drives the whole pipeline for one file:

1. ask the configured tree source for the syntax-tree dump;
2. rebuild the tree (:mod:`svreg.tree_dump`);
3. extract modules and candidate registers (:mod:`svreg.extractor`);
4. classify the candidates of each module from its ``always`` blocks
   (:mod:`svreg.classifier`).

For a directory it discovers source files depth-first, analyses each
file on its own and merges the per-file results with
:func:`svreg.aggregator.merge_results`.  A file that cannot be analysed
(tool missing or failing, unreadable source, unusable dump) is
recorded as a :class:`svreg.model.FileFailure` and the batch carries
on.

Example usage::

    from svreg import RegisterAnalyzer

    analyzer = RegisterAnalyzer()
    result = analyzer.analyze_path("rtl/", recursive=True)
    print(result.total_registers, result.total_bits, result.by_type)
"""

from __future__ import annotations

import fnmatch
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Union

from .aggregator import filter_module, merge_results
from .cache import ResultCache
from .classifier import ProceduralBlockClassifier
from .config import AnalyzerConfig
from .errors import ParseFailure, SvregError, describe_tool_error, extract_warnings
from .extractor import DeclarationExtractor
from .model import AnalysisResult, FileFailure
from .sources import TreeSource, tree_source_registry
from .tree_dump import TreeDumpParser

logger = logging.getLogger(__name__)


def analyze_dump(dump: str, source: Union[bytes, str], file: str) -> AnalysisResult:
    """Analyse an already produced tree dump of ``file``.

    This is the pure core of the analysis; it runs no external tool.
    ``source`` should be the raw bytes of the file, since the dump
    refers to byte offsets.

    Raises:
        ParseFailure: If ``dump`` contains no tree.
    """
    tree = TreeDumpParser().parse_text(dump)
    classifier = ProceduralBlockClassifier()
    result = AnalysisResult()
    for extraction in DeclarationExtractor().extract(tree, source, file):
        classifier.classify_module(extraction.node, extraction.registers)
        result.registers.extend(extraction.registers)
        result.modules.append(extraction.summary)
    return result


class RegisterAnalyzer:
    """Analyse files for flip-flops, latches and their bit widths."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        source: Optional[TreeSource] = None,
        source_name: str = "verible",
        cache: Optional[ResultCache] = None,
    ) -> None:
        self.config = config or AnalyzerConfig()
        self.source = source or tree_source_registry.create(source_name, config=self.config)
        if cache is None and self.config.cache_enabled:
            cache = ResultCache(max_size=self.config.cache_size, ttl=self.config.cache_ttl)
        self.cache = cache

    # ------------------------------------------------------------------
    # File discovery

    def discover_files(self, root: str, pattern: Optional[str] = None) -> List[str]:
        """Return the source files under ``root``, depth-first.

        Entries of each directory are visited in sorted order so the
        result is stable across runs.  ``pattern`` is an optional glob
        matched against file names in addition to the extension check.
        """
        extensions = tuple(self.config.extensions)
        files: List[str] = []

        def walk(directory: str) -> None:
            try:
                entries = sorted(os.scandir(directory), key=lambda e: e.name)
            except OSError as exc:
                logger.warning("Cannot read directory %s: %s", directory, exc)
                return
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    walk(entry.path)
                elif entry.is_file() and entry.name.endswith(extensions):
                    if pattern and not fnmatch.fnmatch(entry.name, pattern):
                        continue
                    files.append(entry.path)

        walk(root)
        return files

    # ------------------------------------------------------------------
    # Analysis

    def analyze_path(
        self,
        path: str,
        recursive: bool = False,
        pattern: Optional[str] = None,
        module: Optional[str] = None,
        jobs: Optional[int] = None,
    ) -> AnalysisResult:
        """Analyse a file, or every source file below a directory.

        Args:
            path: File or directory to analyse.
            recursive: Walk ``path`` when it is a directory.  Without
                it a directory path is analysed as a single file, which
                is reported as a failure.
            pattern: Glob restricting which file names are analysed.
            module: Keep only this module's registers and summary.
            jobs: Number of files whose tree is produced concurrently;
                defaults to the configured value.
        """
        if recursive and os.path.isdir(path):
            files = self.discover_files(path, pattern)
            logger.info("Analysing %d file(s) under %s", len(files), path)
        else:
            files = [path]
        result = self.analyze_files(files, jobs=jobs)
        if module is not None:
            result = filter_module(result, module)
        return result

    def analyze_files(self, files: Iterable[str], jobs: Optional[int] = None) -> AnalysisResult:
        """Analyse ``files`` independently and merge the results in order."""
        files = list(files)
        workers = max(1, jobs if jobs is not None else self.config.jobs)
        if workers == 1 or len(files) < 2:
            results = [self.analyze_file(f) for f in files]
        else:
            # map() yields in input order, so the merge stays deterministic
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(self.analyze_file, files))
        return merge_results(results)

    def analyze_file(self, path: str) -> AnalysisResult:
        """Analyse one file; failures are recorded, never raised."""
        key = None
        if self.cache is not None:
            key = ResultCache.generate_key("analyze", {"file": os.path.abspath(path), "source": self.source.name})
            cached = self.cache.get(key, path)
            if cached is not None:
                return cached

        try:
            result = self._analyze_file(path)
        except (SvregError, OSError) as exc:
            logger.warning("Failed to analyse %s: %s", path, exc)
            return AnalysisResult(failures=[FileFailure(file=path, reason=str(exc))])
        except Exception as exc:
            # A broken tree source must not take the rest of the batch down
            logger.exception("Unexpected error while analysing %s", path)
            return AnalysisResult(failures=[FileFailure(file=path, reason=f"{type(exc).__name__}: {exc}")])

        if key is not None:
            self.cache.set(key, result, path)
        return result

    def _analyze_file(self, path: str) -> AnalysisResult:
        with open(path, "rb") as fh:
            source = fh.read()

        output = self.source.print_tree(path)
        for warning in extract_warnings(output.stderr):
            logger.warning("%s: %s", path, warning)
        if not output.ok:
            diagnostic = describe_tool_error(output.stderr, self.source.name)
            reason = diagnostic.message if diagnostic else output.stderr.strip()
            raise ParseFailure(f"{self.source.name} exited with {output.exit_code}: {reason}")

        return analyze_dump(output.stdout, source, path)
