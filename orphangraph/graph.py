"""Reference graph: who imports whom across the discovered source files."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from .classifier import classify_kind
from .config import NEAR_EMPTY_BYTES
from .models import AnalysisIssue, ImportEdge, SourceFile
from .parser import ImportExtractor, RegexImportExtractor, scan_content
from .resolver import ModuleResolver

logger = logging.getLogger(__name__)


class ReferenceGraph:
    """Directed import graph over one analysis run's files.

    Every discovered, readable file is a node; edges only ever join two
    nodes. External or unresolved specifiers are not represented.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._files: Dict[Path, SourceFile] = {}
        self._outgoing: Dict[Path, Set[Path]] = {}
        self._incoming: Dict[Path, Set[Path]] = {}

    # ------------------------------------------------------------------
    # Construction (single owner)
    # ------------------------------------------------------------------

    def add_file(self, source: SourceFile) -> None:
        self._files[source.path] = source
        self._outgoing.setdefault(source.path, set())
        self._incoming.setdefault(source.path, set())

    def add_edge(self, src: Path, dst: Path) -> None:
        if src not in self._files or dst not in self._files:
            return
        self._outgoing[src].add(dst)
        self._incoming[dst].add(src)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self._files.values())

    @property
    def paths(self) -> List[Path]:
        return list(self._files)

    def file(self, path: Path) -> SourceFile:
        return self._files[path]

    def imports_of(self, path: Path) -> FrozenSet[Path]:
        return frozenset(self._outgoing.get(path, ()))

    def importers_of(self, path: Path) -> FrozenSet[Path]:
        return frozenset(self._incoming.get(path, ()))

    def inbound_count(self, path: Path) -> int:
        return len(self._incoming.get(path, ()))

    def edges(self) -> List[ImportEdge]:
        return [
            ImportEdge(src=src, dst=dst)
            for src, targets in self._outgoing.items()
            for dst in sorted(targets)
        ]

    def orphan_paths(self) -> List[Path]:
        """Files with an empty incoming set, in discovery order."""
        return [path for path in self._files if not self._incoming[path]]

    def relative(self, path: Path) -> str:
        try:
            return Path(path).relative_to(self.root).as_posix()
        except ValueError:
            return Path(path).as_posix()


# ===================================================================
# Builder
# ===================================================================

@dataclass
class _FileResult:
    path: Path
    source: Optional[SourceFile] = None
    targets: FrozenSet[Path] = frozenset()
    issue: Optional[AnalysisIssue] = None


def load_source_file(path: Path, root: Path, near_empty_bytes: int = NEAR_EMPTY_BYTES) -> SourceFile:
    """Read *path* and build its immutable record. Raises ``OSError``."""
    raw = path.read_bytes()
    text = raw.decode("utf-8", errors="replace")
    facts = scan_content(text)
    return SourceFile(
        path=path,
        text=text,
        size=len(raw),
        kind=classify_kind(path, root),
        has_default_export=facts.has_default_export,
        has_named_exports=facts.has_named_exports,
        has_todo=facts.has_todo,
        is_empty=not text.strip() or len(raw) < near_empty_bytes,
    )


def _process_file(
    path: Path,
    root: Path,
    extractor: ImportExtractor,
    resolver: ModuleResolver,
    near_empty_bytes: int,
) -> _FileResult:
    try:
        source = load_source_file(path, root, near_empty_bytes)
    except OSError as exc:
        return _FileResult(path=path, issue=AnalysisIssue("file-read", path, str(exc)))

    targets: Set[Path] = set()
    for specifier in extractor.extract(source.text):
        resolved = resolver.resolve(specifier, path)
        if resolved is not None and resolved != path:
            targets.add(resolved)
    return _FileResult(path=path, source=source, targets=frozenset(targets))


def build_reference_graph(
    files: Iterable[Path],
    root: Path,
    extensions: Iterable[str],
    alias_prefixes: Optional[Mapping[str, str]] = None,
    near_empty_bytes: int = NEAR_EMPTY_BYTES,
    workers: int = 1,
    extractor: Optional[ImportExtractor] = None,
) -> Tuple[ReferenceGraph, List[AnalysisIssue]]:
    """Read, extract and resolve every file, then merge into one graph.

    Per-file work is independent and runs on a thread pool when
    ``workers > 1``. Workers only return values; this function is the sole
    writer to the graph, merging results in discovery order.
    """
    file_list = list(files)
    root = Path(root)
    resolver = ModuleResolver(root, file_list, extensions, alias_prefixes)
    extractor = extractor or RegexImportExtractor(alias_prefixes)

    def work(path: Path) -> _FileResult:
        return _process_file(path, root, extractor, resolver, near_empty_bytes)

    if workers > 1 and len(file_list) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(work, file_list))
    else:
        results = [work(path) for path in file_list]

    graph = ReferenceGraph(root)
    issues: List[AnalysisIssue] = []
    for result in results:
        if result.source is None:
            logger.warning("Skipping unreadable file %s: %s", result.path, result.issue.message)
            issues.append(result.issue)
            continue
        graph.add_file(result.source)

    # Edges are added after all nodes so targets that failed to load are dropped.
    edge_count = 0
    for result in results:
        if result.source is None:
            continue
        for target in result.targets:
            if target in graph:
                graph.add_edge(result.path, target)
                edge_count += 1

    logger.info("Built reference graph: %d files, %d edges", len(graph), edge_count)
    return graph, issues
