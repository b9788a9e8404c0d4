"""Pipeline orchestrator: discover, build the graph, classify, cascade."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .cascade import cascade_map, simulate_removal, would_also_orphan
from .classifier import SafetyClassifier, classify_orphans
from .config_manager import AnalysisSettings, load_settings
from .crosscheck import find_textual_mentions
from .discovery import discover_files
from .graph import ReferenceGraph, build_reference_graph
from .models import AnalysisIssue, AnalysisResult, FileCheck

logger = logging.getLogger(__name__)


class OrphanAnalyzer:
    """Runs one stateless analysis over a source tree.

    Every call rebuilds discovery and the graph from scratch; nothing is
    cached between runs.
    """

    def __init__(self, root: Path, settings: Optional[AnalysisSettings] = None) -> None:
        root = Path(root).expanduser()
        if not root.exists():
            raise FileNotFoundError(f"Source root does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Source root is not a directory: {root}")
        self.root = root.resolve()
        self.settings = settings or load_settings(self.root)
        self.classifier = SafetyClassifier(self.settings.disposable_markers)

    def build_graph(self) -> Tuple[ReferenceGraph, List[AnalysisIssue]]:
        discovery = discover_files(self.root, self.settings.skip_dirs, self.settings.extensions)
        graph, read_issues = build_reference_graph(
            discovery.files,
            self.root,
            self.settings.extensions,
            alias_prefixes=self.settings.alias_prefixes,
            near_empty_bytes=self.settings.near_empty_bytes,
            workers=self.settings.workers,
        )
        return graph, discovery.issues + read_issues

    def run(self, cascade: bool = True) -> AnalysisResult:
        """Full tree scan: every zero-inbound file becomes a ranked candidate."""
        graph, issues = self.build_graph()
        candidates = classify_orphans(graph, self.classifier)
        result = AnalysisResult(root=self.root, graph=graph, candidates=candidates, issues=issues)
        if cascade:
            result.cascades = cascade_map(candidates, graph)
        logger.info(
            "Analysis of %s: %d files, %d orphan candidates, %d issues",
            self.root, len(graph), len(candidates), len(issues),
        )
        return result

    def check_files(
        self, paths: Iterable[Path]
    ) -> Tuple[ReferenceGraph, List[FileCheck], List[AnalysisIssue]]:
        """Specific-files mode: report only on *paths*, against the full graph.

        Orphans are classified with the same rules as :meth:`run` and get an
        extra note when other files still mention their name textually.
        """
        graph, issues = self.build_graph()
        checks: List[FileCheck] = []
        for raw in paths:
            path = self._absolute(raw)
            if path not in graph:
                logger.warning("%s is not part of the analyzed tree", raw)
                checks.append(FileCheck(path=path, found=False))
                continue

            importers = tuple(sorted(graph.importers_of(path)))
            mentions = tuple(find_textual_mentions(graph, path))
            if importers:
                checks.append(FileCheck(path=path, found=True, importers=importers, mentions=mentions))
                continue

            candidate = self.classifier.classify(graph.file(path), graph.imports_of(path))
            if mentions:
                note = f"Name mentioned in {len(mentions)} other file{'s' if len(mentions) != 1 else ''}"
                candidate = dataclasses.replace(candidate, reasons=candidate.reasons + (note,))
            checks.append(FileCheck(
                path=path,
                found=True,
                candidate=candidate,
                mentions=mentions,
                would_also_orphan=would_also_orphan(candidate, graph),
            ))
        return graph, checks, issues

    def simulate(self, removals: Iterable[Path]) -> Tuple[ReferenceGraph, List[List[Path]]]:
        """Transitive cascade for removing *removals* from a fresh graph."""
        graph, _ = self.build_graph()
        targets = [self._absolute(p) for p in removals]
        missing = [p for p in targets if p not in graph]
        for path in missing:
            logger.warning("%s is not part of the analyzed tree", path)
        return graph, simulate_removal(graph, targets)

    def _absolute(self, path: Path) -> Path:
        path = Path(path).expanduser()
        if not path.is_absolute():
            under_root = self.root / path
            path = under_root if under_root.exists() or not path.exists() else path.absolute()
        return path.resolve() if path.exists() else path
