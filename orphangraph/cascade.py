"""Would-also-orphan analysis for a chosen set of deletions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Set, Tuple

from .graph import ReferenceGraph
from .models import OrphanCandidate

logger = logging.getLogger(__name__)


def would_also_orphan(candidate: OrphanCandidate, graph: ReferenceGraph) -> Tuple[Path, ...]:
    """Files that deleting *candidate* would newly orphan (one level deep).

    A dependency qualifies when it has exactly one inbound edge and that
    edge comes from *candidate*. Deeper chains need :func:`simulate_removal`.
    """
    orphaned = [
        dep
        for dep in sorted(candidate.imports)
        if dep in graph and graph.importers_of(dep) == frozenset({candidate.path})
    ]
    return tuple(orphaned)


def cascade_map(candidates: Iterable[OrphanCandidate], graph: ReferenceGraph) -> Dict[Path, Tuple[Path, ...]]:
    """One-level lookahead for each of *candidates*; empty results omitted."""
    result: Dict[Path, Tuple[Path, ...]] = {}
    for candidate in candidates:
        orphaned = would_also_orphan(candidate, graph)
        if orphaned:
            result[candidate.path] = orphaned
    return result


def simulate_removal(graph: ReferenceGraph, removals: Iterable[Path]) -> List[List[Path]]:
    """Transitively remove *removals* and report what becomes orphaned.

    Runs in explicit rounds against a private copy of the inbound sets: each
    round deletes the current batch, recomputes inbound counts, and the files
    whose last importer just disappeared form the next batch. Files that
    were already orphans before the simulation are never reported.

    Returns one list per round, in the order files became orphaned.
    """
    incoming: Dict[Path, Set[Path]] = {path: set(graph.importers_of(path)) for path in graph.paths}
    removed: Set[Path] = set()
    batch = sorted({Path(p) for p in removals if Path(p) in graph})
    rounds: List[List[Path]] = []

    while batch:
        removed.update(batch)
        newly_orphaned: Set[Path] = set()
        for path in batch:
            for dep in graph.imports_of(path):
                if dep in removed:
                    continue
                refs = incoming[dep]
                if not refs:
                    continue
                refs.discard(path)
                if not refs:
                    newly_orphaned.add(dep)
        batch = sorted(newly_orphaned)
        if batch:
            logger.debug("Cascade round %d orphans %d files", len(rounds) + 1, len(batch))
            rounds.append(batch)

    return rounds
