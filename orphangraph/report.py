"""Structured report artifact consumed by printers and downstream tooling."""

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .graph import ReferenceGraph
from .models import AnalysisIssue, AnalysisResult, FileCheck, OrphanCandidate, SafetyLevel

SAFE_LEVELS = (SafetyLevel.ABSOLUTELY_SAFE, SafetyLevel.VERY_SAFE)


def candidate_record(
    candidate: OrphanCandidate,
    graph: ReferenceGraph,
    would_also_orphan: Iterable[Path] = (),
) -> Dict[str, Any]:
    return {
        "path": graph.relative(candidate.path),
        "safetyLevel": candidate.level.name,
        "type": candidate.source.kind.value,
        "size": candidate.source.size,
        "reasons": list(candidate.reasons),
        "wouldAlsoOrphan": [graph.relative(p) for p in would_also_orphan],
    }


def issue_record(issue: AnalysisIssue, graph: ReferenceGraph) -> Dict[str, str]:
    return {"kind": issue.kind, "path": graph.relative(issue.path), "message": issue.message}


def level_counts(candidates: Iterable[OrphanCandidate]) -> Dict[str, int]:
    counts = Counter(c.level for c in candidates)
    return {level.name: counts.get(level, 0) for level in SafetyLevel}


def build_report(result: AnalysisResult, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
    """Turn an :class:`AnalysisResult` into a JSON-serializable dict."""
    graph = result.graph
    safe = [c for c in result.candidates if c.level in SAFE_LEVELS]
    return {
        "timestamp": (timestamp or datetime.now()).isoformat(),
        "analysis": "orphan-analysis",
        "root": str(result.root),
        "totalFiles": len(graph),
        "totalOrphans": len(result.candidates),
        "safeToDelete": len(safe),
        "levels": level_counts(result.candidates),
        "orphans": [
            candidate_record(c, graph, result.cascades.get(c.path, ()))
            for c in result.candidates
        ],
        "issues": [issue_record(i, graph) for i in result.issues],
    }


def build_check_report(
    checks: List[FileCheck],
    graph: ReferenceGraph,
    issues: Iterable[AnalysisIssue] = (),
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Report for specific-files mode."""
    files: List[Dict[str, Any]] = []
    for check in checks:
        if check.candidate is not None:
            record = candidate_record(check.candidate, graph, check.would_also_orphan)
        else:
            record = {"path": graph.relative(check.path), "safetyLevel": None}
        record["found"] = check.found
        record["importers"] = [graph.relative(p) for p in check.importers]
        record["mentions"] = [graph.relative(p) for p in check.mentions]
        files.append(record)

    candidates = [c.candidate for c in checks if c.candidate is not None]
    return {
        "timestamp": (timestamp or datetime.now()).isoformat(),
        "analysis": "specific-files",
        "root": str(graph.root),
        "totalAnalyzed": len(checks),
        "safeToDelete": sum(1 for c in candidates if c.level in SAFE_LEVELS),
        "levels": level_counts(candidates),
        "files": files,
        "issues": [issue_record(i, graph) for i in issues],
    }


def write_report(report: Dict[str, Any], output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(report, indent=2), encoding="utf-8")
    return output
