"""File-kind detection and the deletion-safety rule cascade for orphans."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .config import DISPOSABLE_MARKERS
from .models import FileKind, OrphanCandidate, SafetyLevel, SourceFile

if TYPE_CHECKING:
    from .graph import ReferenceGraph

_BACKUP_RE = re.compile(r"\.(old|backup|bak|orig)\.", re.IGNORECASE)
_TEST_NAME_RE = re.compile(r"\.(test|spec)\.", re.IGNORECASE)
_TEST_DIRS = {"test", "tests", "__tests__", "__mocks__"}
_TOKEN_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")


def backup_marker(name: str) -> Optional[str]:
    """Return the backup suffix carried by *name* (``.old``, ...), if any."""
    match = _BACKUP_RE.search(name)
    return f".{match.group(1).lower()}" if match else None


def name_tokens(name: str) -> List[str]:
    """Split a file name into lower-case words on separators and camelCase."""
    return [tok.lower() for tok in _TOKEN_RE.findall(name)]


def classify_kind(path: Path, root: Path) -> FileKind:
    """Derive the :class:`FileKind` from filename and path conventions."""
    name = path.name
    try:
        parts = path.relative_to(root).parts[:-1]
    except ValueError:
        parts = path.parts[:-1]
    stem = name.split(".", 1)[0]

    if backup_marker(name):
        return FileKind.BACKUP
    if _TEST_NAME_RE.search(name) or name.startswith("test-") or _TEST_DIRS.intersection(parts):
        return FileKind.TEST
    if stem == "route" and "api" in parts:
        return FileKind.API_ROUTE
    if stem in ("page", "layout"):
        return FileKind.PAGE
    if name.endswith((".tsx", ".jsx")):
        return FileKind.COMPONENT
    if "types" in parts or name.endswith(".d.ts"):
        return FileKind.TYPES
    return FileKind.MODULE


# ===================================================================
# Safety rule cascade
# ===================================================================

Predicate = Callable[[SourceFile], bool]


@dataclass(frozen=True)
class SafetyRule:
    level: SafetyLevel
    predicate: Predicate
    reason: Callable[[SourceFile], str]


class SafetyClassifier:
    """Ordered, first-match-wins rules assigning a :class:`SafetyLevel`.

    Rules are consulted from most to least confident; the first rule whose
    predicate holds decides the level and contributes the primary reason.
    Files no rule matches fall through to ``KEEP``.
    """

    def __init__(self, disposable_markers: Iterable[str] = DISPOSABLE_MARKERS) -> None:
        self.disposable_markers = frozenset(m.lower() for m in disposable_markers)
        self.rules: Tuple[SafetyRule, ...] = self._build_rules()

    def _disposable_word(self, source: SourceFile) -> Optional[str]:
        for token in name_tokens(source.name):
            if token in self.disposable_markers:
                return token
        return None

    def _build_rules(self) -> Tuple[SafetyRule, ...]:
        L = SafetyLevel
        K = FileKind
        return (
            SafetyRule(
                L.ABSOLUTELY_SAFE,
                lambda s: backup_marker(s.name) is not None,
                lambda s: f"Backup file ({backup_marker(s.name)} suffix)",
            ),
            SafetyRule(
                L.ABSOLUTELY_SAFE,
                lambda s: s.is_empty,
                lambda s: f"Empty or nearly empty file ({s.size} bytes)",
            ),
            SafetyRule(
                L.VERY_SAFE,
                lambda s: s.kind is K.TEST and not s.has_default_export,
                lambda s: "Test file with no default export",
            ),
            SafetyRule(
                L.VERY_SAFE,
                lambda s: s.kind is K.TEST,
                lambda s: "Test file",
            ),
            SafetyRule(
                L.VERY_SAFE,
                lambda s: self._disposable_word(s) is not None,
                lambda s: f"Filename marks it as disposable ('{self._disposable_word(s)}')",
            ),
            SafetyRule(
                L.PROBABLY_SAFE,
                lambda s: s.kind is K.MODULE and not s.has_default_export and not s.has_named_exports,
                lambda s: "Module with no exports",
            ),
            SafetyRule(
                L.PROBABLY_SAFE,
                lambda s: s.has_todo and not s.has_default_export,
                lambda s: "Has TODO/FIXME markers, might be incomplete",
            ),
            SafetyRule(
                L.RISKY,
                lambda s: s.kind is K.API_ROUTE,
                lambda s: "API route, might be called externally",
            ),
            SafetyRule(
                L.RISKY,
                lambda s: s.kind is K.PAGE,
                lambda s: "Page or layout, reachable through routing",
            ),
            SafetyRule(
                L.RISKY,
                lambda s: s.kind is K.COMPONENT and s.has_default_export,
                lambda s: "Component with default export, might be loaded dynamically",
            ),
            SafetyRule(
                L.RISKY,
                lambda s: s.kind is K.TYPES,
                lambda s: "Type definitions, might be used in ways not detectable",
            ),
        )

    def classify(self, source: SourceFile, imports: FrozenSet[Path] = frozenset()) -> OrphanCandidate:
        level = SafetyLevel.KEEP
        reasons: List[str] = []
        for rule in self.rules:
            if rule.predicate(source):
                level = rule.level
                reasons.append(rule.reason(source))
                break
        else:
            reasons.append("Unclear usage pattern, keeping for safety")

        if source.has_default_export:
            reasons.append("Has default export")
        if source.has_named_exports:
            reasons.append("Has named exports")
        if imports:
            count = len(imports)
            reasons.append(f"Imports {count} other file{'s' if count != 1 else ''}")

        return OrphanCandidate(source=source, level=level, reasons=tuple(reasons), imports=imports)


def rank_candidates(candidates: Sequence[OrphanCandidate]) -> List[OrphanCandidate]:
    """Most deletable first; ties keep their incoming order."""
    return sorted(candidates, key=lambda c: c.level.value, reverse=True)


def classify_orphans(
    graph: ReferenceGraph,
    classifier: Optional[SafetyClassifier] = None,
) -> List[OrphanCandidate]:
    """Classify every file with no inbound edges, ranked by safety."""
    classifier = classifier or SafetyClassifier()
    candidates = [
        classifier.classify(graph.file(path), graph.imports_of(path))
        for path in graph.orphan_paths()
    ]
    return rank_candidates(candidates)
