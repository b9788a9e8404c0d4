"""Core data models shared by the discovery, graph, and classification stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional, Tuple

if TYPE_CHECKING:
    from .graph import ReferenceGraph


class FileKind(str, Enum):
    BACKUP = "backup"
    TEST = "test"
    API_ROUTE = "api-route"
    PAGE = "page"
    COMPONENT = "component"
    TYPES = "types"
    MODULE = "module"


class SafetyLevel(Enum):
    """Deletion confidence for an orphan candidate; higher value is safer."""

    ABSOLUTELY_SAFE = 5
    VERY_SAFE = 4
    PROBABLY_SAFE = 3
    RISKY = 2
    KEEP = 1

    @classmethod
    def parse(cls, name: str) -> "SafetyLevel":
        return cls[name.strip().upper().replace("-", "_")]


@dataclass(frozen=True)
class SourceFile:
    path: Path
    text: str
    size: int
    kind: FileKind
    has_default_export: bool = False
    has_named_exports: bool = False
    has_todo: bool = False
    is_empty: bool = False

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class ImportEdge:
    src: Path
    dst: Path


@dataclass(frozen=True)
class OrphanCandidate:
    source: SourceFile
    level: SafetyLevel
    reasons: Tuple[str, ...]
    imports: FrozenSet[Path] = frozenset()

    @property
    def path(self) -> Path:
        return self.source.path


@dataclass(frozen=True)
class AnalysisIssue:
    kind: str
    path: Path
    message: str


@dataclass
class AnalysisResult:
    root: Path
    graph: ReferenceGraph
    candidates: List[OrphanCandidate]
    issues: List[AnalysisIssue] = field(default_factory=list)
    cascades: Dict[Path, Tuple[Path, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class FileCheck:
    """Outcome of checking one explicitly named file."""

    path: Path
    found: bool
    candidate: Optional[OrphanCandidate] = None
    importers: Tuple[Path, ...] = ()
    mentions: Tuple[Path, ...] = ()
    would_also_orphan: Tuple[Path, ...] = ()

    @property
    def is_orphan(self) -> bool:
        return self.candidate is not None
