"""Source-tree walker that yields candidate files for the reference graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Set

from .config import SKIP_DIRS, SOURCE_EXTENSIONS
from .models import AnalysisIssue

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    files: List[Path] = field(default_factory=list)
    issues: List[AnalysisIssue] = field(default_factory=list)


def has_source_extension(path: Path, extensions: Iterable[str]) -> bool:
    """Match on the full suffix so ``foo.d.ts`` counts as ``.ts``."""
    return any(path.name.endswith(ext) for ext in extensions)


def discover_files(
    root: Path,
    skip_dirs: Iterable[str] = SKIP_DIRS,
    extensions: Iterable[str] = SOURCE_EXTENSIONS,
) -> DiscoveryResult:
    """Recursively collect source files under *root*.

    Subtrees whose directory name is in *skip_dirs* are pruned. Directories
    that cannot be listed are logged, recorded as issues, and skipped.
    Symlinked directories are followed once; visited real paths are tracked
    so link cycles terminate.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Source root does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Source root is not a directory: {root}")

    skip = set(skip_dirs)
    exts = tuple(extensions)
    result = DiscoveryResult()
    seen_dirs: Set[Path] = set()
    seen_files: Set[Path] = set()
    stack: List[Path] = [root.resolve()]

    while stack:
        directory = stack.pop()
        real = directory.resolve()
        if real in seen_dirs:
            logger.debug("Already visited %s, skipping", directory)
            continue
        seen_dirs.add(real)

        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning("Cannot read directory %s: %s", directory, exc)
            result.issues.append(AnalysisIssue("directory-read", directory, str(exc)))
            continue

        for entry in entries:
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                logger.warning("Cannot stat %s: %s", entry, exc)
                result.issues.append(AnalysisIssue("directory-read", entry, str(exc)))
                continue

            if is_dir:
                if entry.name in skip:
                    continue
                stack.append(entry)
            elif is_file and has_source_extension(entry, exts):
                if entry not in seen_files:
                    seen_files.add(entry)
                    result.files.append(entry)

    result.files.sort()
    logger.info("Discovered %d source files under %s", len(result.files), root)
    return result
