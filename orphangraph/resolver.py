"""Map raw import specifiers onto files in the discovered set."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple

from .config import ALIAS_PREFIXES, SOURCE_EXTENSIONS

logger = logging.getLogger(__name__)


class ModuleResolver:
    """Resolve specifiers against a frozen set of known file paths.

    Resolution order, first match wins:

    1. the base path itself (exact file),
    2. the base path with each extension appended, in ``extensions`` order,
    3. ``<base>/index`` with each extension, in the same order.

    The base path is the specifier joined onto the referencing file's
    directory, onto the project root for rooted (``/x``) specifiers, or onto
    the alias target for aliased (``@/x``) specifiers. Resolution never
    touches the filesystem, so one resolver can be shared across threads.
    """

    def __init__(
        self,
        root: Path,
        known_files: Iterable[Path],
        extensions: Iterable[str] = SOURCE_EXTENSIONS,
        alias_prefixes: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.root = Path(root)
        self.known_files = frozenset(Path(p) for p in known_files)
        self.extensions: Tuple[str, ...] = tuple(extensions)
        aliases = ALIAS_PREFIXES if alias_prefixes is None else alias_prefixes
        # Longest prefix first so "@/lib/" beats "@/".
        self.alias_prefixes = sorted(aliases.items(), key=lambda kv: len(kv[0]), reverse=True)

    def base_path(self, specifier: str, from_file: Path) -> Optional[Path]:
        for prefix, target in self.alias_prefixes:
            if specifier.startswith(prefix):
                return _normalize(self.root / target / specifier[len(prefix):])
        if specifier.startswith("/"):
            return _normalize(self.root / specifier.lstrip("/"))
        if specifier.startswith("."):
            return _normalize(Path(from_file).parent / specifier)
        return None

    def resolve(self, specifier: str, from_file: Path) -> Optional[Path]:
        """Return the resolved file, or ``None`` for external/unresolvable."""
        base = self.base_path(specifier, from_file)
        if base is None:
            return None

        if base in self.known_files:
            return base

        if base.name:
            for ext in self.extensions:
                candidate = base.with_name(base.name + ext)
                if candidate in self.known_files:
                    return candidate

        for ext in self.extensions:
            candidate = base / f"index{ext}"
            if candidate in self.known_files:
                return candidate

        logger.debug("Unresolved specifier %r from %s", specifier, from_file)
        return None


def _normalize(path: Path) -> Path:
    # Lexical normalization only; resolving symlinks would break lookups
    # against the discovered paths.
    return Path(os.path.normpath(str(path)))
