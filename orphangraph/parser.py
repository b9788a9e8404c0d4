"""Pattern-based import extraction for JavaScript / TypeScript sources.

Extraction is textual rather than syntactic: specifiers are pulled out of
import declarations, dynamic ``import()`` expressions, ``require()`` calls
and re-export declarations with regular expressions. This can over-match
(an import statement quoted inside a string literal) or under-match
(computed specifiers), which is acceptable for an offline dead-file finder.

Only *internal* specifiers are returned: relative (``./``, ``../``),
rooted (``/``), or carrying one of the configured alias prefixes
(``@/`` by default). Bare package names can never resolve to a project file
and are dropped here.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Pattern, Set

from .config import ALIAS_PREFIXES

# ---------------------------------------------------------------------------
# Specifier patterns
# ---------------------------------------------------------------------------

# import x from '...'; import { a, b } from '...'; import x, * as ns from '...';
# import type T from '...'; import '...'. Brace lists may span lines and hold comments.
_STATIC_IMPORT_RE = re.compile(
    r"""\bimport\s+(?:type\s+)?"""
    r"""(?:(?:[\w$]+\s*,\s*)?(?:\{[^}]*\}|\*\s*as\s+[\w$]+|[\w$]+)\s*from\s*)?"""
    r"""['"]([^'"\n]+)['"]"""
)

# import('...')
_DYNAMIC_IMPORT_RE = re.compile(r"""\bimport\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")

# require('...')
_REQUIRE_RE = re.compile(r"""\brequire\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")

# export * from '...'; export * as ns from '...'; export { a } from '...'
_REEXPORT_RE = re.compile(
    r"""\bexport\s+(?:type\s+)?(?:\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s*from\s*['"]([^'"\n]+)['"]"""
)

SPECIFIER_PATTERNS: List[Pattern[str]] = [
    _STATIC_IMPORT_RE,
    _DYNAMIC_IMPORT_RE,
    _REQUIRE_RE,
    _REEXPORT_RE,
]

# ---------------------------------------------------------------------------
# Content fact patterns
# ---------------------------------------------------------------------------

_DEFAULT_EXPORT_RE = re.compile(
    r"""\bexport\s+default\b|\bexport\s*\{[^}]*\bas\s+default\b|\bmodule\.exports\s*="""
)
_NAMED_EXPORT_RE = re.compile(
    r"""\bexport\s+(?:declare\s+)?(?:const|let|var|async\s+function|function|abstract\s+class|class"""
    r"""|interface|type|enum|namespace|\{\s*[\w$]|\*)|\bexports\.[\w$]+\s*="""
)
_TODO_RE = re.compile(
    r"""(?://|/\*|^\s*\*).*?\b(?:TODO|FIXME|HACK)\b""",
    re.MULTILINE,
)


@dataclass(frozen=True)
class ContentFacts:
    has_default_export: bool
    has_named_exports: bool
    has_todo: bool


def scan_content(text: str) -> ContentFacts:
    """Compute the export / marker flags used by the safety classifier."""
    return ContentFacts(
        has_default_export=bool(_DEFAULT_EXPORT_RE.search(text)),
        has_named_exports=bool(_NAMED_EXPORT_RE.search(text)),
        has_todo=bool(_TODO_RE.search(text)),
    )


# ===================================================================
# Extractor interface
# ===================================================================

class ImportExtractor(ABC):
    """Turns source text into the set of internal module specifiers."""

    def __init__(self, alias_prefixes: Optional[Mapping[str, str]] = None) -> None:
        self.alias_prefixes = dict(ALIAS_PREFIXES if alias_prefixes is None else alias_prefixes)

    @abstractmethod
    def raw_specifiers(self, text: str) -> Iterable[str]:
        """Yield every specifier string referenced by *text*."""
        ...

    def is_internal(self, specifier: str) -> bool:
        if specifier.startswith((".", "/")):
            return True
        return any(specifier.startswith(prefix) for prefix in self.alias_prefixes)

    def extract(self, text: str) -> Set[str]:
        return {spec for spec in self.raw_specifiers(text) if self.is_internal(spec)}


class RegexImportExtractor(ImportExtractor):
    """Default extractor: regular expressions over the raw text."""

    def __init__(
        self,
        alias_prefixes: Optional[Mapping[str, str]] = None,
        patterns: Optional[List[Pattern[str]]] = None,
    ) -> None:
        super().__init__(alias_prefixes)
        self.patterns = patterns or SPECIFIER_PATTERNS

    def raw_specifiers(self, text: str) -> Iterable[str]:
        for pattern in self.patterns:
            for match in pattern.finditer(text):
                yield match.group(1).strip()


def extract_specifiers(text: str, alias_prefixes: Optional[Mapping[str, str]] = None) -> Set[str]:
    """Return the distinct internal specifiers referenced by *text*."""
    return RegexImportExtractor(alias_prefixes).extract(text)
