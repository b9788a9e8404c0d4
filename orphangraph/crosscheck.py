"""Name-based cross-check for files the import graph reports as unused."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from .graph import ReferenceGraph


def mention_pattern(path: Path) -> "re.Pattern[str]":
    stem = path.name.split(".", 1)[0]
    return re.compile(rf"(?<![\w$]){re.escape(stem)}(?![\w$])")


def find_textual_mentions(graph: ReferenceGraph, path: Path) -> List[Path]:
    """Other files in *graph* whose text contains the base name of *path*.

    Catches references the specifier patterns cannot see, such as JSX tags,
    lazy-loading helpers or string-built paths. Mentions are hints only and
    do not create edges.
    """
    pattern = mention_pattern(path)
    return [
        source.path
        for source in graph
        if source.path != path and pattern.search(source.text)
    ]
