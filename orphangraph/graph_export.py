"""Graph export helpers for DOT and JSON outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Set

from .graph import ReferenceGraph


def export_dot(graph: ReferenceGraph, output_file: Path, focus: str = "") -> None:
    orphans = set(graph.orphan_paths())
    selected = _focused_nodes(graph, focus)

    lines = ["digraph OrphanGraph {"]
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box];")

    for source in graph:
        if selected is not None and source.path not in selected:
            continue
        label = f"{graph.relative(source.path)}\\n{source.kind.value}"
        style = ' style=filled fillcolor="#f4cccc"' if source.path in orphans else ""
        lines.append(f'  "{_esc(graph.relative(source.path))}" [label="{_esc(label)}"{style}];')

    for edge in graph.edges():
        if selected is not None and (edge.src not in selected or edge.dst not in selected):
            continue
        lines.append(f'  "{_esc(graph.relative(edge.src))}" -> "{_esc(graph.relative(edge.dst))}";')

    lines.append("}")
    output_file.write_text("\n".join(lines), encoding="utf-8")


def export_json(graph: ReferenceGraph, output_file: Path, focus: str = "") -> None:
    orphans = set(graph.orphan_paths())
    selected = _focused_nodes(graph, focus)
    payload = {
        "root": str(graph.root),
        "nodes": [
            {
                "id": graph.relative(source.path),
                "kind": source.kind.value,
                "size": source.size,
                "orphan": source.path in orphans,
            }
            for source in graph
            if selected is None or source.path in selected
        ],
        "edges": [
            {"src": graph.relative(edge.src), "dst": graph.relative(edge.dst)}
            for edge in graph.edges()
            if selected is None or (edge.src in selected and edge.dst in selected)
        ],
    }
    output_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _focused_nodes(graph: ReferenceGraph, focus: str) -> Optional[Set[Path]]:
    """The focus file plus its direct importers and imports, or ``None`` for all."""
    if not focus:
        return None
    matches = [p for p in graph.paths if graph.relative(p) == focus or graph.relative(p).endswith("/" + focus)]
    selected: Set[Path] = set()
    for path in matches:
        selected.add(path)
        selected.update(graph.imports_of(path))
        selected.update(graph.importers_of(path))
    return selected


def _esc(value: str) -> str:
    return value.replace('"', '\\"')
