"""Tests for the JSON report artifact and graph exports."""

import json
from datetime import datetime
from pathlib import Path

from orphangraph.analyzer import OrphanAnalyzer
from orphangraph.graph_export import export_dot, export_json
from orphangraph.report import build_check_report, build_report, level_counts, write_report


def test_build_report(sample_project_path: Path):
    result = OrphanAnalyzer(sample_project_path).run()
    report = build_report(result, timestamp=datetime(2024, 1, 2, 3, 4, 5))

    assert report["timestamp"] == "2024-01-02T03:04:05"
    assert report["totalFiles"] == 20
    assert report["totalOrphans"] == 13
    assert report["safeToDelete"] == 4
    assert report["levels"] == {
        "ABSOLUTELY_SAFE": 2,
        "VERY_SAFE": 2,
        "PROBABLY_SAFE": 2,
        "RISKY": 5,
        "KEEP": 2,
    }
    first = report["orphans"][0]
    assert first["safetyLevel"] == "ABSOLUTELY_SAFE"
    assert set(first) == {"path", "safetyLevel", "type", "size", "reasons", "wouldAlsoOrphan"}

    by_path = {o["path"]: o for o in report["orphans"]}
    assert by_path["src/utils/date.test.ts"]["wouldAlsoOrphan"] == ["src/utils/date.ts"]
    assert by_path["src/utils/date.test.ts"]["type"] == "test"
    assert report["issues"] == []


def test_level_counts_includes_every_level():
    assert level_counts([]) == {
        "ABSOLUTELY_SAFE": 0,
        "VERY_SAFE": 0,
        "PROBABLY_SAFE": 0,
        "RISKY": 0,
        "KEEP": 0,
    }


def test_build_check_report(sample_project_path: Path):
    graph, checks, issues = OrphanAnalyzer(sample_project_path).check_files(
        [Path("src/lib/format.ts"), Path("src/utils/empty.ts"), Path("src/nope.ts")]
    )
    report = build_check_report(checks, graph, issues)

    assert report["analysis"] == "specific-files"
    assert report["totalAnalyzed"] == 3
    assert report["safeToDelete"] == 1
    referenced, empty, missing = report["files"]
    assert referenced["safetyLevel"] is None
    assert len(referenced["importers"]) == 3
    assert empty["safetyLevel"] == "ABSOLUTELY_SAFE"
    assert missing["found"] is False


def test_write_report_creates_parent_dirs(temp_dir: Path):
    target = write_report({"totalOrphans": 0}, temp_dir / "analysis" / "out.json")
    assert json.loads(target.read_text()) == {"totalOrphans": 0}


class TestGraphExport:

    def test_export_json(self, sample_project_path: Path, temp_dir: Path):
        graph, _ = OrphanAnalyzer(sample_project_path).build_graph()
        out = temp_dir / "graph.json"
        export_json(graph, out)

        payload = json.loads(out.read_text())
        assert len(payload["nodes"]) == 20
        assert {"src": "src/lib/lazy.ts", "dst": "src/lib/chunk.ts"} in payload["edges"]
        orphan_ids = {n["id"] for n in payload["nodes"] if n["orphan"]}
        assert "src/utils/empty.ts" in orphan_ids
        assert "src/lib/format.ts" not in orphan_ids

    def test_export_json_focus(self, sample_project_path: Path, temp_dir: Path):
        graph, _ = OrphanAnalyzer(sample_project_path).build_graph()
        out = temp_dir / "graph.json"
        export_json(graph, out, focus="lib/format.ts")

        ids = {n["id"] for n in json.loads(out.read_text())["nodes"]}
        assert ids == {
            "src/lib/format.ts",
            "src/components/Header.tsx",
            "src/lib/index.ts",
            "src/lib/legacy.js",
        }

    def test_export_dot(self, sample_project_path: Path, temp_dir: Path):
        graph, _ = OrphanAnalyzer(sample_project_path).build_graph()
        out = temp_dir / "graph.dot"
        export_dot(graph, out)

        text = out.read_text()
        assert text.startswith("digraph OrphanGraph {")
        assert '"src/components/Header.tsx" -> "src/lib/format.ts";' in text
        assert 'fillcolor="#f4cccc"' in text
