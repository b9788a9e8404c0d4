"""Default settings and paths for OrphanGraph analysis runs."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Tuple

BASE_DIR = Path(os.environ.get("ORPHANGRAPH_HOME", str(Path.home() / ".orphangraph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"
PROJECT_CONFIG_NAME = ".orphangraph.toml"

# Resolution priority: the first extension wins when several same-named files exist.
SOURCE_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")

SKIP_DIRS: Tuple[str, ...] = (
    "node_modules", ".next", ".git", "dist", "build", "out",
    "coverage", "storage", ".turbo", ".vercel", ".cache",
)

# Files smaller than this many bytes count as near-empty.
NEAR_EMPTY_BYTES = 10

# Fixed prefix aliases, mapped onto a directory relative to the project root.
ALIAS_PREFIXES: Dict[str, str] = {"@/": "src"}

DISPOSABLE_MARKERS: Tuple[str, ...] = ("temp", "tmp", "draft", "unused", "deprecated")

DEFAULT_WORKERS = min(8, (os.cpu_count() or 1) + 4)

REPORT_DIR = "analysis"
REPORT_FILE = "orphan-analysis.json"


def ensure_base_dirs() -> None:
    """Create the user-level settings directory if needed."""
    BASE_DIR.mkdir(parents=True, exist_ok=True)
