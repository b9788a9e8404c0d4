"""Settings loader for OrphanGraph using TOML files."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import toml

from . import config

logger = logging.getLogger(__name__)

SECTION = "analysis"


@dataclass
class AnalysisSettings:
    """Effective knobs for one analysis run."""

    extensions: Tuple[str, ...] = config.SOURCE_EXTENSIONS
    skip_dirs: Tuple[str, ...] = config.SKIP_DIRS
    near_empty_bytes: int = config.NEAR_EMPTY_BYTES
    alias_prefixes: Dict[str, str] = field(default_factory=lambda: dict(config.ALIAS_PREFIXES))
    disposable_markers: Tuple[str, ...] = config.DISPOSABLE_MARKERS
    workers: int = config.DEFAULT_WORKERS

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("extensions", "skip_dirs", "disposable_markers"):
            data[key] = list(data[key])
        return data


def _candidate_files(root: Optional[Path], explicit: Optional[Path]) -> List[Path]:
    if explicit is not None:
        return [explicit]
    files: List[Path] = []
    if root is not None:
        files.append(root / config.PROJECT_CONFIG_NAME)
    files.append(config.CONFIG_FILE)
    return files


def load_section(path: Path) -> Dict[str, Any]:
    """Read the ``[analysis]`` table from *path*.

    Returns an empty dict when the file is missing or malformed.
    """
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring non-table [%s] in %s", SECTION, path)
        return {}
    return section


def load_settings(
    root: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> AnalysisSettings:
    """Load settings, first config file found wins, merged over defaults.

    Lookup order: *config_path*, ``<root>/.orphangraph.toml``, then the
    user-level ``~/.orphangraph/config.toml``.
    """
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    section: Dict[str, Any] = {}
    for path in _candidate_files(root, config_path):
        section = load_section(path)
        if section:
            logger.debug("Loaded settings from %s", path)
            break

    settings = AnalysisSettings()
    if "extensions" in section:
        settings.extensions = tuple(_normalize_ext(e) for e in section["extensions"])
    if "skip_dirs" in section:
        settings.skip_dirs = tuple(str(d) for d in section["skip_dirs"])
    if "near_empty_bytes" in section:
        settings.near_empty_bytes = int(section["near_empty_bytes"])
    if "alias_prefixes" in section:
        settings.alias_prefixes = {str(k): str(v) for k, v in section["alias_prefixes"].items()}
    if "disposable_markers" in section:
        settings.disposable_markers = tuple(str(m).lower() for m in section["disposable_markers"])
    if "workers" in section:
        settings.workers = max(1, int(section["workers"]))
    return settings


def save_settings(settings: AnalysisSettings, path: Optional[Path] = None) -> Path:
    """Write *settings* as the ``[analysis]`` table, preserving other tables."""
    target = path or config.CONFIG_FILE
    if target == config.CONFIG_FILE:
        config.ensure_base_dirs()
    data: Dict[str, Any] = {}
    if target.exists():
        try:
            data = toml.loads(target.read_text(encoding="utf-8"))
        except toml.TomlDecodeError as exc:
            logger.warning("Overwriting malformed config %s: %s", target, exc)
    data[SECTION] = settings.to_dict()
    target.write_text(toml.dumps(data), encoding="utf-8")
    return target


def _normalize_ext(ext: str) -> str:
    ext = str(ext).strip()
    return ext if ext.startswith(".") else f".{ext}"
