"""Pytest configuration and fixtures for OrphanGraph tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch, tmp_path_factory):
    """Point the user-level config at an empty directory for every test."""
    home = tmp_path_factory.mktemp("orphangraph_home")
    monkeypatch.setattr("orphangraph.config.BASE_DIR", home)
    monkeypatch.setattr("orphangraph.config.CONFIG_FILE", home / "config.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp()).resolve()
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample Next.js-style project."""
    return (Path(__file__).parent / "fixtures" / "sample_project").resolve()


@pytest.fixture
def write_tree(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Return a helper that writes ``{relative_path: text}`` under temp_dir."""

    def _write(files: Dict[str, str]) -> Path:
        for rel, text in files.items():
            path = temp_dir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return temp_dir

    return _write
