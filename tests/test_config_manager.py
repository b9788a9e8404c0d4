"""Tests for TOML settings loading and saving."""

from pathlib import Path

import pytest
import toml

from orphangraph import config
from orphangraph.config_manager import AnalysisSettings, load_section, load_settings, save_settings


def test_defaults_without_any_config(temp_dir: Path):
    settings = load_settings(temp_dir)
    assert settings == AnalysisSettings()
    assert settings.extensions == (".ts", ".tsx", ".js", ".jsx")
    assert "node_modules" in settings.skip_dirs
    assert settings.alias_prefixes == {"@/": "src"}


def test_project_config_overrides_defaults(temp_dir: Path):
    (temp_dir / config.PROJECT_CONFIG_NAME).write_text(
        "[analysis]\n"
        'extensions = ["ts", ".mjs"]\n'
        "near_empty_bytes = 32\n"
        "workers = 0\n"
        '[analysis.alias_prefixes]\n"~/" = "app"\n'
    )
    settings = load_settings(temp_dir)
    assert settings.extensions == (".ts", ".mjs")
    assert settings.near_empty_bytes == 32
    assert settings.workers == 1
    assert settings.alias_prefixes == {"~/": "app"}
    assert settings.skip_dirs == config.SKIP_DIRS


def test_project_config_wins_over_user_config(temp_dir: Path):
    config.CONFIG_FILE.write_text("[analysis]\nnear_empty_bytes = 1\n")
    (temp_dir / config.PROJECT_CONFIG_NAME).write_text("[analysis]\nnear_empty_bytes = 2\n")
    assert load_settings(temp_dir).near_empty_bytes == 2
    assert load_settings().near_empty_bytes == 1


def test_explicit_config_path(temp_dir: Path):
    path = temp_dir / "custom.toml"
    path.write_text('[analysis]\ndisposable_markers = ["Scratch"]\n')
    assert load_settings(temp_dir, path).disposable_markers == ("scratch",)


def test_missing_explicit_config_raises(temp_dir: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(temp_dir, temp_dir / "nope.toml")


def test_malformed_config_is_ignored(temp_dir: Path):
    path = temp_dir / "broken.toml"
    path.write_text("[analysis\nworkers = ")
    assert load_section(path) == {}
    assert load_settings(temp_dir, path) == AnalysisSettings()


def test_save_settings_preserves_other_tables(temp_dir: Path):
    path = temp_dir / "settings.toml"
    path.write_text('[other]\nkey = "value"\n')
    save_settings(AnalysisSettings(workers=3), path)

    data = toml.loads(path.read_text())
    assert data["other"] == {"key": "value"}
    assert data["analysis"]["workers"] == 3
    assert load_settings(config_path=path).workers == 3


def test_save_settings_defaults_to_user_config():
    target = save_settings(AnalysisSettings(near_empty_bytes=0))
    assert target == config.CONFIG_FILE
    assert load_settings().near_empty_bytes == 0
