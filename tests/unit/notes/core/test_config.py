"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the real project files (YAML configs).
Failure scenarios use tmp_path to create controlled filesystems.
"""

import pytest

from modules.notes.core.config import (
    AppConfig,
    find_project_root,
    get_app_config,
    get_database_url,
    get_redis_url,
    load_yaml_config,
    validate_project_root,
)
from modules.notes.core.config_schema import FeaturesSchema, NotesSchema


def _write_settings(root, files: dict[str, str]) -> None:
    (root / ".project_root").touch()
    settings_dir = root / "config" / "settings"
    settings_dir.mkdir(parents=True)
    for name, text in files.items():
        (settings_dir / name).write_text(text)


VALID_FILES = {
    "application.yaml": "name: n\nversion: '1'\ndescription: d\nenvironment: test\ndebug: false\n",
    "database.yaml": "url: 'sqlite+aiosqlite:///data/x.db'\necho: false\nredis: {host: h, port: 1, db: 2}\n",
    "logging.yaml": (
        "level: INFO\nformat: console\nhandlers:\n  console: {enabled: true}\n"
        "  file: {enabled: false, path: logs/x.jsonl, max_bytes: 10, backup_count: 1}\n"
    ),
    "features.yaml": "events_publish_enabled: false\n",
    "notes.yaml": "collection: notes\nhistory_collection: history\narchive_on_revert: false\nsort_history: true\n",
}


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_when_no_marker_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()

    def test_validate_exits_when_marker_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit):
            validate_project_root()


class TestLoadYamlConfig:
    """Tests for YAML file loading from config/settings/."""

    def test_loads_all_config_files(self):
        for filename in VALID_FILES:
            data = load_yaml_config(filename)
            assert isinstance(data, dict), f"{filename} did not return a dict"
            assert data, f"{filename} returned empty dict"

    def test_raises_for_nonexistent_file(self):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_yaml_config("does_not_exist.yaml")

    def test_returns_empty_dict_for_empty_yaml(self, tmp_path, monkeypatch):
        _write_settings(tmp_path, {"empty.yaml": ""})
        monkeypatch.chdir(tmp_path)

        assert load_yaml_config("empty.yaml") == {}


class TestAppConfig:
    """Tests for validated YAML configuration."""

    def test_project_config_is_valid(self):
        config = get_app_config()

        assert isinstance(config.features, FeaturesSchema)
        assert isinstance(config.notes, NotesSchema)
        assert config.notes.collection == "notes"
        assert config.notes.history_collection == "history"
        assert config.notes.archive_on_revert is False
        assert config.notes.sort_history is True
        assert config.features.events_publish_enabled is False

    def test_get_app_config_is_cached(self):
        assert get_app_config() is get_app_config()

    def test_unknown_key_is_rejected(self, tmp_path, monkeypatch):
        files = dict(VALID_FILES)
        files["notes.yaml"] += "unexpected: 1\n"
        _write_settings(tmp_path, files)
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="Invalid configuration in notes.yaml"):
            AppConfig()

    def test_wrong_type_is_rejected(self, tmp_path, monkeypatch):
        files = dict(VALID_FILES)
        files["features.yaml"] = "events_publish_enabled: maybe\n"
        _write_settings(tmp_path, files)
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="features.yaml"):
            AppConfig()


class TestUrls:
    """Tests for connection URL construction."""

    def test_relative_sqlite_path_resolves_against_project_root(self, tmp_path, monkeypatch):
        _write_settings(tmp_path, VALID_FILES)
        monkeypatch.chdir(tmp_path)

        url = get_database_url()

        assert url == f"sqlite+aiosqlite:///{find_project_root() / 'data' / 'x.db'}"

    def test_in_memory_url_is_unchanged(self, tmp_path, monkeypatch):
        files = dict(VALID_FILES)
        files["database.yaml"] = "url: 'sqlite+aiosqlite:///:memory:'\necho: false\nredis: {host: h, port: 1, db: 2}\n"
        _write_settings(tmp_path, files)
        monkeypatch.chdir(tmp_path)

        assert get_database_url() == "sqlite+aiosqlite:///:memory:"

    def test_redis_url_uses_yaml_and_secret(self, tmp_path, monkeypatch):
        _write_settings(tmp_path, VALID_FILES)
        (tmp_path / "config" / ".env").write_text("REDIS_PASSWORD=s3cret\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("REDIS_PASSWORD", raising=False)

        assert get_redis_url() == "redis://:s3cret@h:1/2"
