import json

import pytest

pytest.importorskip("PySide6.QtCore", reason="PySide6 is required for SettingsManager", exc_type=ImportError)

from favactors.config import API_KEY_ENV_VAR
from favactors.errors import SettingsLoadError, SettingsValidationError
from favactors.settings.manager import SettingsManager


def test_load_creates_defaults(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)
    manager.load()

    assert path.exists()
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["schema"] == "favactors/settings@1"
    assert manager.get("images.profile_size") is None
    assert manager.get("tmdb.missing", "fallback") == "fallback"


def test_load_merges_partial_sections(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"tmdb": {"api_key": "abc"}}), encoding="utf-8")

    manager = SettingsManager(path)
    manager.load()

    assert manager.get("tmdb.api_key") == "abc"
    assert manager.get("tmdb.timeout") > 0


def test_set_persists_and_emits(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)
    manager.load()
    changes = []
    manager.settingsChanged.connect(lambda key, value: changes.append((key, value)))

    manager.set("ui.window_size", (800, 600))

    assert changes == [("ui.window_size", [800, 600])]
    reloaded = SettingsManager(path)
    reloaded.load()
    assert reloaded.get("ui.window_size") == [800, 600]


def test_invalid_value_is_rejected_and_not_stored(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()

    with pytest.raises(SettingsValidationError):
        manager.set("tmdb.timeout", -1)

    assert manager.get("tmdb.timeout") > 0


def test_invalid_file_contents(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path).load()

    path.write_text(json.dumps({"ui": {"window_size": [1]}}), encoding="utf-8")
    with pytest.raises(SettingsValidationError):
        SettingsManager(path).load()


def test_data_dir_and_api_key_overrides(tmp_path, monkeypatch):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()
    manager.set("data_dir", tmp_path / "data")
    manager.set("tmdb.api_key", "from-file")

    assert manager.data_dir() == tmp_path / "data"
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    assert manager.api_key() == "from-file"
    monkeypatch.setenv(API_KEY_ENV_VAR, "from-env")
    assert manager.api_key() == "from-env"
