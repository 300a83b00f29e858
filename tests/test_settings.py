import json
import os

import pytest

from bangumi_season.settings import (
    DEFAULT_SETTINGS,
    PluginConfiguration,
    SettingsManager,
    load_access_token,
)


@pytest.fixture(autouse=True)
def isolated_environ(mocker):
    mocker.patch.dict(os.environ)
    os.environ.pop("BANGUMI_ACCESS_TOKEN", None)


def test_settings_defaults_when_missing(tmp_path):
    mgr = SettingsManager(tmp_path / "settings.json")
    assert mgr.get("use_bangumi_season_title") is True
    assert mgr.all() == DEFAULT_SETTINGS


def test_settings_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    mgr = SettingsManager(path)
    mgr.set("use_bangumi_season_title", False)
    assert mgr.save() is True

    assert json.loads(path.read_text(encoding="utf-8")) == {"use_bangumi_season_title": False}
    assert SettingsManager(path).get("use_bangumi_season_title") is False


def test_settings_corrupt_file_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert SettingsManager(path).get("timeout") == DEFAULT_SETTINGS["timeout"]


def test_access_token_prefers_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("BANGUMI_ACCESS_TOKEN", "from-env")
    mgr = SettingsManager(tmp_path / "settings.json")
    mgr.set("access_token", "from-settings")
    assert load_access_token(mgr) == "from-env"


def test_access_token_from_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("bangumi_season.settings.Path.home", lambda: tmp_path)
    mgr = SettingsManager(tmp_path / "settings.json")
    mgr.set("access_token", "from-settings")
    assert load_access_token(mgr) == "from-settings"


def test_access_token_from_dotenv(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("BANGUMI_ACCESS_TOKEN=from-dotenv\n", encoding="utf-8")
    assert load_access_token() == "from-dotenv"


def test_plugin_configuration_load(monkeypatch, tmp_path):
    monkeypatch.setenv("BANGUMI_ACCESS_TOKEN", "tok")
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"use_bangumi_season_title": False, "timeout": 3}), encoding="utf-8")

    config = PluginConfiguration.load(SettingsManager(path))

    assert config.use_bangumi_season_title is False
    assert config.access_token == "tok"
    assert config.timeout == 3.0
