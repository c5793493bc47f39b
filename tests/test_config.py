"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hypodex.config import StorageSettings, get_settings
from hypodex.operators import HypothesisStorage


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "HYPODEX_BASE_DIR",
        "HYPODEX_AUTO_REBUILD_INDEX",
        "HYPODEX_ON_CORRUPT_SESSION",
        "HYPODEX_SERIALIZE_WRITES",
        "HYPODEX_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env in the working directory out of the picture.
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = StorageSettings()
    assert settings.base_dir == Path(".")
    assert settings.auto_rebuild_index is True
    assert settings.on_corrupt_session == "fail"
    assert settings.serialize_writes is True
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("HYPODEX_BASE_DIR", str(tmp_path / "store"))
    monkeypatch.setenv("HYPODEX_AUTO_REBUILD_INDEX", "false")
    monkeypatch.setenv("HYPODEX_ON_CORRUPT_SESSION", "skip")
    monkeypatch.setenv("HYPODEX_SERIALIZE_WRITES", "0")

    settings = get_settings()
    assert settings.base_dir == tmp_path / "store"
    assert settings.auto_rebuild_index is False
    assert settings.on_corrupt_session == "skip"
    assert settings.serialize_writes is False


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("HYPODEX_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    assert StorageSettings().log_level == "DEBUG"


def test_rejects_unknown_policy(monkeypatch):
    monkeypatch.setenv("HYPODEX_ON_CORRUPT_SESSION", "ignore")
    with pytest.raises(ValidationError):
        StorageSettings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_storage_from_settings(tmp_path):
    settings = StorageSettings(base_dir=tmp_path, auto_rebuild_index=False, on_corrupt_session="skip")
    storage = HypothesisStorage.from_settings(settings)
    assert storage.base_dir == tmp_path
    assert storage.auto_rebuild_index is False
    assert storage.builder.on_corrupt_session == "skip"
