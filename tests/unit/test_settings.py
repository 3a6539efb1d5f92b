from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from formbridge.exceptions import SettingsError
from formbridge.settings import Settings, ensure_env_file_exists, get_settings

if TYPE_CHECKING:
    from pathlib import Path


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_payload = (
        "APP_ENV=test\n"
        "LOG_LEVEL=DEBUG\n"
        "LOG_JSON=false\n"
        "SIMILARITY_THRESHOLD=0.8\n"
        "STORE_DIR=var/mappings\n"
    )
    env_file.write_text(env_payload, encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.similarity_threshold == 0.8
    assert settings.store_dir == "var/mappings"
    assert settings.results_dir == "results"


def test_settings_rejects_threshold_outside_unit_interval(monkeypatch) -> None:
    monkeypatch.setenv("SIMILARITY_THRESHOLD", "1.5")

    with pytest.raises(ValidationError):
        Settings()


def test_settings_accept_field_names() -> None:
    settings = Settings(log_json=False, similarity_threshold=0.5)

    assert settings.log_json is False
    assert settings.similarity_threshold == 0.5


def test_get_settings_uses_environment(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("APP_ENV", "ci")

    settings = get_settings()
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_retries_after_env_template_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    attempts = {"count": 0}

    class _DummySettings:
        app_env = "ci"

    def _fake_settings():
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ValueError("missing")
        return _DummySettings()

    copied = {"done": 0}

    def _mark_env_copied(**kwargs: object) -> None:
        _ = kwargs
        copied["done"] += 1

    monkeypatch.setattr("formbridge.settings.Settings", _fake_settings)
    monkeypatch.setattr("formbridge.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("formbridge.settings.ensure_env_file_exists", _mark_env_copied)

    settings = get_settings()
    assert copied["done"] == 1
    assert attempts["count"] == 2
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_does_not_copy_env_on_non_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _raise_runtime_error():
        raise RuntimeError("boom")

    def _raise_assertion_error(**kwargs: object) -> None:
        _ = kwargs
        raise AssertionError("should not copy env")

    monkeypatch.setattr("formbridge.settings.Settings", _raise_runtime_error)
    monkeypatch.setattr("formbridge.settings._is_missing_settings_error", lambda exc: False)
    monkeypatch.setattr("formbridge.settings.ensure_env_file_exists", _raise_assertion_error)

    with pytest.raises(SettingsError, match="boom"):
        get_settings()

    get_settings.cache_clear()


def test_ensure_env_file_exists_copies_template(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("SIMILARITY_THRESHOLD=0.7\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.exists()
    assert "SIMILARITY_THRESHOLD" in env_file.read_text(encoding="utf-8")


def test_ensure_env_file_exists_keeps_existing_file(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("APP_ENV=template\n", encoding="utf-8")
    env_file.write_text("APP_ENV=local\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.read_text(encoding="utf-8") == "APP_ENV=local\n"
