"""
Unit tests for settings and API configuration loading.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

import pytest

from pricing_matrix.api.api_config import ApiConfig, load_api_config
from pricing_matrix.api.schema_versions import api_version_label
from pricing_matrix.common import settings as settings_module


def test_load_settings_success() -> None:
    settings_module.get_settings.cache_clear()
    settings = settings_module.get_settings()
    assert settings.PROJECT_NAME
    assert settings.LOG_LEVEL


def test_load_settings_missing_required(monkeypatch: pytest.MonkeyPatch) -> None:
    settings_module.get_settings.cache_clear()
    monkeypatch.delenv("PROJECT_NAME", raising=False)
    with pytest.raises(RuntimeError, match="Missing required environment variables"):
        settings_module.load_settings(load_env=False)


def test_load_api_config_reads_store_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MATRIX_STORE_BACKEND", "SQL")
    monkeypatch.setenv("MATRIX_DATABASE_URL", "sqlite:///prices.db")
    monkeypatch.setenv("API_ALLOWED_ORIGINS", "http://localhost:8501, http://editor.local")

    config = load_api_config(load_env=False)

    assert config.store_backend == "sql"
    assert config.database_url == "sqlite:///prices.db"
    assert config.allowed_origins == ["http://localhost:8501", "http://editor.local"]
    assert api_version_label(config.api_version_path) == "v1"


@pytest.mark.parametrize(
    "overrides",
    [
        {"api_version_path": "api/v1"},
        {"api_version_path": "/api"},
        {"store_backend": "redis"},
        {"matrix_table_name": "prices;drop"},
    ],
)
def test_api_config_rejects_invalid_values(overrides: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        ApiConfig.model_validate(overrides)
