from pathlib import Path

import pytest

from recombiner.core.config import DEFAULT_HTTP_TIMEOUT, DEFAULT_USER_AGENT, load_http_settings, load_paths


def test_load_paths_defaults_to_project_root(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("RECOMBINER_HOME", raising=False)

    paths = load_paths(tmp_path)

    assert paths.data_dir == tmp_path.resolve() / ".recombiner"
    assert paths.catalog_path == tmp_path.resolve() / ".recombiner" / "catalog.json"


def test_load_paths_honours_home_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RECOMBINER_HOME", str(tmp_path / "elsewhere"))

    assert load_paths(tmp_path).catalog_path == (tmp_path / "elsewhere").resolve() / "catalog.json"


def test_http_settings_fall_back_on_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RECOMBINER_HTTP_TIMEOUT", "soon")
    monkeypatch.setenv("RECOMBINER_USER_AGENT", "  ")
    settings = load_http_settings()
    assert settings.timeout_seconds == DEFAULT_HTTP_TIMEOUT
    assert settings.user_agent == DEFAULT_USER_AGENT

    monkeypatch.setenv("RECOMBINER_HTTP_TIMEOUT", "3.5")
    assert load_http_settings().timeout_seconds == 3.5
