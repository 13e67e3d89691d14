from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import config
from db import database


def _write_test_config(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[openrouter]",
                "model = \"google/gemini-2.5-flash\"",
                "timeout = 5",
                "",
                "[settings]",
                "prompt_template = \"3rd-grade animal words\"",
                "selected_voice = \"\"",
                "speech_rate = 0.8",
                "speech_pitch = 1.0",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    config_dir = tmp_path / ".bespelling"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path)

    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "bespelling.db")
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    monkeypatch.delenv("OPENROUTER_DEFAULT_MODEL", raising=False)
    monkeypatch.delenv("OPENROUTER_TIMEOUT", raising=False)

    database.init_db()
    return config_dir


@pytest.fixture
def conn(app_env):
    with database.get_conn() as connection:
        yield connection


@pytest.fixture
def client(app_env):
    from main import app

    return TestClient(app)
