from pathlib import Path

import config


def _patch_config_dir(tmp_path: Path, monkeypatch) -> Path:
    config_dir = tmp_path / ".recallkit"
    config_path = config_dir / "config.toml"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    for name in (
        "RECALLKIT_STORE_PATH",
        "RECALLKIT_LOCK_TIMEOUT",
        "RECALLKIT_BACKUP_KEEP",
        "RECALLKIT_LOG_LEVEL",
        "OLLAMA_MODEL",
        "OLLAMA_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    return config_path


def test_load_config_copies_example_when_missing(tmp_path, monkeypatch):
    config_path = _patch_config_dir(tmp_path, monkeypatch)

    loaded = config.load_config()

    assert config_path.exists()
    assert loaded["storage"]["path"] == str(tmp_path / ".recallkit" / "decks.json")
    assert loaded["storage"]["lock_timeout"] == 10.0
    assert loaded["ollama"] == {"model": "llama3.2", "timeout": 120}
    assert loaded["review"]["button_quality"] == {"forgot": 1, "hard": 3, "easy": 5}
    assert loaded["logging"]["level"] == "INFO"


def test_file_values_are_used(tmp_path, monkeypatch):
    config_path = _patch_config_dir(tmp_path, monkeypatch)
    config_path.parent.mkdir()
    config_path.write_text(
        "\n".join(
            [
                "[storage]",
                'path = "/srv/decks.json"',
                "lock_timeout = 2.5",
                "",
                "[ollama]",
                'model = "phi3"',
                "",
                "[logging]",
                'level = "debug"',
            ]
        ),
        encoding="utf-8",
    )

    loaded = config.load_config()

    assert loaded["storage"]["path"] == "/srv/decks.json"
    assert loaded["storage"]["lock_timeout"] == 2.5
    assert loaded["storage"]["backup_keep"] == 7
    assert loaded["ollama"]["model"] == "phi3"
    assert loaded["ollama"]["timeout"] == 120
    assert loaded["logging"]["level"] == "DEBUG"
    assert loaded["review"]["button_quality"] == {}


def test_environment_overrides_file(tmp_path, monkeypatch):
    _patch_config_dir(tmp_path, monkeypatch)
    monkeypatch.setenv("RECALLKIT_STORE_PATH", str(tmp_path / "elsewhere.json"))
    monkeypatch.setenv("RECALLKIT_LOCK_TIMEOUT", "0.5")
    monkeypatch.setenv("OLLAMA_TIMEOUT", "30")

    loaded = config.load_config()

    assert loaded["storage"]["path"] == str(tmp_path / "elsewhere.json")
    assert loaded["storage"]["lock_timeout"] == 0.5
    assert loaded["ollama"]["timeout"] == 30


def test_get_config_value(tmp_path, monkeypatch):
    _patch_config_dir(tmp_path, monkeypatch)

    assert config.get_config_value("ollama", "model") == "llama3.2"
    assert config.get_config_value("missing", "key", "fallback") == "fallback"
