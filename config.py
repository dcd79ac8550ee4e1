import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".recallkit"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

def load_config() -> Dict[str, Any]:
    """Load config from ~/.recallkit/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., OLLAMA_MODEL env var)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    storage_cfg = config.get("storage", {})
    config["storage"] = {
        "path": os.getenv(
            "RECALLKIT_STORE_PATH",
            storage_cfg.get("path") or str(CONFIG_DIR / "decks.json"),
        ),
        "lock_timeout": float(os.getenv("RECALLKIT_LOCK_TIMEOUT", storage_cfg.get("lock_timeout", 10))),
        "backup_keep": int(os.getenv("RECALLKIT_BACKUP_KEEP", storage_cfg.get("backup_keep", 7))),
    }
    ollama_cfg = config.get("ollama", {})
    config["ollama"] = {
        "model": os.getenv("OLLAMA_MODEL", ollama_cfg.get("model", "llama3.2")),
        "timeout": int(os.getenv("OLLAMA_TIMEOUT", ollama_cfg.get("timeout", 120))),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("RECALLKIT_LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
    }
    review_cfg = config.get("review", {})
    config["review"] = {
        "button_quality": dict(review_cfg.get("button_quality", {})),
    }
    mastery_cfg = config.get("mastery", {})
    config["mastery"] = dict(mastery_cfg)
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('ollama', 'model')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
