import shutil
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from config import load_config
from .store import DeckStore

CONFIG_DIR = Path.home() / ".recallkit"
STORE_PATH = CONFIG_DIR / "decks.json"
BACKUP_DIR = CONFIG_DIR / "backups"
BACKUP_KEEP = 7

_stores: Dict[Path, DeckStore] = {}

def resolve_store_path(config: Optional[dict] = None) -> Path:
    """Configured store path, defaulting to ~/.recallkit/decks.json."""
    configured = (config or {}).get("storage", {}).get("path")
    if configured:
        return Path(configured).expanduser()
    return STORE_PATH

def get_store(config: Optional[dict] = None) -> DeckStore:
    """Return the process-wide store for the configured path.

    One instance per path, so every caller shares the same writer lock.
    Backups live in a ``backups`` directory next to the store file.
    """
    if config is None:
        config = load_config()
    path = resolve_store_path(config).resolve()
    store = _stores.get(path)
    if store is None:
        lock_timeout = float(config.get("storage", {}).get("lock_timeout", 10))
        store = DeckStore(path, lock_timeout=lock_timeout)
        _stores[path] = store
    return store

def reset_store_cache() -> None:
    _stores.clear()

def init_store(config: Optional[dict] = None) -> DeckStore:
    """Create the data directory and an empty store if needed, then take the daily backup."""
    if config is None:
        config = load_config()
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    store = get_store(config)
    store.load_all()
    run_daily_backup(store.path, backup_dir=store.backup_dir, keep=int(config.get("storage", {}).get("backup_keep", BACKUP_KEEP)))
    return store

def create_backup_file(source: Path, destination: Path) -> None:
    """Copy the deck snapshot to ``destination``."""
    if not source.exists():
        raise FileNotFoundError(f"{source.name} not found")
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)

def run_daily_backup(
    source: Optional[Path] = None,
    backup_dir: Optional[Path] = None,
    keep: int = BACKUP_KEEP,
) -> Optional[Path]:
    """Create a daily rolling backup of the deck store and prune old copies."""
    source = source or STORE_PATH
    backup_dir = backup_dir or BACKUP_DIR
    if not source.exists():
        return None
    backup_dir.mkdir(parents=True, exist_ok=True)
    today = date.today()
    existing = sorted(backup_dir.glob("decks-*.json"), key=lambda path: path.stat().st_mtime, reverse=True)
    if existing:
        latest_date = date.fromtimestamp(existing[0].stat().st_mtime)
        if latest_date == today:
            return None
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    backup_path = backup_dir / f"decks-{timestamp}.json"
    create_backup_file(source, backup_path)
    existing = sorted(backup_dir.glob("decks-*.json"), key=lambda path: path.stat().st_mtime, reverse=True)
    for old_backup in existing[keep:]:
        old_backup.unlink(missing_ok=True)
    return backup_path
