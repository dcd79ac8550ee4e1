"""Whole-collection JSON store for decks.

Every mutation is load -> mutate -> save of the complete collection. The
store serialises those cycles behind a lock; use :meth:`DeckStore.transaction`
for any read-modify-write so concurrent callers cannot overwrite each other.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import stat
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from models.card import Card
from models.deck import Deck
from models.errors import CardNotFound, DeckNotFound, StoreLockTimeout, StoreWriteError

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1
DEFAULT_LOCK_TIMEOUT = 10.0
DEFAULT_FILE_MODE = 0o644


class LoadStatus(str, Enum):
    OK = "ok"
    MISSING = "missing"
    RECOVERED = "recovered"


class CorruptStoreError(ValueError):
    pass


def serialize_decks(decks: Sequence[Deck]) -> str:
    payload = {
        "version": SNAPSHOT_VERSION,
        "decks": [deck.model_dump(mode="json") for deck in decks],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def parse_decks(text: str) -> List[Deck]:
    """Parse a snapshot; a bare list of decks (the older layout) is accepted too."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptStoreError(f"invalid JSON: {exc}") from exc
    if isinstance(data, dict):
        raw_decks = data.get("decks")
    else:
        raw_decks = data
    if not isinstance(raw_decks, list):
        raise CorruptStoreError("decks is not a list")
    try:
        return [Deck.model_validate(item) for item in raw_decks]
    except ValidationError as exc:
        raise CorruptStoreError(f"invalid deck record: {exc.error_count()} error(s)") from exc


class DeckStore:
    def __init__(
        self,
        path: Path,
        backup_dir: Optional[Path] = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        self.path = Path(path)
        self.backup_dir = Path(backup_dir) if backup_dir else self.path.parent / "backups"
        self.lock_timeout = lock_timeout
        self.last_load_status: Optional[LoadStatus] = None
        self.last_corrupt_backup: Optional[Path] = None
        self._unpreserved_corrupt = False
        self._lock = threading.RLock()

    @contextmanager
    def _locked(self, timeout: Optional[float] = None) -> Iterator[None]:
        wait = self.lock_timeout if timeout is None else timeout
        if not self._lock.acquire(timeout=wait):
            raise StoreLockTimeout(f"Timed out after {wait}s waiting for {self.path}")
        try:
            yield
        finally:
            self._lock.release()

    def load_all(self) -> List[Deck]:
        """Return every persisted deck, healing missing or corrupt storage to empty."""
        with self._locked():
            if not self.path.exists():
                self.last_load_status = LoadStatus.MISSING
                self._unpreserved_corrupt = False
                self._reset_storage()
                return []
            try:
                decks = parse_decks(self.path.read_text(encoding="utf-8"))
            except (CorruptStoreError, UnicodeDecodeError) as exc:
                self.last_load_status = LoadStatus.RECOVERED
                self.last_corrupt_backup = self._preserve_corrupt_file()
                if self.last_corrupt_backup is None:
                    # Without a copy the corrupt file is the only record; leave it in place.
                    self._unpreserved_corrupt = True
                    logger.warning("Deck store %s is corrupt (%s); left untouched", self.path, exc)
                    return []
                logger.warning(
                    "Deck store %s is corrupt (%s); preserved copy at %s and reset to empty",
                    self.path, exc, self.last_corrupt_backup,
                )
                self._unpreserved_corrupt = False
                self._reset_storage()
                return []
            self.last_load_status = LoadStatus.OK
            self._unpreserved_corrupt = False
            return decks

    def save_all(self, decks: Sequence[Deck]) -> None:
        """Atomically replace the snapshot with ``decks``."""
        with self._locked():
            if self._unpreserved_corrupt:
                raise StoreWriteError(
                    f"Refusing to overwrite {self.path}: it is corrupt and could not be backed up to {self.backup_dir}"
                )
            self._atomic_write(serialize_decks(decks))

    @contextmanager
    def transaction(self, timeout: Optional[float] = None) -> Iterator[List[Deck]]:
        """Hold the store lock across load, mutate and save.

        The yielded list is saved when the block exits normally and discarded
        when it raises.
        """
        with self._locked(timeout):
            decks = self.load_all()
            yield decks
            self.save_all(decks)

    def get_deck(self, deck_id: str) -> Deck:
        return find_deck(self.load_all(), deck_id)

    def _reset_storage(self) -> None:
        try:
            self._atomic_write(serialize_decks([]))
        except StoreWriteError as exc:
            logger.error("Could not initialise deck store %s: %s", self.path, exc)

    def _preserve_corrupt_file(self) -> Optional[Path]:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
        destination = self.backup_dir / f"corrupt-{timestamp}.json"
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.path, destination)
        except OSError as exc:
            logger.error("Could not preserve corrupt deck store %s: %s", self.path, exc)
            return None
        return destination

    def _file_mode(self) -> int:
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    def _atomic_write(self, text: str) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".decks-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise StoreWriteError(f"Could not write {self.path}: {exc}") from exc


def find_deck(decks: Sequence[Deck], deck_id: str) -> Deck:
    for deck in decks:
        if deck.id == deck_id:
            return deck
    raise DeckNotFound(deck_id)


def find_card(decks: Sequence[Deck], deck_id: str, card_id: str) -> Tuple[Deck, int, Card]:
    """Locate a card, returning its deck and position so callers can replace it."""
    deck = find_deck(decks, deck_id)
    for index, card in enumerate(deck.cards):
        if card.id == card_id:
            return deck, index, card
    raise CardNotFound(deck_id, card_id)
