"""Strictly increasing nonce generation for private calls."""

from __future__ import annotations

import json
import os
import threading
import time
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

from kraken_client.core.logger import logger
from kraken_client.errors import NonceStoreError


@runtime_checkable
class NonceSource(Protocol):
    """Anything that hands out strictly increasing integers."""

    def next_nonce(self) -> int:
        ...


class ClockNonceSource:
    """
    Wall-clock nanoseconds, serialized behind a lock.

    Ties and backwards clock steps are broken with `last + 1`, so two calls
    sharing this source never see equal or decreasing values. Across process
    restarts a clock step can still go backwards; use CounterNonceSource there.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def next_nonce(self) -> int:
        with self._lock:
            nonce = max(time.time_ns(), self._last + 1)
            self._last = nonce
            return nonce


class CounterNonceSource:
    """
    Explicitly incrementing counter persisted to a JSON file.

    One file per credential set. The stored value is re-read on every call
    and each new value is written before it is handed out, so a restart (or
    another instance on the same file) resumes above the last issued nonce.
    """

    def __init__(self, path: Path, seed_from_clock: bool = True) -> None:
        self.path = Path(path)
        self.seed_from_clock = seed_from_clock
        self._lock = threading.Lock()
        self._last: Optional[int] = None

    @classmethod
    def for_credentials(cls, store_dir: Path, fingerprint: str) -> "CounterNonceSource":
        return cls(Path(store_dir) / f"nonce_{fingerprint}.json")

    def _load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return int(data.get("last_nonce", 0))
        except (OSError, ValueError, TypeError) as e:
            raise NonceStoreError(f"Cannot read nonce store {self.path}: {e}", path=self.path) from e

    def _save(self, nonce: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump({"last_nonce": nonce}, f)
        os.replace(tmp, self.path)

    def next_nonce(self) -> int:
        with self._lock:
            stored = self._load()
            if self._last is None:
                logger.debug(f"Nonce counter resumed at {stored} from {self.path}")
            nonce = max(stored, self._last or 0) + 1
            if self.seed_from_clock:
                nonce = max(nonce, time.time_ns())
            self._save(nonce)
            self._last = nonce
            return nonce


_shared_sources: Dict[Tuple[str, Optional[str]], NonceSource] = {}
_shared_lock = threading.Lock()


def shared_nonce_source(fingerprint: str, store_dir: Optional[Path] = None) -> NonceSource:
    """
    Return the process-wide source for one credential set.

    Every client built for the same API key (and nonce store) draws from the
    same source, so their nonces never collide.
    """
    store = str(Path(store_dir).resolve()) if store_dir else None
    key = (fingerprint, store)
    with _shared_lock:
        source = _shared_sources.get(key)
        if source is None:
            if store_dir:
                source = CounterNonceSource.for_credentials(Path(store_dir), fingerprint)
            else:
                source = ClockNonceSource()
            _shared_sources[key] = source
        return source
