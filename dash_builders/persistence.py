"""Debounced persistence of the webhook URL.

``PersistenceScheduler`` decides *when* to write: one write per quiet
period, last value wins.  ``UrlStore`` is the durable key/value file it
writes to; the page reads it once at startup.
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path

from ._constants import DEBOUNCE_SECONDS, WEBHOOK_URL_KEY


class UrlStore:
    """Tiny JSON-file key/value store, one string per key."""

    def __init__(self, path):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _read_all(self) -> dict:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            print(f"[dash-builders] Could not read {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key=WEBHOOK_URL_KEY, default=""):
        with self._lock:
            value = self._read_all().get(key, default)
        return value if isinstance(value, str) else default

    def set(self, value, key=WEBHOOK_URL_KEY) -> None:
        """Write *value* under *key*, replacing the file atomically."""
        with self._lock:
            data = self._read_all()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp, self.path)


class PersistenceScheduler:
    """Debounce writes: wait *delay* seconds after the latest change.

    Each :meth:`schedule` cancels the pending write and starts a new timer.
    A generation counter guards against a timer that fired just before
    being superseded.
    """

    def __init__(self, write, *, delay=DEBOUNCE_SECONDS, timer_factory=threading.Timer):
        self._write = write
        self._delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._generation = 0
        self._pending = None
        self._has_pending = False

    def schedule(self, value) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
            self._pending = value
            self._has_pending = True
            timer = self._timer_factory(self._delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, generation) -> None:
        with self._lock:
            if not self._has_pending or generation != self._generation:
                return
            self._timer = None
            value, self._pending, self._has_pending = self._pending, None, False
        try:
            self._write(value)
        except OSError as exc:
            print(f"[dash-builders] Persisting webhook URL failed: {exc}")

    def cancel(self) -> None:
        """Drop the pending write, if any."""
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
            self._has_pending = False

    close = cancel
