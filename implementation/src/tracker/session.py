"""Upload handling: one SaveState per session, replaced on each new file.

Reading the file is the only await. If a second upload starts while the
first is still reading, the first result is dropped when it arrives
(last-write-wins).
"""
from __future__ import annotations

from typing import Awaitable, Callable

from tracker.errors import DecodeError
from tracker.evaluator import evaluate_catalog
from tracker.save import SaveState, decode_save
from tracker.types import Catalog, CompletionReport


class TrackerSession:
    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self.save_state: SaveState | None = None
        self.last_error: str | None = None
        self._generation = 0

    async def upload(self, read_bytes: Callable[[], Awaitable[bytes]]) -> bool:
        """Read, decode and install a save. Returns True if this upload was applied.

        Errors raised by `read_bytes` propagate; decode failures are reported
        through `last_error` and clear the current save.
        """
        self._generation += 1
        generation = self._generation

        raw = await read_bytes()
        if generation != self._generation:
            print(f"[session] Discarding stale upload #{generation}")
            return False

        try:
            state = decode_save(raw)
        except DecodeError as e:
            print(f"[session] Could not read save file: {e}")
            self.save_state = None
            self.last_error = str(e)
            return False

        self.save_state = state
        self.last_error = None
        return True

    def report(self, act_filter: int | None = None) -> CompletionReport | None:
        if self.save_state is None:
            return None
        return evaluate_catalog(self.catalog, self.save_state, act_filter)
