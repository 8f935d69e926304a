"""Persistence for AppData.

JsonFileStorage reads and writes the whole AppData tree under one storage key
in a JSON file. SnapshotWriter sits between the store and the storage: it
saves in the background and only ever writes the newest snapshot.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from chestnut.config import STORAGE_KEY, STORAGE_PATH
from chestnut.domain import DEFAULT_BUDGET, AppData, DataFormatError, empty_app_data

logger = logging.getLogger(__name__)


class JsonFileStorage:
    def __init__(self, path: Optional[Path] = None, key: str = STORAGE_KEY,
                 default_budget: int = DEFAULT_BUDGET):
        self.path = Path(path or STORAGE_PATH)
        self.key = key
        self.default_budget = default_budget

    async def load(self) -> AppData:
        """Load the stored AppData, or an empty one if nothing usable is stored.

        A missing file means "no data yet". Unreadable or malformed content
        also falls back to the empty default, but is logged as a warning.
        """
        return await asyncio.to_thread(self._load_sync)

    async def save(self, data: AppData) -> None:
        await asyncio.to_thread(self._save_sync, data)

    def _load_sync(self) -> AppData:
        if not self.path.exists():
            logger.info("No stored data at %s, starting empty", self.path)
            return empty_app_data(self.default_budget)
        try:
            with self.path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Could not read %s (%s), starting empty", self.path, e)
            return empty_app_data(self.default_budget)

        raw = document.get(self.key) if isinstance(document, dict) else None
        if raw is None:
            logger.info("No %r entry in %s, starting empty", self.key, self.path)
            return empty_app_data(self.default_budget)
        try:
            data = AppData.from_dict(raw)
        except DataFormatError as e:
            logger.warning("Stored data in %s is corrupt (%s), starting empty", self.path, e)
            return empty_app_data(self.default_budget)
        logger.info("Loaded %d week(s) from %s", len(data.weeks), self.path)
        return data

    def _save_sync(self, data: AppData) -> None:
        target = self.path.resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        document = {}
        # other keys in the same file are left alone
        if target.exists():
            try:
                with target.open("r", encoding="utf-8") as f:
                    existing = json.load(f)
                if isinstance(existing, dict):
                    document = existing
            except (json.JSONDecodeError, UnicodeDecodeError, OSError):
                document = {}
        document[self.key] = data.to_dict()

        # atomic write: write to temp file then move
        fd, tmp_path = tempfile.mkstemp(prefix="tmp_chestnut_", dir=target.parent, text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("Saved %d week(s) to %s", len(data.weeks), target)


class SnapshotWriter:
    """Fire-and-forget saving with last-write-wins semantics.

    At most one snapshot is pending. A snapshot submitted while a save is in
    flight replaces the pending one, so intermediate snapshots may never be
    written. Failed saves are logged and dropped.
    """

    def __init__(self, storage):
        self.storage = storage
        self._pending: Optional[AppData] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def submit(self, data: AppData) -> None:
        self._pending = data
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no event loop in this thread (e.g. a Streamlit script run)
            asyncio.run(self._drain())
            return
        if self._task is None or self._task.done():
            self._task = loop.create_task(self._drain())

    async def flush(self) -> None:
        """Wait until every submitted snapshot has been written or dropped."""
        while self._task is not None and not self._task.done():
            await self._task
        if self._pending is not None:
            await self._drain()

    async def _drain(self) -> None:
        while self._pending is not None:
            snapshot, self._pending = self._pending, None
            try:
                await self.storage.save(snapshot)
            except Exception:
                logger.exception("Failed to save app data; this snapshot is dropped")
