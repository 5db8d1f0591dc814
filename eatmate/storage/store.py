"""String key-value persistence for user preferences.

Mirrors the async get/set interface of a device key-value store. The JSON
file store keeps one JSON object on disk and does its file IO in a worker
thread so the event loop never blocks.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional, Protocol, Union

from eatmate.utils.logger import get_logger

logger = get_logger("eatmate.storage")


class KeyValueStore(Protocol):
    async def get_item(self, key: str) -> Optional[str]:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store; contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store backed by a JSON object file.

    A missing file reads as empty. Errors reading or writing the file
    propagate; callers decide whether they are fatal.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Preference file {self.path} does not hold a JSON object")
        return data

    def _write(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        tmp_path.replace(self.path)

    async def get_item(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read)
        value = data.get(key)
        return None if value is None else str(value)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)
        logger.debug(f"Stored preference {key!r} in {self.path}")
