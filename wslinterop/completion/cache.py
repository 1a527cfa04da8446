from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from ..io import InteropIO


class CompletionFunctionCache:
    """
    Maps command names to the name of the remote completion function for them.

    This base implementation only lives in memory. Entries are never invalidated:
    to pick up changed completion definitions the store has to be cleared.
    """

    def __init__(self):
        self._entries: dict[str, str] = {}
        self.loaded = False

    def load(self):
        """
        Populate the cache from its backing store. Only the first call has an effect.
        """
        if self.loaded:
            return
        self._entries.update(self._read())
        self.loaded = True

    def get(self, command: str) -> str | None:
        self.load()
        return self._entries.get(command)

    def put(self, command: str, function_name: str):
        self.load()
        self._entries[command] = function_name
        self._write(self._entries)

    def __contains__(self, command: str) -> bool:
        return self.get(command) is not None

    def __len__(self) -> int:
        self.load()
        return len(self._entries)

    def _read(self) -> dict[str, str]:
        return {}

    def _write(self, entries: dict[str, str]):
        pass


class CompletionFunctionFileCache(CompletionFunctionCache):
    """
    A completion function cache persisted as a json object in a file. Every put is
    written through to the file immediately.
    """

    def __init__(self, path: Path, *, io: InteropIO):
        super().__init__()
        self.path = path
        self._io = io

    def _read(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}

        try:
            with self.path.open(encoding="utf-8") as cache_file:
                content = json.load(cache_file)
        except (OSError, ValueError) as error:
            self._io.print_debug(
                f" ! Ignoring unreadable completion cache at {self.path}: {error}"
            )
            return {}

        if not isinstance(content, dict) or not all(
            isinstance(key, str) and isinstance(value, str)
            for key, value in content.items()
        ):
            self._io.print_debug(
                f" ! Ignoring malformed completion cache at {self.path}"
            )
            return {}

        self._io.print_debug(
            f" + Loaded {len(content)} completion functions from {self.path}"
        )
        return content

    def _write(self, entries: dict[str, str]):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            with tmp_path.open("w", encoding="utf-8") as cache_file:
                json.dump(entries, cache_file, indent=2, sort_keys=True)
            tmp_path.replace(self.path)
        except OSError as error:
            self._io.print_warning(
                f"Failed to save completion cache to {str(self.path)!r}: {error}"
            )
