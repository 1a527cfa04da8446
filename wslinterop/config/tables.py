from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from ..exceptions import ConfigValidationError

_VAR_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class DefaultParameterTable(Mapping[str, str]):
    """
    Default arguments per command name. Keys are matched case-sensitively.

    The reserved key "Disabled" switches off default arguments for every command
    when it holds a truthy value.
    """

    DISABLED_KEY = "Disabled"

    def __init__(self, table: Mapping[str, Any] | None = None):
        table = table or {}
        self.disabled = _is_truthy(table.get(self.DISABLED_KEY, False))
        self._entries: dict[str, str] = {}
        for command, value in table.items():
            if command == self.DISABLED_KEY:
                continue
            if isinstance(value, (list, tuple)):
                if not all(isinstance(item, str) for item in value):
                    raise ConfigValidationError(
                        f"Default parameters for {command!r} must be strings",
                        option="default_parameters",
                    )
                value = " ".join(value)
            elif not isinstance(value, str):
                raise ConfigValidationError(
                    f"Default parameters for {command!r} must be a string or a "
                    "list of strings",
                    option="default_parameters",
                )
            self._entries[command] = value

    def __getitem__(self, command: str) -> str:
        return self._entries[command]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, command: str) -> tuple[str, ...]:
        """
        The default argument words to inject for command. Empty if there are none or
        if the table is disabled.
        """
        if self.disabled:
            return ()
        return tuple(self._entries.get(command, "").split())


class EnvironmentTable(Mapping[str, str]):
    """
    Environment variables to set on the remote side for every invocation.
    """

    def __init__(self, table: Mapping[str, Any] | None = None):
        self._entries: dict[str, str] = {}
        for name, value in (table or {}).items():
            if not _VAR_NAME_PATTERN.match(name):
                raise ConfigValidationError(
                    f"Invalid environment variable name {name!r}",
                    option="environment",
                )
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                raise ConfigValidationError(
                    f"Value for environment variable {name!r} must be a string",
                    option="environment",
                )
            self._entries[name] = str(value)

    def __getitem__(self, name: str) -> str:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def assignments(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._entries.items())
