from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def env_assignment(name: str, value: str) -> str:
    """
    A NAME='value' word that sets an environment variable for a single command.
    """
    return "%s='%s'" % (name, value.replace("'", "'\\''"))


def assign_variable(name: str, value: str | int) -> str:
    if isinstance(value, int):
        return f"{name}={value}"
    return f"{name}={shlex.quote(value)}"


def assign_array(name: str, values: Iterable[str]) -> str:
    return f"{name}=({' '.join(shlex.quote(value) for value in values)})"


@dataclass(frozen=True)
class RemoteRequest:
    """
    A command line for the remote shell, kept structured until the moment it is
    handed to the bridge.

    preamble and epilogue hold complete shell statements that run before and
    after the command. environment entries are prefixed to the command as
    NAME='value' assignments. argv holds the command words, which must already
    be escaped for the remote shell.
    """

    argv: tuple[str, ...]
    preamble: tuple[str, ...] = ()
    environment: tuple[tuple[str, str], ...] = ()
    epilogue: tuple[str, ...] = ()

    def words(self) -> list[str]:
        result = [f"{statement};" for statement in self.preamble]
        result.extend(env_assignment(name, value) for name, value in self.environment)
        result.extend(self.argv)
        for statement in self.epilogue:
            if result:
                result[-1] += ";"
            result.append(statement)
        return result

    def serialize(self) -> str:
        """
        The command line as the remote shell will see it once the bridge has joined
        the words.
        """
        return " ".join(self.words())
