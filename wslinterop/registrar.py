from __future__ import annotations

import re
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from .exceptions import InteropException

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from .bridge import BridgeResult
    from .completion import CompletionBridge, CompletionCandidate, Token
    from .invoker import CommandInvoker

_COMMAND_NAME_PATTERN = re.compile(r"^[\w.+-]+$")


@dataclass(frozen=True)
class RegisteredCommand:
    name: str
    execute: Callable[..., BridgeResult]
    complete: Callable[[str, Sequence[Token], int], list[CompletionCandidate]]


class CommandRegistrar:
    """
    Binds command names to the invoker for running them and to the completion
    bridge for completing their arguments.
    """

    def __init__(self, invoker: CommandInvoker, completer: CompletionBridge):
        self._invoker = invoker
        self._completer = completer
        self.commands: dict[str, RegisteredCommand] = {}

    def register(self, names: Iterable[str]) -> dict[str, RegisteredCommand]:
        names = tuple(names)
        if not names:
            raise InteropException("No command names given")

        for name in names:
            if not _COMMAND_NAME_PATTERN.match(name):
                raise InteropException(f"Invalid command name {name!r}")

        for name in names:
            if name not in self.commands:
                self.commands[name] = RegisteredCommand(
                    name=name,
                    execute=partial(self._invoker.invoke, name),
                    complete=self._completer.complete,
                )
        return {name: self.commands[name] for name in names}

    def __getitem__(self, name: str) -> RegisteredCommand:
        return self.commands[name]

    def __contains__(self, name: str) -> bool:
        return name in self.commands

    def render_script(self, names: Iterable[str], program: str = "wslinterop") -> str:
        """
        Register names and return the PowerShell snippet that hooks them into the
        host shell.
        """
        from .completion.powershell import get_powershell_registration_script

        return get_powershell_registration_script(
            tuple(self.register(names)), program=program
        )
