from __future__ import annotations

import re
import shlex
from typing import TYPE_CHECKING

from ..bridge.request import RemoteRequest

if TYPE_CHECKING:
    from ..bridge import Bridge
    from ..io import InteropIO
    from .cache import CompletionFunctionCache

# bash-completion's function for completing file paths only
FALLBACK_FUNCTION = "_minimal"

_FUNCTION_PATTERN = re.compile(r"^complete\s.*?-F\s+([A-Za-z_][\w:.-]*)(?:\s|$)")


def load_completion_preamble(framework: str, command: str) -> tuple[str, ...]:
    quoted_command = shlex.quote(command)
    return (
        f". {shlex.quote(framework)} 2>/dev/null",
        f"__load_completion {quoted_command} 2>/dev/null",
    )


def parse_completion_function(output: str) -> str | None:
    """
    Extract the function name from the output of `complete -p COMMAND`, e.g.
    "complete -F _longopt ls" -> "_longopt"
    """
    for line in output.splitlines():
        if match := _FUNCTION_PATTERN.match(line.strip()):
            return match[1]
    return None


class CompletionFunctionResolver:
    """
    Finds the bash completion function registered for a command in the remote
    environment, asking the remote side at most once per command.
    """

    def __init__(
        self,
        bridge: Bridge,
        cache: CompletionFunctionCache,
        *,
        framework: str,
        io: InteropIO,
    ):
        self._bridge = bridge
        self._cache = cache
        self._framework = framework
        self._io = io

    def resolve(self, command: str) -> str:
        self._cache.load()

        if (cached := self._cache.get(command)) is not None:
            return cached

        function_name = self._query(command) or FALLBACK_FUNCTION
        self._io.print_debug(
            f" + Resolved completion function {function_name!r} for {command!r}"
        )
        self._cache.put(command, function_name)
        return function_name

    def _query(self, command: str) -> str | None:
        request = RemoteRequest(
            argv=("complete", "-p", shlex.quote(command), "2>/dev/null"),
            preamble=load_completion_preamble(self._framework, command),
        )
        result = self._bridge.send(request)
        if result.non_zero_exit_code:
            return None
        return parse_completion_function(result.output)
