from __future__ import annotations

import re
import shlex
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..bridge.request import RemoteRequest, assign_array, assign_variable
from ..helpers.formatting import format_argument
from .cursor import resolve_cursor
from .resolver import load_completion_preamble

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..bridge import Bridge
    from ..io import InteropIO
    from .cursor import CursorContext, Token
    from .resolver import CompletionFunctionResolver

_OPTION_VALUE_PATTERN = re.compile(r"^(.*=)")


@dataclass(frozen=True)
class CompletionCandidate:
    """
    text is inserted into the command line, display is shown in the completion menu
    """

    text: str
    display: str


def parse_candidates(output: str) -> list[str]:
    """
    Split the remote output into unique candidates.

    Candidates are unique case-sensitively, but sorted so that those differing only
    by case end up next to each other.
    """
    lines = {line for line in output.splitlines() if line.strip()}
    return sorted(lines, key=lambda line: (line.casefold(), line.swapcase()))


def disambiguate(
    candidates: Iterable[CompletionCandidate],
) -> list[CompletionCandidate]:
    """
    The host treats candidates that only differ by case as duplicates, so mark each
    one that collides with its predecessor with a trailing space in its display
    text. The insertable text is left untouched.
    """
    result: list[CompletionCandidate] = []
    shown: set[str] = set()
    previous_text = None
    for candidate in candidates:
        if previous_text is not None and (
            candidate.text.casefold() == previous_text.casefold()
        ):
            display = candidate.display + " "
            while display.casefold() in shown:
                display += " "
            candidate = CompletionCandidate(candidate.text, display)
        previous_text = candidate.text
        shown.add(candidate.display.casefold())
        result.append(candidate)
    return result


class CompletionBridge:
    """
    Drives bash programmable completion in the remote environment for a command line
    typed in the host shell.
    """

    def __init__(
        self,
        bridge: Bridge,
        resolver: CompletionFunctionResolver,
        *,
        framework: str,
        io: InteropIO,
    ):
        self._bridge = bridge
        self._resolver = resolver
        self._framework = framework
        self._io = io

    def complete(
        self, line: str, tokens: Sequence[Token], cursor: int
    ) -> list[CompletionCandidate]:
        context = resolve_cursor(line, tokens, cursor)
        if context is None:
            return []

        self._io.print_debug(
            f" . Completing word {context.index} ({context.word!r}) after "
            f"{context.previous_word!r}"
        )

        function_name = self._resolver.resolve(context.command)
        result = self._bridge.send(self.build_request(context, function_name))
        return self.build_candidates(context, parse_candidates(result.output))

    def build_request(
        self, context: CursorContext, function_name: str
    ) -> RemoteRequest:
        return RemoteRequest(
            preamble=(
                *load_completion_preamble(self._framework, context.command),
                assign_variable("COMP_LINE", context.line),
                assign_array("COMP_WORDS", context.words),
                assign_variable("COMP_CWORD", context.index),
                assign_variable("COMP_POINT", context.cursor),
                'bind "set completion-ignore-case on" 2>/dev/null',
            ),
            argv=(
                function_name,
                shlex.quote(context.command),
                shlex.quote(context.word),
                shlex.quote(context.previous_word),
                "2>/dev/null",
            ),
            epilogue=("IFS=$'\\n'", 'echo "${COMPREPLY[*]}"'),
        )

    def build_candidates(
        self, context: CursorContext, completions: Iterable[str]
    ) -> list[CompletionCandidate]:
        option_match = _OPTION_VALUE_PATTERN.match(context.word)
        if option_match:
            # Keep the --option= part of the word when completing its value
            prefix = option_match[1]
            candidates = (
                CompletionCandidate(format_argument(prefix + value, True), value)
                for value in completions
            )
        else:
            other_tokens = context.other_words
            candidates = (
                CompletionCandidate(text, text)
                for value, text in (
                    (value, format_argument(value, True)) for value in completions
                )
                if value not in other_tokens and text not in other_tokens
            )

        return disambiguate(candidates)
