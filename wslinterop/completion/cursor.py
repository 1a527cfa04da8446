from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ..helpers.formatting import unquote

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True)
class Token:
    """
    A word of the host's command line with its [start, end) offsets in the line.
    """

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class CursorContext:
    line: str
    tokens: tuple[Token, ...]
    cursor: int
    index: int
    previous_word: str
    word: str

    @property
    def command(self) -> str:
        return self.tokens[0].text

    @property
    def words(self) -> tuple[str, ...]:
        """
        The words of the line as the remote completion function should see them,
        including an empty word for a slot that hasn't been typed yet.
        """
        words = [token.text for token in self.tokens]
        if self.is_new_word:
            words.insert(self.index, "")
        return tuple(words)

    @property
    def is_new_word(self) -> bool:
        return (
            self.index >= len(self.tokens)
            or self.tokens[self.index].start > self.cursor
        )

    @property
    def other_words(self) -> frozenset[str]:
        """
        Texts of the tokens on the line other than the one being completed
        """
        return frozenset(
            token.text
            for position, token in enumerate(self.tokens)
            if self.is_new_word or position != self.index
        )


def locate_tokens(line: str, texts: Iterable[str]) -> tuple[Token, ...]:
    """
    Find the span of each token text in line by scanning forward from the end of
    the previous token.
    """
    result = []
    position = 0
    for text in texts:
        start = line.find(text, position)
        if start < 0:
            raise ValueError(f"Token {text!r} not found in {line!r}")
        result.append(Token(text, start, start + len(text)))
        position = start + len(text)
    return tuple(result)


def resolve_cursor(
    line: str, tokens: Sequence[Token], cursor: int
) -> CursorContext | None:
    """
    Work out which word of line is being completed given the cursor offset.

    Offsets are 0-based and a token's end is the offset just past its last
    character, so a cursor at the very end of the line right after the last token
    continues that token: `ls -a` with the cursor at 5 completes `-a`, while
    `ls -a ` with the cursor at 6 completes a new third word.

    A cursor in the whitespace before a token completes a new word in that
    token's slot, and a cursor past the last token completes a new trailing word.
    Returns None if there is no command to complete for.
    """
    tokens = tuple(tokens)
    if not tokens:
        return None

    index, word = len(tokens), ""
    for position, token in enumerate(tokens[1:], start=1):
        if cursor < token.start:
            index = position
            break
        if cursor <= token.end:
            index, word = position, token.text[: cursor - token.start]
            break

    context = CursorContext(
        line=line,
        tokens=tokens,
        cursor=cursor,
        index=index,
        previous_word=tokens[index - 1].text,
        word=word,
    )
    return _merge_quoted_path(context)


def _merge_quoted_path(context: CursorContext) -> CursorContext:
    """
    Completing inside a quoted path, e.g. '/mnt/c/Program Files'/<TAB>, the host
    splits the quoted part and the continuation into separate tokens. Merge them
    back into one word so the remote side completes the whole path.
    """
    index, tokens = context.index, context.tokens
    if index < 2 or index >= len(tokens):
        return context

    current, previous = tokens[index], tokens[index - 1]
    if not (current.text.startswith("/") and current.start == previous.end):
        return context

    merged_word = unquote(previous.text) + context.word
    merged_text = unquote(previous.text) + current.text
    merged = Token(merged_text, previous.start, previous.start + len(merged_text))
    shift = len(merged_text) - (current.end - previous.start)

    return replace(
        context,
        line=(
            context.line[: previous.start] + merged_text + context.line[current.end :]
        ),
        tokens=(
            *tokens[: index - 1],
            merged,
            *(
                Token(token.text, token.start + shift, token.end + shift)
                for token in tokens[index + 1 :]
            ),
        ),
        cursor=previous.start + len(merged_word),
        index=index - 1,
        previous_word=tokens[index - 2].text,
        word=merged_word,
    )
