import re

# Characters the remote shell would otherwise treat as word breaks or syntax
SPECIAL_CHARS = " ,(){}|;"

INTERACTIVE_ESCAPE = "`"
EXECUTION_ESCAPE = "\\"

_QUOTED_PATTERN = re.compile(r"^(?:'[^']*'|\"[^\"]*\")$", re.DOTALL)
_BACKSLASH_ALNUM_PATTERN = re.compile(r"(?<!\\)\\(?=[A-Za-z0-9])")
_SPECIALS_PATTERNS = {
    escape: re.compile(
        rf"(?<!{re.escape(escape)})([{re.escape(SPECIAL_CHARS)}])"
    )
    for escape in (INTERACTIVE_ESCAPE, EXECUTION_ESCAPE)
}


def is_quoted(token: str) -> bool:
    """
    True if the whole token is wrapped in one matching pair of single or double
    quotes.
    """
    return len(token) >= 2 and bool(_QUOTED_PATTERN.match(token))


def unquote(token: str) -> str:
    if is_quoted(token):
        return token[1:-1]
    return token


def format_argument(token: str, interactive: bool = False) -> str:
    """
    Produce the representation of token to hand to the remote shell.

    interactive selects the profile for text that is inserted into the host's
    command line by completion: tokens with spaces are single quoted as a whole
    and other special characters are escaped with a backtick so the host's line
    editor leaves them alone. Otherwise special characters are escaped with a
    backslash so the remote shell receives them literally.

    Tokens that are already quoted are returned unchanged, as are tokens that
    contain no special characters. An empty token becomes '' for execution so it
    still occupies its position once the words are joined.
    """
    token = token.strip()

    if not token:
        return token if interactive else "''"

    if is_quoted(token):
        return token

    if interactive and " " in token:
        return f"'{token}'"

    escape = INTERACTIVE_ESCAPE if interactive else EXECUTION_ESCAPE
    # A backslash before a letter or digit would otherwise be consumed as an
    # escape of that character by the remote shell, e.g. in regex patterns
    token = _BACKSLASH_ALNUM_PATTERN.sub(r"\\\\", token)
    return _SPECIALS_PATTERNS[escape].sub(lambda match: escape + match[1], token)
