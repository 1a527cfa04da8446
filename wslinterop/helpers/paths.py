from __future__ import annotations

from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import TYPE_CHECKING

from .formatting import format_argument

if TYPE_CHECKING:
    from ..bridge import Bridge
    from ..io import InteropIO


def is_qualified_path(token: str) -> bool:
    """
    True for absolute windows paths with a drive or UNC qualifier, e.g. C:\\Users
    """
    path = PureWindowsPath(token)
    return bool(path.drive) and path.is_absolute()


def is_relative_path(token: str) -> bool:
    return not (
        PureWindowsPath(token).drive
        or PureWindowsPath(token).root
        or PurePosixPath(token).is_absolute()
        or token.startswith("~")
    )


class PathTranslator:
    """
    Rewrites arguments that refer to local files so that they resolve in the remote
    environment, and escapes everything for the remote shell.
    """

    def __init__(self, bridge: Bridge, *, cwd: Path | None = None, io: InteropIO):
        self._bridge = bridge
        self._cwd = cwd or Path().resolve()
        self._io = io

    def translate(self, token: str) -> str:
        token = token.strip()
        if not token:
            return format_argument(token)

        if is_qualified_path(token):
            mapped = self._bridge.pathmap(token)
            if mapped is None:
                mapped = token.replace("\\", "/")
            return format_argument(mapped.replace("\\", "/"))

        if self._exists_locally(token):
            # Relative paths resolve by themselves once the remote working directory
            # is mapped from ours
            return format_argument(token.replace("\\", "/"))

        return format_argument(token)

    def _exists_locally(self, token: str) -> bool:
        if not is_relative_path(token):
            return False
        try:
            return self._cwd.joinpath(token).exists()
        except (OSError, ValueError) as error:
            self._io.print_debug(f" ! Not treating {token!r} as a path: {error}")
            return False
