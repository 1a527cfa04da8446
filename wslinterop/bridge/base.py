from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
from typing import IO, TYPE_CHECKING

from ..exceptions import BridgeUnavailableError
from .result import BridgeResult

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from ..io import InteropIO
    from .request import RemoteRequest

DEFAULT_BRIDGE = "wsl.exe"


class Bridge:
    """
    Runs command lines in the remote environment via the bridge executable.

    The bridge receives a flat list of words which it joins with spaces and hands to
    the remote login shell, so every word must already be escaped for that shell.
    """

    def __init__(
        self,
        executable: str = DEFAULT_BRIDGE,
        *,
        io: InteropIO,
        cwd: Path | None = None,
    ):
        self.executable = executable
        self.cwd = cwd
        self._io = io
        self._resolved_executable: str | None = None

    def resolve_executable(self) -> str:
        if self._resolved_executable is None:
            resolved = shutil.which(self.executable)
            if resolved is None:
                raise BridgeUnavailableError(
                    f"Bridge executable {self.executable!r} could not be found"
                )
            self._resolved_executable = resolved
        return self._resolved_executable

    def command_line(self, words: Sequence[str]) -> str | list[str]:
        """
        On windows the words are joined into the command line verbatim, since
        letting subprocess quote each word would turn a word like `NAME='a b'` into
        a single double quoted argument for the remote shell.
        """
        executable = self.resolve_executable()
        if sys.platform == "win32":
            return " ".join((subprocess.list2cmdline([executable]), *words))
        return [executable, *words]

    def run(
        self,
        words: Sequence[str],
        input: bytes | IO | None = None,
        *,
        capture: bool = True,
    ) -> BridgeResult:
        """
        Make exactly one call to the bridge and wait for it to exit.

        input may be bytes to write to the bridge's stdin or a file object to
        attach as its stdin. If capture is False then output streams are inherited
        from this process.
        """
        cmd = self.command_line(words)
        self._io.print_debug(
            f" . Bridge call: {cmd if isinstance(cmd, str) else shlex.join(cmd)}"
        )

        popen_kwargs: dict = {"cwd": self.cwd}
        if isinstance(input, bytes):
            popen_kwargs["input"] = input
        elif input is not None:
            popen_kwargs["stdin"] = input
        if capture:
            popen_kwargs["stdout"] = subprocess.PIPE
            popen_kwargs["stderr"] = subprocess.PIPE

        try:
            proc = subprocess.run(cmd, check=False, **popen_kwargs)
        except OSError as error:
            raise BridgeUnavailableError(
                f"Bridge executable {self.executable!r} failed to start", error
            ) from error

        self._io.print_debug(f" . Bridge exited with code {proc.returncode}")
        return BridgeResult(proc.returncode, proc.stdout, proc.stderr)

    def send(
        self,
        request: RemoteRequest,
        input: bytes | IO | None = None,
        *,
        capture: bool = True,
    ) -> BridgeResult:
        return self.run(request.words(), input=input, capture=capture)

    def pathmap(self, path: str) -> str | None:
        """
        Map a qualified windows path to its mount point in the remote environment
        using wslpath. Returns None if the remote side could not map it.
        """
        result = self.run(["wslpath", "-u", shlex.quote(path.replace("\\", "/"))])
        mapped = result.output.strip()
        if result.non_zero_exit_code or not mapped:
            self._io.print_debug(f" ! wslpath could not map {path!r}")
            return None
        return mapped
