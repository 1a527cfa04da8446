from __future__ import annotations

import os
import sys
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from pastel import Pastel

DEBUG_VERBOSITY = 3

# name -> (foreground, options)
STYLES: dict[str, tuple[str, list[str]]] = {
    "u": ("default", ["underline"]),
    "hl": ("light_gray", []),
    "em": ("cyan", []),
    "em2": ("cyan", ["italic"]),
    "h2": ("default", ["bold"]),
    "action": ("light_blue", []),
    "error": ("light_red", ["bold"]),
    "warning": ("yellow", ["bold"]),
}


def debug_forced() -> bool:
    return os.environ.get("WSLINTEROP_DEBUG", "0") == "1"


def guess_ansi_support(file: IO | None) -> bool:
    if os.environ.get("NO_COLOR"):
        # https://no-color.org/
        return False

    isatty = getattr(file, "isatty", None)
    if isatty is None or not isatty():
        return False

    if sys.platform == "win32":
        # Plain conhost only renders escape sequences via ANSICON
        return "WT_SESSION" in os.environ or "ANSICON" in os.environ
    return True


class InteropIO:
    """
    The output streams, verbosity level and message styling shared by every part of
    the app.

    Verbosity runs from -2 (errors only) up to 3 (debug). It is the sum of a
    baseline, which comes from config, and an offset, which comes from -v/-q on the
    command line. Setting WSLINTEROP_DEBUG=1 pins it at debug level.
    """

    output: IO
    error_output: IO
    input: IO
    ansi_enabled: bool

    _color: Pastel
    _default_io: InteropIO | None = None

    def __init__(
        self,
        *,
        output: IO | None = None,
        error: IO | None = None,
        input: IO | None = None,
        baseline_verbosity: int = 0,
        ansi: bool | None = None,
        make_default: bool = True,
    ):
        self.output = output or sys.stdout
        self.error_output = error or sys.stderr
        self.input = input or sys.stdin
        self._baseline = baseline_verbosity
        self._offset: int | None = None
        self._debug_forced = debug_forced()
        self.configure(
            ansi_enabled=guess_ansi_support(self.output) if ansi is None else ansi
        )

        if make_default:
            InteropIO._default_io = self

    @classmethod
    def get_default_io(cls) -> InteropIO:
        if cls._default_io is None:
            cls._default_io = cls()
        return cls._default_io

    @property
    def verbosity(self) -> int:
        if self._debug_forced:
            return DEBUG_VERBOSITY
        return self._baseline + (self._offset or 0)

    @property
    def verbosity_offset_was_set(self) -> bool:
        return self._offset is not None

    def configure(
        self,
        *,
        ansi_enabled: bool | None = None,
        baseline: int | None = None,
        offset: int | None = None,
    ):
        if ansi_enabled is not None:
            self.ansi_enabled = ansi_enabled
            self._color = self._build_color(ansi_enabled)
        if baseline is not None:
            self._baseline = baseline
        if offset is not None:
            self._offset = offset

    @staticmethod
    def _build_color(ansi_enabled: bool) -> Pastel:
        from pastel import Pastel

        color = Pastel(ansi_enabled)
        for name, (foreground, options) in STYLES.items():
            color.add_style(name, foreground, options=options or None)
        return color

    def is_enabled(self, message_verbosity: int) -> bool:
        return message_verbosity <= self.verbosity

    def is_debug_enabled(self) -> bool:
        return self.is_enabled(DEBUG_VERBOSITY)

    def print(self, message: str, *, message_verbosity: int = 0, end: str = "\n"):
        if self.is_enabled(message_verbosity):
            self.write_out(message, end=end)

    def print_warning(self, message: str, *, message_verbosity: int = -1):
        if self.is_enabled(message_verbosity):
            self.write_err(f"<warning>Warning:</warning> {message}")

    def print_error(self, message: str, *, message_verbosity: int = -2):
        if self.is_enabled(message_verbosity):
            self.write_err(message)

    def print_action(self, arrow: str, action: str, *, message_verbosity: int = 1):
        """
        Announce a command line that is about to be sent to the bridge
        """
        if self.is_enabled(message_verbosity):
            self.write_err(f"<hl>wsl {arrow}</hl> <action>{action}</action>")

    def print_debug(self, message: str):
        if self.is_debug_enabled():
            self.write_err(message)

    def write_out(self, message: str, *, end: str = "\n"):
        self._write(self.output, self._color.colorize(message), end)

    def write_err(self, message: str, *, end: str = "\n"):
        self._write(self.error_output, self._color.colorize(message), end)

    def write_raw(self, message: str, *, end: str = "\n"):
        """
        Write to the output stream without interpreting markup, for machine readable
        output such as completion candidates.
        """
        self._write(self.output, message, end)

    @staticmethod
    def _write(stream: IO, text: str, end: str):
        stream.write(text + end)
        stream.flush()
