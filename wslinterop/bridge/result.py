from typing import NamedTuple


class BridgeResult(NamedTuple):
    """
    The outcome of one bridge call. Output streams are None when they were not
    captured, i.e. they went straight to the terminal.
    """

    returncode: int
    stdout: bytes | None = None
    stderr: bytes | None = None

    @property
    def non_zero_exit_code(self) -> bool:
        return self.returncode != 0

    @property
    def output(self) -> str:
        if not self.stdout:
            return ""
        return self.stdout.decode(errors="replace").replace("\r\n", "\n")
