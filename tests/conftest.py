import shutil
import stat
import sys
from collections.abc import Mapping
from io import StringIO
from pathlib import Path
from typing import Any, NamedTuple, Optional

import pytest

from wslinterop.app import WslInterop
from wslinterop.bridge import Bridge, BridgeResult
from wslinterop.completion import CompletionFunctionCache
from wslinterop.io import InteropIO


@pytest.fixture(scope="session")
def is_windows():
    return sys.platform == "win32"


@pytest.fixture
def io():
    return InteropIO(output=StringIO(), error=StringIO(), ansi=False)


class BridgeCall(NamedTuple):
    words: tuple[str, ...]
    input: Any
    capture: bool

    @property
    def command_line(self) -> str:
        return " ".join(self.words)


class FakeBridge(Bridge):
    """
    Records every call instead of running anything. Responses are chosen by the
    first registered substring found in the joined command line.
    """

    def __init__(self, io: InteropIO):
        super().__init__("fake-wsl.exe", io=io)
        self.calls: list[BridgeCall] = []
        self._responses: list[tuple[str, BridgeResult]] = []

    def respond(self, substring: str, stdout: str = "", returncode: int = 0):
        self._responses.append(
            (substring, BridgeResult(returncode, stdout.encode(), b""))
        )

    def run(self, words, input=None, *, capture=True):
        call = BridgeCall(tuple(words), input, capture)
        self.calls.append(call)
        for substring, result in self._responses:
            if substring in call.command_line:
                return result
        return BridgeResult(0, b"", b"")


@pytest.fixture
def fake_bridge(io):
    return FakeBridge(io)


@pytest.fixture
def memory_cache():
    return CompletionFunctionCache()


@pytest.fixture
def shell_bridge(tmp_path, is_windows):
    """
    Provides the path to a bridge executable that runs the joined words with the
    given shell, standing in for wsl.exe
    """
    if is_windows:
        pytest.skip("Shell script bridges are not supported on windows")

    def shell_bridge(shell: str = "sh") -> str:
        if shutil.which(shell) is None:
            pytest.skip(f"{shell} is not available")
        bridge_path = tmp_path / f"fake-wsl-{shell}"
        bridge_path.write_text(f'#!/bin/sh\nexec {shell} -c "$*"\n')
        bridge_path.chmod(bridge_path.stat().st_mode | stat.S_IEXEC)
        return str(bridge_path)

    return shell_bridge


class InteropRunResult(NamedTuple):
    code: int
    capture: str
    stdout: str
    stderr: str

    def __str__(self):
        return (
            "InteropRunResult(\n"
            f"  code={self.code!r},\n"
            f"  capture=`{self.capture}`,\n"
            f"  stdout=`{self.stdout}`,\n"
            f"  stderr=`{self.stderr}`,\n"
            ")"
        )


@pytest.fixture
def run_interop(capsys, tmp_path, fake_bridge, memory_cache):
    def run_interop(
        *cli_args: str,
        cwd: Optional[Path] = None,
        config: Optional[Mapping[str, Any]] = None,
        env: Optional[Mapping[str, str]] = None,
        bridge: Optional[Bridge] = None,
        cache: Optional[CompletionFunctionCache] = None,
        stdin: Optional[str] = None,
    ) -> InteropRunResult:
        output_capture = StringIO()
        io = InteropIO(
            output=output_capture,
            error=output_capture,
            input=StringIO(stdin) if stdin is not None else None,
            ansi=False,
        )
        app = WslInterop(
            cwd=cwd or tmp_path,
            config=config if config is not None else {},
            output=io,
            env=env if env is not None else {},
            bridge=bridge if bridge is not None else fake_bridge,
            cache=cache if cache is not None else memory_cache,
        )
        result = app(cli_args)
        output_capture.seek(0)
        run_result = InteropRunResult(
            result, output_capture.read(), *capsys.readouterr()
        )
        print(run_result)  # when a test fails this is usually useful to debug
        return run_result

    return run_interop
