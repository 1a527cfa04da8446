"""
Tests that drive a real shell through a stand-in bridge executable.
"""

from io import StringIO

import pytest

from wslinterop.app import WslInterop
from wslinterop.bridge import Bridge
from wslinterop.completion import CompletionFunctionFileCache
from wslinterop.io import InteropIO

FAKE_FRAMEWORK = """
__load_completion() { :; }
_fake_complete() {
    COMPREPLY=( $(compgen -W "--all --almost-all -a -A" -- "$2") )
}
complete -F _fake_complete ls
"""


@pytest.fixture
def run_app(tmp_path):
    def run_app(cli_args, bridge, config=None, stdin=None):
        output = StringIO()
        io = InteropIO(
            output=output,
            error=output,
            input=StringIO(stdin) if stdin is not None else None,
            ansi=False,
        )
        app = WslInterop(
            cwd=tmp_path,
            config=config or {},
            output=io,
            env={},
            bridge=Bridge(bridge, io=io),
            cache=CompletionFunctionFileCache(tmp_path / "cache.json", io=io),
        )
        return app(cli_args), output.getvalue()

    return run_app


def test_run_seq(run_app, shell_bridge, capfd):
    code, _ = run_app(["run", "seq", "0", "10"], shell_bridge())

    assert code == 0
    assert capfd.readouterr().out == "".join(f"{i}\n" for i in range(11))


def test_run_seq_with_default_parameters(run_app, shell_bridge, capfd):
    code, _ = run_app(
        ["run", "seq", "0", "10"],
        shell_bridge(),
        config={"default_parameters": {"seq": "-s -"}},
    )

    assert code == 0
    assert capfd.readouterr().out == "-".join(str(i) for i in range(11)) + "\n"


def test_run_with_special_characters(run_app, shell_bridge, capfd):
    code, _ = run_app(["run", "echo", "a;b", "(c)", "d e"], shell_bridge())

    assert code == 0
    assert capfd.readouterr().out == "a;b (c) d e\n"


def test_run_with_empty_argument(run_app, shell_bridge, capfd):
    code, _ = run_app(["run", "printf", "%s.", "", "x"], shell_bridge())

    assert code == 0
    assert capfd.readouterr().out == ".x."


def test_run_with_environment(run_app, shell_bridge, capfd):
    code, _ = run_app(
        ["run", "printenv", "GREETING"],
        shell_bridge(),
        config={"environment": {"GREETING": "hello there"}},
    )

    assert code == 0
    assert capfd.readouterr().out == "hello there\n"


def test_run_with_stdin(run_app, shell_bridge, capfd):
    code, _ = run_app(
        ["run", "--stdin", "grep", "b"], shell_bridge(), stdin="abc\ndef\nbcd\n"
    )

    assert code == 0
    assert capfd.readouterr().out == "abc\nbcd\n"


def test_run_exit_code(run_app, shell_bridge):
    code, _ = run_app(["run", "false"], shell_bridge())

    assert code == 1


def test_complete_with_bash(run_app, shell_bridge, tmp_path):
    framework = tmp_path / "bash_completion"
    framework.write_text(FAKE_FRAMEWORK)
    bridge = shell_bridge("bash")
    config = {"completion_framework": str(framework)}

    code, output = run_app(["_complete", "ls -", "4", "ls", "-"], bridge, config)

    assert code == 0
    assert output == (
        "--all\t--all\n--almost-all\t--almost-all\n-a\t-a\n-A\t-A \n"
    )
    assert (tmp_path / "cache.json").read_text().strip() == (
        '{\n  "ls": "_fake_complete"\n}'
    )


def test_complete_option_with_bash(run_app, shell_bridge, tmp_path):
    framework = tmp_path / "bash_completion"
    framework.write_text(FAKE_FRAMEWORK)
    bridge = shell_bridge("bash")
    config = {"completion_framework": str(framework)}

    code, output = run_app(
        ["_complete", "ls -a --al", "10", "ls", "-a", "--al"], bridge, config
    )

    assert code == 0
    assert output == "--all\t--all\n--almost-all\t--almost-all\n"


def test_unregistered_command_falls_back_with_bash(run_app, shell_bridge, tmp_path):
    framework = tmp_path / "bash_completion"
    framework.write_text("__load_completion() { :; }\n_minimal() { COMPREPLY=(); }\n")
    bridge = shell_bridge("bash")
    config = {"completion_framework": str(framework)}

    code, output = run_app(["_complete", "sed -", "5", "sed", "-"], bridge, config)

    assert code == 0
    assert output == ""
    assert '"sed": "_minimal"' in (tmp_path / "cache.json").read_text()
