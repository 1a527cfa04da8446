from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from .exceptions import ExecutionError, InteropException

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .bridge import Bridge
    from .completion import CompletionBridge, CompletionFunctionCache
    from .config import InteropConfig
    from .invoker import CommandInvoker
    from .io import InteropIO
    from .registrar import CommandRegistrar
    from .ui import InteropUi


class WslInterop:
    """
    :param cwd:
        The directory that relative path arguments are resolved against, defaults to
        ``Path().resolve()``
    :type cwd: Path, optional

    :param config:
        Either a dictionary of config options, or an InteropConfig object to use as an
        alternative to loading config from the user's config file.
    :type config: dict | InteropConfig, optional

    :param output:
        A stream for the application to write its own output to, defaults to
        sys.stdout
    :type output: IO, optional

    :param program_name:
        The name of the program that is being run. This is used in help messages and
        in the PowerShell code generated by the import action.
    :type program_name: str, optional

    :param env:
        Optionally provide an alternative environment to read settings from. If no
        mapping is provided then ``os.environ`` is used.
    :type env: dict, optional

    :param bridge:
        A Bridge to use instead of one for the configured bridge executable.
    :type bridge: Bridge, optional

    :param cache:
        A completion function cache to use instead of the configured cache file.
    :type cache: CompletionFunctionCache, optional
    """

    cwd: Path
    ui: InteropUi
    config: InteropConfig

    _bridge: Bridge | None = None
    _cache: CompletionFunctionCache | None = None
    _registrar: CommandRegistrar | None = None

    def __init__(
        self,
        cwd: Path | str | None = None,
        config: Mapping[str, Any] | InteropConfig | None = None,
        output: InteropIO | IO = sys.stdout,
        program_name: str = "wslinterop",
        env: Mapping[str, str] | None = None,
        bridge: Bridge | None = None,
        cache: CompletionFunctionCache | None = None,
    ):
        from .config import InteropConfig
        from .io import InteropIO
        from .ui import InteropUi

        self.cwd = Path(cwd) if cwd else Path().resolve()
        self.io = (
            output
            if isinstance(output, InteropIO)
            else InteropIO(output=output, error=output)
        )
        self._env = env if env is not None else os.environ

        self._load_config = config is None
        if isinstance(config, InteropConfig):
            self.config = config
            self.config._io = self.io
        else:
            self.config = InteropConfig(table=config, env=self._env, io=self.io)

        self.ui = InteropUi(io=self.io, program_name=program_name)
        self.program_name = program_name
        self._bridge = bridge
        self._cache = cache

    def __call__(self, cli_args: Sequence[str]) -> int:
        """
        :param cli_args:
            A sequence of command line arguments (i.e. sys.argv[1:])
        """

        self.ui.parse_args(cli_args)

        if self.ui["version"]:
            self.ui.print_version()
            return 0

        try:
            if self._load_config:
                self.config.load(self.ui["config_path"])
            self.io.configure(baseline=self.config.verbosity)
        except InteropException as error:
            self.ui.print_help(error=error)
            return 1

        if self.ui["help"]:
            self.ui.print_help()
            return 0

        action = tuple(self.ui["action"])
        if not action:
            self.ui.print_help(info="No action specified.")
            return 1

        try:
            if action[0] == "import":
                return self.import_commands(action[1:])
            if action[0] == "run":
                return self.run_command(action[1:])
            if action[0] == "_complete":
                return self.complete(action[1:])
        except ExecutionError as error:
            self.ui.print_error(error=error)
            return 1
        except InteropException as error:
            if action[0].startswith("_"):
                # Builtin actions feed machine readable output back to the host
                self.ui.print_error(error=error)
            else:
                self.ui.print_help(error=error)
            return 1

        self.ui.print_help(
            error=InteropException(f"Unrecognized action {action[0]!r}")
        )
        return 1

    @property
    def bridge(self) -> Bridge:
        if self._bridge is None:
            from .bridge import Bridge

            self._bridge = Bridge(self.config.bridge, io=self.io, cwd=self.cwd)
        return self._bridge

    @property
    def cache(self) -> CompletionFunctionCache:
        if self._cache is None:
            from .completion import CompletionFunctionFileCache

            self._cache = CompletionFunctionFileCache(
                self.config.cache_path, io=self.io
            )
        return self._cache

    @property
    def invoker(self) -> CommandInvoker:
        from .helpers.paths import PathTranslator
        from .invoker import CommandInvoker

        return CommandInvoker(
            self.bridge,
            PathTranslator(self.bridge, cwd=self.cwd, io=self.io),
            self.config.default_parameters,
            self.config.environment,
            io=self.io,
        )

    @property
    def completer(self) -> CompletionBridge:
        from .completion import CompletionBridge, CompletionFunctionResolver

        resolver = CompletionFunctionResolver(
            self.bridge,
            self.cache,
            framework=self.config.completion_framework,
            io=self.io,
        )
        return CompletionBridge(
            self.bridge,
            resolver,
            framework=self.config.completion_framework,
            io=self.io,
        )

    @property
    def registrar(self) -> CommandRegistrar:
        if self._registrar is None:
            from .registrar import CommandRegistrar

            self._registrar = CommandRegistrar(self.invoker, self.completer)
        return self._registrar

    def import_commands(self, names: Sequence[str]) -> int:
        self.io.write_raw(
            self.registrar.render_script(names, program=self.program_name)
        )
        return 0

    def run_command(self, cli_args: Sequence[str]) -> int:
        forward_stdin = bool(cli_args) and cli_args[0] == "--stdin"
        if forward_stdin:
            cli_args = cli_args[1:]
        if not cli_args:
            raise InteropException("No command specified to run")

        name, *args = cli_args
        command = self.registrar.register([name])[name]
        result = command.execute(
            args,
            input=self._stdin_source() if forward_stdin else None,
            capture=False,
        )
        return result.returncode

    def complete(self, cli_args: Sequence[str]) -> int:
        """
        Print completion candidates as tab separated text and display pairs, one per
        line. Expects the command line text, the cursor offset, and the raw text of
        each token in the line.
        """
        from .completion import locate_tokens

        if len(cli_args) < 2:
            raise InteropException("Expected a command line and a cursor offset")

        line, cursor_arg, *texts = cli_args
        try:
            cursor = int(cursor_arg)
            tokens = locate_tokens(line, texts)
        except ValueError as error:
            raise InteropException("Invalid completion request", error) from error

        if not tokens:
            return 0

        # The host omits whitespace after the last token from the line
        line = line.ljust(cursor)

        command = self.registrar.register([tokens[0].text])[tokens[0].text]
        for candidate in command.complete(line, tokens, cursor):
            self.io.write_raw(f"{candidate.text}\t{candidate.display}")
        return 0

    def _stdin_source(self) -> IO | bytes:
        stream = getattr(self.io.input, "buffer", self.io.input)
        try:
            stream.fileno()
            return stream
        except (AttributeError, OSError, ValueError):
            data = stream.read()
            return data.encode() if isinstance(data, str) else data
