import os
from collections.abc import Sequence
from contextlib import redirect_stderr
from typing import TYPE_CHECKING

from .__version__ import __version__
from .exceptions import ConfigValidationError, ExecutionError, InteropException
from .io import InteropIO

if TYPE_CHECKING:
    from argparse import ArgumentParser, Namespace


# The hidden _complete action is only meant for the generated PowerShell glue
ACTIONS_HELP = (
    ("import NAME...", "Print PowerShell code that runs and completes NAME via WSL"),
    ("run [--stdin] NAME [ARGS...]", "Run NAME in WSL with translated arguments"),
)


def _format_traceback(error: BaseException) -> str:
    import traceback

    return "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    ).strip()


class InteropUi:
    args: "Namespace"
    parser: "ArgumentParser"

    def __init__(self, io: InteropIO, program_name: str = "wslinterop"):
        self.io = io
        self.program_name = program_name

    def __getitem__(self, key: str):
        """Provide easy access to arguments"""
        return getattr(self.args, key, None)

    def build_parser(self) -> "ArgumentParser":
        import argparse

        parser = argparse.ArgumentParser(
            prog=self.program_name,
            description="Run and complete WSL commands from the host shell",
            add_help=False,
            allow_abbrev=False,
        )
        parser.add_argument(
            "-h", "--help", action="store_true", help="Show this help page and exit"
        )
        parser.add_argument(
            "--version", action="store_true", help="Print the version and exit"
        )
        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase output (repeatable)",
        )
        parser.add_argument(
            "-q",
            "--quiet",
            action="count",
            default=0,
            help="Decrease output (repeatable)",
        )
        parser.add_argument(
            "-c",
            "--config",
            dest="config_path",
            metavar="PATH",
            default=os.environ.get("WSLINTEROP_CONFIG"),
            help="Specify where to find the config file",
        )

        ansi_group = parser.add_mutually_exclusive_group()
        ansi_group.add_argument(
            "--ansi",
            dest="ansi",
            action="store_const",
            const=True,
            help="Force enable ANSI output",
        )
        ansi_group.add_argument(
            "--no-ansi",
            dest="ansi",
            action="store_const",
            const=False,
            help="Force disable ANSI output",
        )

        parser.add_argument("action", nargs=argparse.REMAINDER)
        return parser

    def parse_args(self, cli_args: Sequence[str]):
        self.parser = self.build_parser()

        with redirect_stderr(self.io.error_output):
            self.args = self.parser.parse_args(cli_args)

        self.io.configure(ansi_enabled=self.args.ansi)
        if self.args.verbose or self.args.quiet:
            self.io.configure(offset=self.args.verbose - self.args.quiet)

    def print_help(
        self,
        info: str | None = None,
        error: InteropException | None = None,
    ):
        verbosity = 0 if self["help"] else self.io.verbosity
        if not error and not self.io.verbosity_offset_was_set:
            verbosity = min(0, verbosity)
        show_usage = verbosity >= 0

        sections: list[Sequence[str]] = []
        if show_usage:
            sections.append(
                (f"<h2>WSL Interop</h2> (version <em>{__version__}</em>)",)
            )
        if info:
            sections.append((f"<em2>Result: {info}</em2>",))
        if error:
            sections.append(self._describe_error(error))
        if show_usage:
            sections.append(
                (
                    "<h2>Usage:</h2>",
                    f"  <u>{self.program_name}</u> [global options] action [arguments]",
                )
            )
            sections.append(("<h2>Global options:</h2>", *self._option_lines()))
            sections.append(("<h2>Actions:</h2>", *self._action_lines()))
        if error and self.io.is_debug_enabled():
            sections.append((_format_traceback(error),))

        self.io.print(
            "\n\n".join("\n".join(section) for section in sections)
            + ("\n" if show_usage else ""),
            message_verbosity=-2,
        )

    def _option_lines(self) -> list[str]:
        formatter = self.parser.formatter_class(prog=self.parser.prog)
        formatter.start_section("options")
        formatter.add_arguments(
            [action for action in self.parser._actions if action.option_strings]
        )
        formatter.end_section()
        # Drop the section heading that argparse renders
        return formatter.format_help().strip("\n").split("\n")[1:]

    def _action_lines(self) -> list[str]:
        width = max(len(usage) for usage, _ in ACTIONS_HELP)
        return [
            f"  <em>{usage.ljust(width)}</em>  {help_text}"
            for usage, help_text in ACTIONS_HELP
        ]

    def _describe_error(self, error: InteropException) -> tuple[str, ...]:
        lines = []
        if isinstance(error, ConfigValidationError):
            if error.option:
                location = f" in file {error.filename}" if error.filename else ""
                lines.append(f"Invalid option {error.option!r}{location}")
            elif error.filename:
                lines.append(f"Invalid config file {error.filename}")
        lines.extend(error.msg.split("\n"))
        if error.cause:
            lines.append(error.cause)
        if error.__cause__ and not isinstance(error.__cause__, SystemExit):
            lines.append(f"From: {error.__cause__!r}")
        return self._error_lines(lines)

    def print_error(self, error: InteropException | ExecutionError):
        lines = error.msg.split("\n")
        if error.cause:
            lines.append(f"From: {error.cause}")
        if error.__cause__ and not isinstance(error.__cause__, SystemExit):
            lines.append(f"From: {error.__cause__!r}")

        for line in self._error_lines(lines):
            self.io.print_error(line)
        if self.io.is_debug_enabled():
            self.io.print_debug(_format_traceback(error))

    @staticmethod
    def _error_lines(lines: Sequence[str]) -> tuple[str, ...]:
        head, *rest = lines
        return (
            f"<error>Error: {head}</error>",
            *(f"<error>     | {line}</error>" for line in rest),
        )

    def print_version(self):
        if self.io.verbosity >= 0:
            self.io.print(
                f"WSL Interop - version: <em>{__version__}</em>", message_verbosity=-2
            )
        else:
            self.io.print(__version__, message_verbosity=-2)
