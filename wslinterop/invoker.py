from __future__ import annotations

from typing import IO, TYPE_CHECKING

from .bridge.request import RemoteRequest

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .bridge import Bridge, BridgeResult
    from .config import DefaultParameterTable, EnvironmentTable
    from .helpers.paths import PathTranslator
    from .io import InteropIO


class CommandInvoker:
    """
    Runs a command in the remote environment with the configured environment
    variables and default arguments, translating path arguments on the way.
    """

    def __init__(
        self,
        bridge: Bridge,
        translator: PathTranslator,
        default_parameters: DefaultParameterTable,
        environment: EnvironmentTable,
        *,
        io: InteropIO,
    ):
        self._bridge = bridge
        self._translator = translator
        self._default_parameters = default_parameters
        self._environment = environment
        self._io = io

    def build_request(
        self, command: str, args: Iterable[str | None] = ()
    ) -> RemoteRequest:
        return RemoteRequest(
            argv=(
                command,
                *self._default_parameters.lookup(command),
                *(self._translator.translate(arg) for arg in args if arg is not None),
            ),
            environment=self._environment.assignments(),
        )

    def invoke(
        self,
        command: str,
        args: Iterable[str | None] = (),
        input: bytes | IO | None = None,
        *,
        capture: bool = True,
    ) -> BridgeResult:
        """
        Run command with args through the bridge, forwarding input to its stdin if
        given. The remote exit code and output are returned as they are.
        """
        request = self.build_request(command, args)
        self._io.print_action("=>", request.serialize())
        return self._bridge.send(request, input=input, capture=capture)
