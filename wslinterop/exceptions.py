# ruff: noqa: N818
class InteropException(RuntimeError):
    cause: str | None

    def __init__(self, msg, *args):
        super().__init__(msg, *args)
        self.msg = msg

        if args:
            cause = args[0]
            position_clause = (
                f", near line {cause.lineno}, column {cause.colno}."
                if hasattr(cause, "lineno") and hasattr(cause, "colno")
                else "."
            )
            self.cause = str(cause.args[0] if cause.args else cause) + position_clause
        else:
            self.cause = None


class ConfigValidationError(InteropException):
    option: str | None
    filename: str | None

    def __init__(
        self,
        msg,
        *args,
        option: str | None = None,
        filename: str | None = None,
    ):
        super().__init__(msg, *args)
        self.option = option
        self.filename = filename


class ExecutionError(RuntimeError):
    cause: str | None

    def __init__(self, msg, *args):
        self.msg = msg
        self.cause = str(args[0]) if args else None
        self.args = (msg, *args)


class BridgeUnavailableError(ExecutionError):
    """
    The bridge executable could not be found or could not be started. This is an
    environment misconfiguration and is never retried.
    """
