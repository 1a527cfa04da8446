from .__version__ import __version__

__all__ = ["__version__", "main"]


def main():
    import sys
    from pathlib import Path

    from .app import WslInterop
    from .io import InteropIO

    io = InteropIO(output=sys.stdout, error=sys.stderr, make_default=True)
    app = WslInterop(cwd=Path().resolve(), output=io)
    result = app(cli_args=sys.argv[1:])
    if result:
        raise SystemExit(result)
