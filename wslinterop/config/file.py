from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import IO, Any

from ..exceptions import InteropException

CONFIG_SUFFIXES = (".toml", ".json", ".yaml", ".yml")


def _load_json(file: IO[bytes]) -> Any:
    import json

    try:
        return json.load(file)
    except ValueError as error:
        message = f"Couldn't parse json file {file.name}"
        raise InteropException(message, error) from error


def _load_yaml(file: IO[bytes]) -> Any:
    import yaml

    try:
        return yaml.safe_load(file)
    except yaml.YAMLError as error:
        message = f"Couldn't parse yaml file {file.name}"
        raise InteropException(message, error) from error


def _load_toml(file: IO[bytes]) -> Any:
    try:
        import tomllib as tomli
    except ImportError:
        import tomli  # type: ignore[no-redef]

    try:
        return tomli.load(file)
    except tomli.TOMLDecodeError as error:
        message = f"Couldn't parse toml file {file.name}"
        raise InteropException(message, error) from error


_LOADERS: Mapping[str, Callable[[IO[bytes]], Any]] = {
    ".json": _load_json,
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
    ".toml": _load_toml,
}


class InteropConfigFile:
    """
    A single config file on disk. Loading never raises: any problem reading it is
    kept in `error` for the caller to report.
    """

    path: Path
    _content: Mapping[str, Any] | None = None
    _error: InteropException | None = None

    def __init__(self, path: Path):
        self.path = path

    @property
    def error(self) -> InteropException | None:
        return self._error

    def load(self) -> Mapping[str, Any] | None:
        if self._content is not None:
            return self._content

        try:
            content = self._read()
        except InteropException as error:
            self._error = error
            return None

        if content is None:
            # An empty yaml document
            content = {}
        if not isinstance(content, Mapping):
            self._error = InteropException(
                f"Expected a table at the top level of {self.path}"
            )
            return None

        self._content = content
        return content

    def _read(self) -> Any:
        loader = _LOADERS.get(self.path.suffix.lower(), _load_toml)
        try:
            with self.path.open("rb") as file:
                return loader(file)
        except OSError as error:
            raise InteropException(f"Couldn't open file at {self.path}") from error

    @classmethod
    def find_config_files(
        cls, target_path: Path, filenames: Sequence[str]
    ) -> Iterator["InteropConfigFile"]:
        """
        Generate an InteropConfigFile for each config file found at target_path in
        order of precedence.

        If target_path is a directory then it is scanned for files matching
        `filenames`, otherwise it may name any toml, json, or yaml file.
        """
        target_path = target_path.expanduser().resolve()

        if target_path.is_dir():
            for filename in filenames:
                candidate = target_path / filename
                if candidate.is_file():
                    yield cls(candidate)
        elif target_path.is_file() and target_path.suffix.lower() in CONFIG_SUFFIXES:
            yield cls(target_path)
