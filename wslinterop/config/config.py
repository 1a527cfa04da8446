from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from ..bridge.base import DEFAULT_BRIDGE
from ..exceptions import ConfigValidationError
from .file import InteropConfigFile
from .tables import DefaultParameterTable, EnvironmentTable

if TYPE_CHECKING:
    from ..io import InteropIO

APP_DIR_NAME = "wslinterop"
DEFAULT_COMPLETION_FRAMEWORK = "/usr/share/bash-completion/bash_completion"


def user_config_dir(env: Mapping[str, str] = os.environ) -> Path:
    if sys.platform == "win32" and env.get("APPDATA"):
        return Path(env["APPDATA"], APP_DIR_NAME)
    if env.get("XDG_CONFIG_HOME"):
        return Path(env["XDG_CONFIG_HOME"], APP_DIR_NAME)
    return Path("~/.config", APP_DIR_NAME).expanduser()


def user_cache_dir(env: Mapping[str, str] = os.environ) -> Path:
    if sys.platform == "win32" and env.get("LOCALAPPDATA"):
        return Path(env["LOCALAPPDATA"], APP_DIR_NAME, "Cache")
    if env.get("XDG_CACHE_HOME"):
        return Path(env["XDG_CACHE_HOME"], APP_DIR_NAME)
    return Path("~/.cache", APP_DIR_NAME).expanduser()


class InteropConfig:
    """
    The filenames to look for when loading config
    """

    _config_filenames: tuple[str, ...] = (
        "wslinterop.toml",
        "wslinterop.yaml",
        "wslinterop.json",
    )

    """
    Option name -> accepted types
    """
    _options: Mapping[str, tuple[type, ...]] = {
        "bridge": (str,),
        "completion_framework": (str,),
        "cache_path": (str,),
        "verbosity": (int,),
        "default_parameters": (dict,),
        "environment": (dict,),
    }

    _table: Mapping[str, Any]
    _path: Path | None = None

    def __init__(
        self,
        table: Mapping[str, Any] | None = None,
        env: Mapping[str, str] | None = None,
        io: Optional[InteropIO] = None,
    ):
        self._env = env if env is not None else os.environ
        self._apply(table or {})

        if io:
            self._io = io
        else:
            from ..io import InteropIO

            self._io = InteropIO.get_default_io()

    def load(self, target_path: Path | str | None = None):
        """
        Load config from target_path, or from the WSLINTEROP_CONFIG environment
        variable, or from the user config directory.

        A missing config file is not an error. An explicitly given path that does
        not exist is.
        """
        explicit_path = target_path or self._env.get("WSLINTEROP_CONFIG")
        search_path = (
            Path(explicit_path) if explicit_path else user_config_dir(self._env)
        )

        if explicit_path and not search_path.expanduser().exists():
            raise ConfigValidationError(
                f"Config file not found at {str(explicit_path)!r}"
            )

        for config_file in InteropConfigFile.find_config_files(
            target_path=search_path, filenames=self._config_filenames
        ):
            content = config_file.load()
            if config_file.error:
                raise config_file.error

            assert content is not None
            self._path = config_file.path
            self._io.print_debug(f" + Loaded config from {config_file.path}")
            self._apply(content, filename=str(config_file.path))
            return

        self._io.print_debug(f" . No config file found at {search_path}")

    def _apply(self, table: Mapping[str, Any], filename: str | None = None):
        for key, value in table.items():
            if key not in self._options:
                raise ConfigValidationError(
                    f"Unrecognised option {key!r}", option=key, filename=filename
                )
            accepted = self._options[key]
            if isinstance(value, bool) or not isinstance(value, accepted):
                raise ConfigValidationError(
                    f"Option {key!r} should have type "
                    + " | ".join(type_.__name__ for type_ in accepted),
                    option=key,
                    filename=filename,
                )

        verbosity = table.get("verbosity", 0)
        if not -2 <= verbosity <= 2:
            raise ConfigValidationError(
                "Option 'verbosity' should be between -2 and 2",
                option="verbosity",
                filename=filename,
            )

        try:
            default_parameters = DefaultParameterTable(
                table.get("default_parameters")
            )
            environment = EnvironmentTable(table.get("environment"))
        except ConfigValidationError as error:
            error.filename = filename
            raise

        self._table = table
        self.default_parameters = default_parameters
        self.environment = environment

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def bridge(self) -> str:
        return self._env.get("WSLINTEROP_BRIDGE") or self._table.get(
            "bridge", DEFAULT_BRIDGE
        )

    @property
    def completion_framework(self) -> str:
        return self._table.get("completion_framework", DEFAULT_COMPLETION_FRAMEWORK)

    @property
    def cache_path(self) -> Path:
        configured = self._env.get("WSLINTEROP_CACHE") or self._table.get(
            "cache_path"
        )
        if configured:
            return Path(configured).expanduser()
        return user_cache_dir(self._env) / "completion_functions.json"

    @property
    def verbosity(self) -> int:
        return self._table.get("verbosity", 0)
