"""Layered configuration: config file < TOZULIP_* environment < command-line flags."""

from __future__ import annotations

import configparser
import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from tozulip.core.errors import ConfigError, ConfigFileError, HomeDirectoryError

ENV_PREFIX = "TOZULIP_"
CONFIG_BASENAME = ".tozulip"
# Searched in this order when no explicit --config is given.
CONFIG_EXTENSIONS = ("json", "toml", "yaml", "yml", "ini")
# Holds INI keys that appear before any [section] header
_INI_ROOT = "tozulip"


class Config(BaseSettings):
    """Resolved settings for one invocation."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    # Message destination and bot credentials
    host: str = ""
    mail: str = ""
    apikey: str = ""
    stream: str = ""
    topic: str = ""

    # Request timeout in seconds; None waits indefinitely
    timeout: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)

    log_file: Optional[str] = None
    verbose: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings)


def home_directory() -> Path:
    try:
        return Path.home()
    except RuntimeError as exc:
        raise HomeDirectoryError(f"cannot determine home directory: {exc}") from exc


def find_config_file(directory: Path) -> Path | None:
    """Return the first `.tozulip.<ext>` in `directory`, or None when there is none."""

    for extension in CONFIG_EXTENSIONS:
        candidate = directory / f"{CONFIG_BASENAME}.{extension}"
        if candidate.is_file():
            return candidate
    return None


def resolve_config_path(explicit: str | None) -> Path | None:
    """Pick the config file to read.

    An explicit path wins and is returned even if it does not exist, so the
    caller can report it. Without one the home directory is searched, and a
    failure to locate the home directory raises `HomeDirectoryError`.
    """

    if explicit:
        try:
            return Path(explicit).expanduser()
        except RuntimeError as exc:
            raise HomeDirectoryError(f"cannot expand {explicit}: {exc}") from exc
    return find_config_file(home_directory())


def read_config_file(path: Path) -> dict[str, str]:
    """Parse a config file into lower-cased keys and string values."""

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigFileError(path, str(exc)) from exc

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(text) if text.strip() else {}
        elif suffix == ".toml":
            data = tomllib.loads(text)
        elif suffix == ".ini":
            data = _load_ini(text)
        else:
            data = yaml.safe_load(text)
    except (
        json.JSONDecodeError,
        tomllib.TOMLDecodeError,
        configparser.Error,
        yaml.YAMLError,
    ) as exc:
        raise ConfigFileError(path, f"cannot parse: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(path, "expected a mapping of settings")

    return {str(key).lower(): _as_string(value) for key, value in data.items() if _is_scalar(value)}


def load_config(
    file_values: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Config:
    """Merge the layers per key: overrides > environment > file values.

    `None` entries in `overrides` mean "flag not given" and are skipped.
    """

    env_values = EnvSettingsSource(Config)()
    merged: dict[str, Any] = dict(file_values or {})
    merged.update(env_values)
    merged.update({key: value for key, value in (overrides or {}).items() if value is not None})

    try:
        return Config(**merged)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(f"invalid configuration: {problems}") from exc


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def _as_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _load_ini(text: str) -> dict[str, str]:
    # Only top-level keys are settings; named sections are skipped like nested mappings
    parser = configparser.ConfigParser(interpolation=None)
    parser.read_string(f"[{_INI_ROOT}]\n{text}")
    return dict(parser[_INI_ROOT])
