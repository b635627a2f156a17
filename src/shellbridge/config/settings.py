"""BridgeSettings: global flags, environment and ``shellbridge.toml`` merged.

Highest priority first:

* keyword arguments (the CLI flags that were actually given)
* ``SHELLBRIDGE_*`` environment variables, ``__`` separating nested keys
  (``SHELLBRIDGE_KUBE__DEFAULT_CONTEXT=ops``)
* the TOML file found by :func:`shellbridge.config.discovery.find_config`
* defaults baked into :mod:`shellbridge.config.models`
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from shellbridge.config.discovery import find_config
from shellbridge.config.models import DockConfig, HostConfig, KubeConfigSettings
from shellbridge.domain.types import ModeSetting

# The file chosen by from_cli(), read while the settings object is built.
_toml_file: ContextVar[Path | None] = ContextVar("shellbridge_toml_file", default=None)


class BridgeSettings(BaseSettings):
    """Frozen settings for one CLI process.

    Attributes:
        config_path: The TOML file that was read, or None.
        mode: ``auto`` runs native when a host plugin is installed.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="SHELLBRIDGE_",
        env_nested_delimiter="__",
    )

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    mode: ModeSetting = ModeSetting.AUTO

    kube: KubeConfigSettings = Field(default_factory=KubeConfigSettings)
    dock: DockConfig = Field(default_factory=DockConfig)
    host: HostConfig = Field(default_factory=HostConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        toml_file = _toml_file.get()
        if toml_file is not None:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_file))
        return tuple(sources)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        cwd: Path | None = None,
        **cli_flags: Any,
    ) -> BridgeSettings:
        """Build settings for a CLI invocation.

        An explicit *config_path* replaces discovery; a path that does not
        exist means no file is read.  Flags passed as None were not given.

        Raises:
            click.ClickException: the TOML file does not parse.
        """
        if config_path:
            candidate = Path(config_path).expanduser()
            toml_file = candidate if candidate.is_file() else None
        else:
            toml_file = find_config(cwd)

        overrides = {key: value for key, value in cli_flags.items() if value is not None}
        token = _toml_file.set(toml_file)
        try:
            return cls(config_path=toml_file, **overrides)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_file}: {exc}") from exc
        finally:
            _toml_file.reset(token)
