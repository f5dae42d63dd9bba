"""Process environment snapshot, read once at boot."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

CWD_ENV = "CLAWTUTOR_CWD"
ENGINE_HOME_PATTERN = re.compile(r"^CLAWTUTOR_([A-Z0-9]+)_HOME$")

_FALSY_DEBUG_VALUES = {"", "0", "false"}


def expand_home_dir(value: str, home: Path) -> Path:
    """Expand a leading ``~`` against ``home`` (not the live process home)."""
    if value == "~":
        return home
    if value.startswith("~/") or value.startswith("~\\"):
        return home / value[2:]
    return Path(value)


def _optional_path(environ: Mapping[str, str], name: str, home: Path) -> Path | None:
    value = environ.get(name, "").strip()
    if not value:
        return None
    return expand_home_dir(value, home)


@dataclass(frozen=True)
class Environment:
    """Everything clawtutor reads from the process environment.

    Built once by ``from_env`` and passed explicitly to the workspace
    helpers, the engine registry and the auth controllers, so nothing
    below the CLI touches ``os.environ`` directly.
    """

    home: Path
    cwd_override: Path | None = None
    xdg_config_home: Path | None = None
    xdg_cache_home: Path | None = None
    xdg_data_home: Path | None = None
    engine_homes: Mapping[str, Path] = field(default_factory=dict)
    log_level: str = ""
    debug: str = ""
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        home: Path | None = None,
    ) -> Environment:
        """Snapshot ``environ`` (defaults to ``os.environ``)."""
        source = dict(os.environ if environ is None else environ)
        home = home if home is not None else Path.home()

        engine_homes: dict[str, Path] = {}
        for name, value in source.items():
            match = ENGINE_HOME_PATTERN.match(name)
            if match and value.strip():
                engine_homes[match.group(1).lower()] = expand_home_dir(
                    value.strip(), home
                )

        return cls(
            home=home,
            cwd_override=_optional_path(source, CWD_ENV, home),
            xdg_config_home=_optional_path(source, "XDG_CONFIG_HOME", home),
            xdg_cache_home=_optional_path(source, "XDG_CACHE_HOME", home),
            xdg_data_home=_optional_path(source, "XDG_DATA_HOME", home),
            engine_homes=MappingProxyType(engine_homes),
            log_level=source.get("LOG_LEVEL", "").strip().lower(),
            debug=source.get("DEBUG", "").strip().lower(),
            environ=MappingProxyType(source),
        )

    @property
    def debug_enabled(self) -> bool:
        """True when LOG_LEVEL=debug or DEBUG holds a truthy value."""
        return self.log_level == "debug" or self.debug not in _FALSY_DEBUG_VALUES

    def working_directory(self) -> Path:
        """Return the CLAWTUTOR_CWD override, else the process cwd."""
        return self.cwd_override if self.cwd_override is not None else Path.cwd()

    def engine_home(self, engine_id: str) -> Path | None:
        """Return the private home override for ``engine_id``, if configured."""
        return self.engine_homes.get(engine_id.lower())

    def config_base(self) -> Path:
        """XDG config base: $XDG_CONFIG_HOME or ~/.config."""
        return self.xdg_config_home or self.home / ".config"

    def cache_base(self) -> Path:
        """XDG cache base: $XDG_CACHE_HOME or ~/.cache."""
        return self.xdg_cache_home or self.home / ".cache"

    def data_base(self) -> Path:
        """XDG data base: $XDG_DATA_HOME or ~/.local/share."""
        return self.xdg_data_home or self.home / ".local" / "share"

    def child_environ(self, **overrides: str) -> dict[str, str]:
        """Return a copy of the snapshot suitable for a child process."""
        env = dict(self.environ)
        env.update(overrides)
        return env
