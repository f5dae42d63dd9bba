"""Configuration file loading and merging."""

from pathlib import Path

import yaml

from clawtutor.config.schema import DEFAULT_CONFIG, ClawtutorConfig
from clawtutor.config.workspace import WORKSPACE_DIRNAME, resolve_workspace_root

CONFIG_FILENAME = "config.yaml"


def get_home_config_path(home: Path) -> Path:
    """Get path to global config: ~/.clawtutor/config.yaml."""
    return home / WORKSPACE_DIRNAME / CONFIG_FILENAME


def get_local_config_path(cwd: Path) -> Path:
    """Get path to local config inside the resolved workspace root."""
    return resolve_workspace_root(cwd) / CONFIG_FILENAME


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found, empty or invalid."""
    if not path.exists():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return None
    if not isinstance(data, dict):
        return None
    result: dict[str, object] = data
    return result


def load_config(cwd: Path, home: Path) -> ClawtutorConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.clawtutor/config.yaml)
    3. Local config (<workspace root>/config.yaml)
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(home), get_local_config_path(cwd)):
        data = load_yaml_config(path)
        if data:
            config = config.merge(ClawtutorConfig.from_dict(data))

    return config


def save_config(config: ClawtutorConfig, path: Path) -> None:
    """Save config to a YAML file.

    Creates parent directories if needed. Only saves non-None values.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
