"""Runtime environment, workspace layout and settings files."""

from clawtutor.config.environment import Environment
from clawtutor.config.init import ensure_workspace_structure, get_default_spec_path
from clawtutor.config.loader import load_config, save_config
from clawtutor.config.schema import ClawtutorConfig
from clawtutor.config.workspace import (
    LEGACY_WORKSPACE_DIRNAME,
    WORKSPACE_DIRNAME,
    is_home_directory,
    resolve_workspace_root,
)

__all__ = [
    "ClawtutorConfig",
    "Environment",
    "LEGACY_WORKSPACE_DIRNAME",
    "WORKSPACE_DIRNAME",
    "ensure_workspace_structure",
    "get_default_spec_path",
    "is_home_directory",
    "load_config",
    "resolve_workspace_root",
    "save_config",
]
