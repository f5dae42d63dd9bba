"""OpenCode engine definition."""

import json
import logging

from clawtutor.config.environment import Environment
from clawtutor.engines.auth import XdgCliAuth
from clawtutor.engines.base import Engine

logger = logging.getLogger(__name__)

OPENCODE_ID = "opencode"
OPENCODE_NAME = "OpenCode"
OPENCODE_BINARY = "opencode"
OPENCODE_INSTALL = "npm install -g opencode-ai"
OPENCODE_CONFIG_FILENAME = "opencode.json"
OPENCODE_CONFIG_SCHEMA = "https://opencode.ai/config.json"


def _sync_config(auth: XdgCliAuth) -> None:
    """Prepare the private OpenCode home, if one is configured.

    Creates the config, cache and data directories and seeds a minimal
    ``opencode.json``. Never touches the user's own XDG directories.
    """
    if auth.home_override() is None:
        return

    for directory in (auth.config_dir(), auth.cache_dir(), auth.data_dir()):
        directory.mkdir(parents=True, exist_ok=True)

    config_path = auth.config_dir() / OPENCODE_CONFIG_FILENAME
    if not config_path.exists():
        config_path.write_text(
            json.dumps({"$schema": OPENCODE_CONFIG_SCHEMA}, indent=2) + "\n",
            encoding="utf-8",
        )
        logger.debug("Seeded %s", config_path)


def build_opencode(env: Environment) -> Engine:
    """Build the OpenCode engine for the given environment."""
    auth = XdgCliAuth(
        OPENCODE_ID,
        OPENCODE_NAME,
        OPENCODE_BINARY,
        OPENCODE_INSTALL,
        env,
        app_dirname="opencode",
        credential_keys=(OPENCODE_ID,),
        login_args=("auth", "login"),
        list_args=("auth", "list"),
    )
    return Engine(
        id=OPENCODE_ID,
        name=OPENCODE_NAME,
        description="Open-source terminal coding agent (works with zero config)",
        cli_binary=OPENCODE_BINARY,
        install_command=OPENCODE_INSTALL,
        auth=auth,
        sync_config=lambda: _sync_config(auth),
    )
