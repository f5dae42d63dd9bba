"""Codex engine definition."""

from clawtutor.config.environment import Environment
from clawtutor.engines.auth import HomeDirCliAuth
from clawtutor.engines.base import Engine

CODEX_ID = "codex"
CODEX_NAME = "Codex"
CODEX_BINARY = "codex"
CODEX_INSTALL = "npm install -g @openai/codex"


def build_codex(env: Environment) -> Engine:
    """Build the Codex engine for the given environment."""
    auth = HomeDirCliAuth(
        CODEX_ID,
        CODEX_NAME,
        CODEX_BINARY,
        CODEX_INSTALL,
        env,
        home_env_var="CODEX_HOME",
        default_dirname=".codex",
        credential_keys=("OPENAI_API_KEY", "tokens"),
        login_args=("login",),
    )
    return Engine(
        id=CODEX_ID,
        name=CODEX_NAME,
        description="OpenAI Codex CLI (ChatGPT sign-in or API key)",
        cli_binary=CODEX_BINARY,
        install_command=CODEX_INSTALL,
        auth=auth,
    )
