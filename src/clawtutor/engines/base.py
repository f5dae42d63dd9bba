"""Base engine definition."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clawtutor.engines.auth import EngineAuth


class CredentialState(Enum):
    """Derived authentication state of an engine, recomputed on every probe."""

    NOT_INSTALLED = "not_installed"
    INSTALLED_NO_CREDENTIAL = "installed_no_credential"
    INSTALLED_WITH_CREDENTIAL = "installed_with_credential"


class AuthAction(Enum):
    """Menu affordance to offer for an engine."""

    LOGIN = "login"
    LOGOUT = "logout"


class EngineError(Exception):
    """Base class for engine errors."""


class EngineNotInstalledError(EngineError):
    """Raised when an engine's CLI binary cannot be found."""

    def __init__(self, engine_name: str, install_command: str) -> None:
        self.engine_name = engine_name
        self.install_command = install_command
        super().__init__(f"{engine_name} CLI is not installed.")


class UnknownProviderError(EngineError):
    """Raised when an engine id is not in the registry."""

    def __init__(self, provider_id: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"Unknown provider: {provider_id}")


class SubprocessLaunchError(EngineError):
    """Raised when an engine CLI exists but could not be started."""


class CredentialStoreError(EngineError):
    """Raised when an engine's credential directory or file cannot be written."""


@dataclass(frozen=True)
class Engine:
    """Definition of an AI coding engine."""

    id: str
    name: str
    description: str
    cli_binary: str
    install_command: str
    auth: EngineAuth
    sync_config: Callable[[], None] | None = None

    def is_installed(self) -> bool:
        """Check if this engine's CLI binary is available in PATH."""
        return self.auth.is_authenticated()
