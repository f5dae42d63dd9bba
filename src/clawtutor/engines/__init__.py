"""AI coding engine definitions, registry and authentication."""

from clawtutor.engines.auth import EngineAuth, HomeDirCliAuth, XdgCliAuth
from clawtutor.engines.base import (
    AuthAction,
    CredentialState,
    CredentialStoreError,
    Engine,
    EngineError,
    EngineNotInstalledError,
    SubprocessLaunchError,
    UnknownProviderError,
)
from clawtutor.engines.registry import EngineRegistry, build_engines, build_registry

__all__ = [
    "AuthAction",
    "CredentialState",
    "CredentialStoreError",
    "Engine",
    "EngineAuth",
    "EngineError",
    "EngineNotInstalledError",
    "EngineRegistry",
    "HomeDirCliAuth",
    "SubprocessLaunchError",
    "UnknownProviderError",
    "XdgCliAuth",
    "build_engines",
    "build_registry",
]
