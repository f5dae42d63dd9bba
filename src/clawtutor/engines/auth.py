"""Credential probing, login and logout for wrapped engine CLIs.

The wrapped tools own their credentials. clawtutor never reads secrets;
it only checks whether the tool's credential file exists and holds an
entry for the engine, runs the tool's own interactive login, and removes
the tool's state directories on logout.
"""

from __future__ import annotations

import json
import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from rich.panel import Panel

from clawtutor.config.environment import Environment, expand_home_dir
from clawtutor.console import console
from clawtutor.engines.base import (
    AuthAction,
    CredentialState,
    CredentialStoreError,
    EngineNotInstalledError,
    SubprocessLaunchError,
)
from clawtutor.engines.process import AttachedProcess

logger = logging.getLogger(__name__)

SENTINEL_CREDENTIALS = "{}"


def display_cli_not_installed_error(
    name: str, install_command: str, failed_command: str | None = None
) -> None:
    """Print install guidance for a missing engine CLI."""
    if failed_command:
        body = (
            f"'{failed_command}' failed because the CLI is missing.\n"
            f"Please install {name} CLI before trying again:\n\n"
            f"  [cyan]{install_command}[/cyan]"
        )
        title = f"{name} CLI Not Found"
    else:
        body = f"Install {name} CLI with:\n\n  [cyan]{install_command}[/cyan]"
        title = f"{name} CLI Not Installed"
    console.print(Panel(body, title=f"[bold yellow]{title}[/bold yellow]", expand=False))


def read_credentials(path: Path) -> dict[str, object] | None:
    """Read a credential file as a JSON object.

    Returns None when the file is missing, unreadable or not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Credential probe of %s failed: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.debug("Credential file %s is not a JSON object", path)
        return None
    return data


def _remove_path(target: Path) -> None:
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink(missing_ok=True)


class EngineAuth(ABC):
    """Authentication state machine for one wrapped CLI.

    States are derived on every call and never cached, since the user can
    log in or out by running the wrapped CLI directly:

    - NOT_INSTALLED: the binary is not on PATH
    - INSTALLED_NO_CREDENTIAL: binary present, no credential entry
    - INSTALLED_WITH_CREDENTIAL: binary present, credential entry found

    Subclasses decide where the tool keeps its state and how the child
    process is pointed at it.
    """

    def __init__(
        self,
        engine_id: str,
        name: str,
        cli_binary: str,
        install_command: str,
        env: Environment,
        *,
        credential_keys: Sequence[str],
        login_args: Sequence[str],
        list_args: Sequence[str] | None = None,
    ) -> None:
        self.engine_id = engine_id
        self.name = name
        self.cli_binary = cli_binary
        self.install_command = install_command
        self.env = env
        self.credential_keys = tuple(credential_keys)
        self.login_args = tuple(login_args)
        self.list_args = tuple(list_args) if list_args is not None else None

    @abstractmethod
    def credential_path(self) -> Path:
        """Return the tool's credential file."""
        ...

    @abstractmethod
    def state_locations(self) -> list[Path]:
        """Return the paths removed by ``clear_auth``."""
        ...

    @abstractmethod
    def child_environ(self) -> dict[str, str]:
        """Return the environment for the tool's child processes."""
        ...

    @abstractmethod
    def clear_summary(self) -> str:
        """Describe what ``clear_auth`` removed."""
        ...

    def home_override(self) -> Path | None:
        """Return the configured CLAWTUTOR_<ID>_HOME override, if any."""
        return self.env.engine_home(self.engine_id)

    def is_authenticated(self) -> bool:
        """Check only that the binary is on PATH."""
        return shutil.which(self.cli_binary) is not None

    def resolve_binary(self) -> str:
        """Return the full path of the binary (handles PATHEXT on Windows)."""
        return shutil.which(self.cli_binary) or self.cli_binary

    def has_credential(self) -> bool:
        """Check whether the credential file holds an entry for this engine."""
        data = read_credentials(self.credential_path())
        if data is None:
            return False
        return any(key in data for key in self.credential_keys)

    def credential_state(self) -> CredentialState:
        """Probe the binary and credential file."""
        if not self.is_authenticated():
            return CredentialState.NOT_INSTALLED
        if self.has_credential():
            return CredentialState.INSTALLED_WITH_CREDENTIAL
        return CredentialState.INSTALLED_NO_CREDENTIAL

    def next_auth_menu_action(self) -> AuthAction:
        """Return LOGOUT only when installed with a credential, else LOGIN.

        A missing binary still maps to LOGIN.
        """
        if self.credential_state() is CredentialState.INSTALLED_WITH_CREDENTIAL:
            return AuthAction.LOGOUT
        return AuthAction.LOGIN

    @property
    def supports_provider_list(self) -> bool:
        """Whether the tool can list several upstream auth providers."""
        return self.list_args is not None

    def ensure_auth(self, force_login: bool = False) -> bool:
        """Make sure the engine has a credential, running its login if needed.

        Without ``force_login`` an existing credential short-circuits
        before any process is spawned. The login exit code is ignored. If
        the tool did not create a credential file, an empty ``{}`` file is
        written.

        Raises:
            EngineNotInstalledError: The binary is missing, before or at launch.
            SubprocessLaunchError: The binary exists but could not be started.
            CredentialStoreError: The credential location is not writable.
        """
        if not force_login and self.has_credential():
            logger.debug("%s already has a credential", self.name)
            return True

        credential_path = self.credential_path()
        try:
            credential_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CredentialStoreError(
                f"Cannot create {self.name} credential directory "
                f"{credential_path.parent}: {e.strerror or e}"
            ) from e

        if not self.is_authenticated():
            display_cli_not_installed_error(self.name, self.install_command)
            raise EngineNotInstalledError(self.name, self.install_command)

        argv = [self.resolve_binary(), *self.login_args]
        try:
            exit_code = AttachedProcess(argv, self.child_environ()).run()
        except FileNotFoundError:
            failed_command = " ".join([self.cli_binary, *self.login_args])
            display_cli_not_installed_error(
                self.name, self.install_command, failed_command=failed_command
            )
            raise EngineNotInstalledError(self.name, self.install_command) from None
        except OSError as e:
            raise SubprocessLaunchError(
                f"Failed to launch {self.cli_binary}: {e}"
            ) from e

        if exit_code != 0:
            logger.info(
                "%s login exited with code %d, checking credentials anyway",
                self.name,
                exit_code,
            )

        if not credential_path.exists():
            try:
                credential_path.parent.mkdir(parents=True, exist_ok=True)
                credential_path.write_text(SENTINEL_CREDENTIALS, encoding="utf-8")
            except OSError as e:
                raise CredentialStoreError(
                    f"Cannot write {self.name} credential file "
                    f"{credential_path}: {e.strerror or e}"
                ) from e
            logger.debug("Wrote empty credential file %s", credential_path)

        return True

    def clear_auth(self) -> None:
        """Remove the engine's state locations.

        Best effort: a missing path is fine and a failed removal is logged
        and skipped.
        """
        for target in self.state_locations():
            try:
                _remove_path(target)
            except OSError:
                logger.warning("Failed to remove %s", target, exc_info=True)

        console.print(f"\n{self.name} authentication cleared.")
        console.print(f"[dim]{self.clear_summary()}[/dim]\n")

    def list_providers(self) -> int | None:
        """Run the tool's provider listing attached to the terminal.

        Returns the exit code, or None if the tool has no listing command.
        """
        if self.list_args is None:
            return None
        argv = [self.resolve_binary(), *self.list_args]
        return AttachedProcess(argv, self.child_environ()).run()


class XdgCliAuth(EngineAuth):
    """Auth for tools that follow the XDG base directory layout.

    With CLAWTUTOR_<ID>_HOME set, config, cache and data all move under
    that directory together. Otherwise each falls back on its own to
    XDG_CONFIG_HOME, XDG_CACHE_HOME and XDG_DATA_HOME, then the OS default.
    """

    def __init__(
        self,
        engine_id: str,
        name: str,
        cli_binary: str,
        install_command: str,
        env: Environment,
        *,
        app_dirname: str,
        credential_filename: str = "auth.json",
        credential_keys: Sequence[str],
        login_args: Sequence[str],
        list_args: Sequence[str] | None = None,
    ) -> None:
        super().__init__(
            engine_id,
            name,
            cli_binary,
            install_command,
            env,
            credential_keys=credential_keys,
            login_args=login_args,
            list_args=list_args,
        )
        self.app_dirname = app_dirname
        self.credential_filename = credential_filename

    def xdg_bases(self) -> dict[str, Path]:
        """Return the XDG base directories the tool will see."""
        home = self.home_override()
        if home is not None:
            # Tool dirs nest under these; older releases kept <home>/data/auth.json
            return {
                "XDG_CONFIG_HOME": home / "config",
                "XDG_CACHE_HOME": home / "cache",
                "XDG_DATA_HOME": home / "data",
            }
        return {
            "XDG_CONFIG_HOME": self.env.config_base(),
            "XDG_CACHE_HOME": self.env.cache_base(),
            "XDG_DATA_HOME": self.env.data_base(),
        }

    def config_dir(self) -> Path:
        return self.xdg_bases()["XDG_CONFIG_HOME"] / self.app_dirname

    def cache_dir(self) -> Path:
        return self.xdg_bases()["XDG_CACHE_HOME"] / self.app_dirname

    def data_dir(self) -> Path:
        return self.xdg_bases()["XDG_DATA_HOME"] / self.app_dirname

    def credential_path(self) -> Path:
        return self.data_dir() / self.credential_filename

    def state_locations(self) -> list[Path]:
        home = self.home_override()
        if home is not None:
            return [home]
        return [self.config_dir(), self.cache_dir(), self.data_dir()]

    def child_environ(self) -> dict[str, str]:
        # Only force the XDG variables when the private home is configured
        if self.home_override() is None:
            return self.env.child_environ()
        return self.env.child_environ(
            **{name: str(path) for name, path in self.xdg_bases().items()}
        )

    def clear_summary(self) -> str:
        home = self.home_override()
        if home is not None:
            return f"Removed {self.name} home directory at {home} (if it existed)."
        return f"Removed {self.name} XDG directories (if they existed)."


class HomeDirCliAuth(EngineAuth):
    """Auth for tools that keep all their state in one home directory.

    The directory is CLAWTUTOR_<ID>_HOME when set, else the tool's own
    variable (``home_env_var``), else ``~/<default_dirname>``.
    """

    def __init__(
        self,
        engine_id: str,
        name: str,
        cli_binary: str,
        install_command: str,
        env: Environment,
        *,
        home_env_var: str,
        default_dirname: str,
        credential_filename: str = "auth.json",
        credential_keys: Sequence[str],
        login_args: Sequence[str],
        list_args: Sequence[str] | None = None,
    ) -> None:
        super().__init__(
            engine_id,
            name,
            cli_binary,
            install_command,
            env,
            credential_keys=credential_keys,
            login_args=login_args,
            list_args=list_args,
        )
        self.home_env_var = home_env_var
        self.default_dirname = default_dirname
        self.credential_filename = credential_filename

    def state_home(self) -> Path:
        override = self.home_override()
        if override is not None:
            return override
        native = self.env.environ.get(self.home_env_var, "").strip()
        if native:
            return expand_home_dir(native, self.env.home)
        return self.env.home / self.default_dirname

    def credential_path(self) -> Path:
        return self.state_home() / self.credential_filename

    def state_locations(self) -> list[Path]:
        override = self.home_override()
        if override is not None:
            return [override]
        # Outside a private home only the credential is ours to remove
        return [self.credential_path()]

    def child_environ(self) -> dict[str, str]:
        override = self.home_override()
        if override is None:
            return self.env.child_environ()
        return self.env.child_environ(**{self.home_env_var: str(override)})

    def clear_summary(self) -> str:
        override = self.home_override()
        if override is not None:
            return f"Removed {self.name} home directory at {override} (if it existed)."
        return f"Removed {self.credential_path()} (if it existed)."
