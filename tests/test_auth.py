"""Tests for the engine auth controllers."""

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from clawtutor.engines import (
    AuthAction,
    CredentialState,
    CredentialStoreError,
    EngineNotInstalledError,
    SubprocessLaunchError,
)
from clawtutor.engines.codex import build_codex
from clawtutor.engines.opencode import build_opencode


@pytest.fixture
def mock_which() -> Iterator[MagicMock]:
    """Pretend every binary is installed under /usr/bin."""
    with patch("clawtutor.engines.auth.shutil.which") as mock:
        mock.side_effect = lambda cmd: f"/usr/bin/{cmd}"
        yield mock


@pytest.fixture
def mock_run() -> Iterator[MagicMock]:
    """Mock subprocess.run for attached login processes."""
    with patch("clawtutor.engines.process.subprocess.run") as mock:
        mock.return_value = MagicMock(returncode=0)
        yield mock


@pytest.fixture
def opencode_home(tmp_path: Path) -> Path:
    return tmp_path / "opencode-home"


@pytest.fixture
def opencode(make_env, opencode_home: Path):
    env = make_env(CLAWTUTOR_OPENCODE_HOME=str(opencode_home), PATH="/usr/bin")
    return build_opencode(env).auth


def _write_credentials(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestNotInstalled:
    """Engine binary absent."""

    def test_state_and_menu_action(self, opencode) -> None:
        with patch("clawtutor.engines.auth.shutil.which", return_value=None):
            assert opencode.is_authenticated() is False
            assert opencode.credential_state() is CredentialState.NOT_INSTALLED
            assert opencode.next_auth_menu_action() is AuthAction.LOGIN

    def test_menu_action_ignores_credential(self, opencode) -> None:
        _write_credentials(opencode.credential_path(), {"opencode": {"type": "api"}})
        with patch("clawtutor.engines.auth.shutil.which", return_value=None):
            assert opencode.next_auth_menu_action() is AuthAction.LOGIN

    def test_ensure_auth_raises_without_spawning(self, opencode, mock_run) -> None:
        with patch("clawtutor.engines.auth.shutil.which", return_value=None):
            with pytest.raises(EngineNotInstalledError) as exc_info:
                opencode.ensure_auth()

        mock_run.assert_not_called()
        assert exc_info.value.engine_name == "OpenCode"
        # The credential directory is prepared before the install check
        assert opencode.credential_path().parent.is_dir()

    def test_binary_vanishes_before_launch(self, opencode, mock_which, mock_run) -> None:
        mock_run.side_effect = FileNotFoundError("opencode")

        with pytest.raises(EngineNotInstalledError):
            opencode.ensure_auth()

    def test_other_launch_failure(self, opencode, mock_which, mock_run) -> None:
        mock_run.side_effect = PermissionError("denied")

        with pytest.raises(SubprocessLaunchError, match="Failed to launch opencode"):
            opencode.ensure_auth()


class TestCredentialProbe:
    """Credential file parsing."""

    def test_engine_key_present(self, opencode, mock_which) -> None:
        _write_credentials(opencode.credential_path(), {"opencode": {"type": "api"}})

        assert opencode.has_credential() is True
        assert opencode.credential_state() is CredentialState.INSTALLED_WITH_CREDENTIAL
        assert opencode.next_auth_menu_action() is AuthAction.LOGOUT

    def test_other_provider_only(self, opencode, mock_which) -> None:
        _write_credentials(opencode.credential_path(), {"anthropic": {"type": "oauth"}})

        assert opencode.credential_state() is CredentialState.INSTALLED_NO_CREDENTIAL
        assert opencode.next_auth_menu_action() is AuthAction.LOGIN

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '"opencode"', ""])
    def test_malformed_file_is_no_credential(self, opencode, mock_which, content) -> None:
        path = opencode.credential_path()
        path.parent.mkdir(parents=True)
        path.write_text(content)

        assert opencode.has_credential() is False
        assert opencode.credential_state() is CredentialState.INSTALLED_NO_CREDENTIAL

    def test_state_is_not_cached(self, opencode, mock_which) -> None:
        assert opencode.credential_state() is CredentialState.INSTALLED_NO_CREDENTIAL

        # Logged in out-of-band by running the tool directly
        _write_credentials(opencode.credential_path(), {"opencode": {}})

        assert opencode.credential_state() is CredentialState.INSTALLED_WITH_CREDENTIAL


class TestEnsureAuth:
    """Login flow."""

    def test_existing_credential_skips_login(self, opencode, mock_which, mock_run) -> None:
        _write_credentials(opencode.credential_path(), {"opencode": {}})

        assert opencode.ensure_auth() is True
        assert opencode.ensure_auth() is True

        mock_run.assert_not_called()

    def test_force_login_always_spawns(self, opencode, mock_which, mock_run) -> None:
        _write_credentials(opencode.credential_path(), {"opencode": {}})

        assert opencode.ensure_auth(force_login=True) is True

        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] == ["/usr/bin/opencode", "auth", "login"]

    def test_login_is_attached_and_uses_private_home(
        self, opencode, opencode_home, mock_which, mock_run
    ) -> None:
        opencode.ensure_auth()

        kwargs = mock_run.call_args.kwargs
        assert "stdin" not in kwargs and "stdout" not in kwargs
        assert "capture_output" not in kwargs
        assert kwargs["env"]["XDG_CONFIG_HOME"] == str(opencode_home / "config")
        assert kwargs["env"]["XDG_CACHE_HOME"] == str(opencode_home / "cache")
        assert kwargs["env"]["XDG_DATA_HOME"] == str(opencode_home / "data")
        assert kwargs["env"]["PATH"] == "/usr/bin"

    def test_writes_empty_credentials_when_tool_did_not(
        self, opencode, mock_which, mock_run
    ) -> None:
        assert opencode.ensure_auth() is True

        path = opencode.credential_path()
        assert path.exists()
        assert json.loads(path.read_text()) == {}

    def test_keeps_credentials_written_by_tool(
        self, opencode, mock_which, mock_run
    ) -> None:
        def fake_login(argv, env, check):
            _write_credentials(opencode.credential_path(), {"opencode": {"key": "x"}})
            return MagicMock(returncode=0)

        mock_run.side_effect = fake_login

        opencode.ensure_auth()

        assert json.loads(opencode.credential_path().read_text()) == {
            "opencode": {"key": "x"}
        }
        assert opencode.next_auth_menu_action() is AuthAction.LOGOUT

    def test_nonzero_exit_is_not_fatal(self, opencode, mock_which, mock_run) -> None:
        mock_run.return_value = MagicMock(returncode=1)

        assert opencode.ensure_auth() is True
        assert opencode.credential_path().exists()

    def test_unusable_home_is_reported(
        self, make_env, tmp_path, mock_which, mock_run
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        auth = build_opencode(make_env(CLAWTUTOR_OPENCODE_HOME=str(blocker))).auth

        with pytest.raises(CredentialStoreError, match="credential directory"):
            auth.ensure_auth()

        mock_run.assert_not_called()

    def test_sentinel_write_failure_is_reported(
        self, opencode, mock_which, mock_run
    ) -> None:
        def clobber_data_dir(argv, env, check):
            data_dir = opencode.credential_path().parent
            data_dir.rmdir()
            data_dir.write_text("")
            return MagicMock(returncode=0)

        mock_run.side_effect = clobber_data_dir

        with pytest.raises(CredentialStoreError, match="credential file"):
            opencode.ensure_auth()


class TestXdgLayout:
    """Directory resolution for XDG-style tools."""

    def test_override_redirects_all_three(self, opencode, opencode_home) -> None:
        assert opencode.config_dir() == opencode_home / "config" / "opencode"
        assert opencode.cache_dir() == opencode_home / "cache" / "opencode"
        assert opencode.data_dir() == opencode_home / "data" / "opencode"
        assert opencode.credential_path() == (
            opencode_home / "data" / "opencode" / "auth.json"
        )
        assert opencode.state_locations() == [opencode_home]

    def test_without_override_each_falls_back(self, make_env, tmp_path) -> None:
        env = make_env(XDG_DATA_HOME=str(tmp_path / "xdg-data"))
        auth = build_opencode(env).auth

        assert auth.data_dir() == tmp_path / "xdg-data" / "opencode"
        assert auth.config_dir() == env.home / ".config" / "opencode"
        assert auth.cache_dir() == env.home / ".cache" / "opencode"
        assert auth.state_locations() == [
            auth.config_dir(),
            auth.cache_dir(),
            auth.data_dir(),
        ]

    def test_without_override_child_env_is_untouched(self, make_env) -> None:
        auth = build_opencode(make_env(PATH="/usr/bin")).auth

        assert auth.child_environ() == {"PATH": "/usr/bin"}


class TestClearAuth:
    """Logout flow."""

    def test_removes_override_home(self, opencode, opencode_home, mock_which) -> None:
        _write_credentials(opencode.credential_path(), {"opencode": {}})
        (opencode_home / "cache" / "opencode").mkdir(parents=True)

        opencode.clear_auth()

        assert not opencode_home.exists()
        assert opencode.credential_state() is CredentialState.INSTALLED_NO_CREDENTIAL

    def test_removes_each_xdg_dir(self, make_env, mock_which) -> None:
        auth = build_opencode(make_env()).auth
        _write_credentials(auth.credential_path(), {"opencode": {}})
        auth.config_dir().mkdir(parents=True)
        sibling = auth.config_dir().parent / "other-tool"
        sibling.mkdir()

        auth.clear_auth()

        assert not auth.config_dir().exists()
        assert not auth.data_dir().exists()
        assert sibling.exists()
        assert auth.has_credential() is False

    def test_missing_directories_are_fine(self, opencode, capsys) -> None:
        opencode.clear_auth()

        assert opencode.has_credential() is False
        assert "OpenCode authentication cleared" in capsys.readouterr().out

    def test_removal_failure_is_swallowed(self, opencode, opencode_home) -> None:
        opencode_home.mkdir()
        with patch(
            "clawtutor.engines.auth.shutil.rmtree", side_effect=PermissionError("busy")
        ):
            opencode.clear_auth()

        assert opencode_home.exists()


class TestProviderList:
    """Listing upstream auth providers."""

    def test_opencode_lists(self, opencode, mock_which, mock_run) -> None:
        assert opencode.supports_provider_list is True
        assert opencode.list_providers() == 0
        assert mock_run.call_args.args[0] == ["/usr/bin/opencode", "auth", "list"]

    def test_codex_has_no_listing(self, make_env, mock_run) -> None:
        auth = build_codex(make_env()).auth

        assert auth.supports_provider_list is False
        assert auth.list_providers() is None
        mock_run.assert_not_called()


class TestHomeDirAuth:
    """Codex keeps everything in one home directory."""

    def test_default_home(self, make_env) -> None:
        env = make_env()
        auth = build_codex(env).auth

        assert auth.credential_path() == env.home / ".codex" / "auth.json"
        assert auth.child_environ() == {}

    def test_native_home_variable(self, make_env, tmp_path) -> None:
        auth = build_codex(make_env(CODEX_HOME=str(tmp_path / "native"))).auth

        assert auth.credential_path() == tmp_path / "native" / "auth.json"

    def test_override_wins_and_reaches_child(self, make_env, tmp_path) -> None:
        override = tmp_path / "private"
        env = make_env(CODEX_HOME=str(tmp_path / "native"), CLAWTUTOR_CODEX_HOME=str(override))
        auth = build_codex(env).auth

        assert auth.credential_path() == override / "auth.json"
        assert auth.child_environ()["CODEX_HOME"] == str(override)
        assert auth.state_locations() == [override]

    @pytest.mark.parametrize("key", ["OPENAI_API_KEY", "tokens"])
    def test_credential_keys(self, make_env, mock_which, key) -> None:
        auth = build_codex(make_env()).auth
        _write_credentials(auth.credential_path(), {key: "value"})

        assert auth.next_auth_menu_action() is AuthAction.LOGOUT

    def test_login_command(self, make_env, mock_which, mock_run) -> None:
        auth = build_codex(make_env()).auth

        auth.ensure_auth()

        assert mock_run.call_args.args[0] == ["/usr/bin/codex", "login"]
        assert json.loads(auth.credential_path().read_text()) == {}

    def test_clear_without_override_keeps_tool_config(
        self, make_env, mock_which
    ) -> None:
        env = make_env()
        auth = build_codex(env).auth
        _write_credentials(auth.credential_path(), {"tokens": {}})
        config = env.home / ".codex" / "config.toml"
        config.write_text('model = "o3"\n')

        auth.clear_auth()

        assert not auth.credential_path().exists()
        assert config.exists()
        assert auth.credential_state() is CredentialState.INSTALLED_NO_CREDENTIAL
