"""Tests for the environment snapshot."""

from pathlib import Path

import pytest

from clawtutor.config.environment import Environment, expand_home_dir


def test_expand_home_dir(home: Path) -> None:
    assert expand_home_dir("~", home) == home
    assert expand_home_dir("~/work", home) == home / "work"
    assert expand_home_dir("/abs/path", home) == Path("/abs/path")


def test_xdg_defaults(make_env) -> None:
    env = make_env()

    assert env.config_base() == env.home / ".config"
    assert env.cache_base() == env.home / ".cache"
    assert env.data_base() == env.home / ".local" / "share"


def test_xdg_variables_fall_back_independently(make_env) -> None:
    env = make_env(XDG_DATA_HOME="/xdg/data", XDG_CONFIG_HOME="~/cfg")

    assert env.data_base() == Path("/xdg/data")
    assert env.config_base() == env.home / "cfg"
    assert env.cache_base() == env.home / ".cache"


def test_engine_homes_collected(make_env) -> None:
    env = make_env(
        CLAWTUTOR_OPENCODE_HOME="~/.clawtutor/opencode",
        CLAWTUTOR_CODEX_HOME="/srv/codex",
        CLAWTUTOR_EMPTY_HOME="  ",
        CLAWTUTOR_CWD="/projects/app",
    )

    assert env.engine_home("opencode") == env.home / ".clawtutor" / "opencode"
    assert env.engine_home("CODEX") == Path("/srv/codex")
    assert env.engine_home("empty") is None
    assert set(env.engine_homes) == {"opencode", "codex"}


def test_working_directory_override(make_env) -> None:
    assert make_env(CLAWTUTOR_CWD="/projects/app").working_directory() == Path(
        "/projects/app"
    )
    assert make_env().working_directory() == Path.cwd()


@pytest.mark.parametrize(
    ("variables", "expected"),
    [
        ({}, False),
        ({"LOG_LEVEL": "DEBUG"}, True),
        ({"LOG_LEVEL": "info"}, False),
        ({"DEBUG": "1"}, True),
        ({"DEBUG": "0"}, False),
        ({"DEBUG": "False"}, False),
        ({"DEBUG": "clawtutor:*"}, True),
    ],
)
def test_debug_enabled(make_env, variables: dict[str, str], expected: bool) -> None:
    assert make_env(**variables).debug_enabled is expected


def test_snapshot_is_isolated_from_later_changes(
    monkeypatch: pytest.MonkeyPatch, home: Path
) -> None:
    monkeypatch.setenv("CLAWTUTOR_OPENCODE_HOME", "/first")
    env = Environment.from_env(home=home)
    monkeypatch.setenv("CLAWTUTOR_OPENCODE_HOME", "/second")

    assert env.engine_home("opencode") == Path("/first")
    assert env.environ["CLAWTUTOR_OPENCODE_HOME"] == "/first"


def test_child_environ_is_a_copy(make_env) -> None:
    env = make_env(PATH="/usr/bin")

    child = env.child_environ(XDG_DATA_HOME="/tmp/data")

    assert child == {"PATH": "/usr/bin", "XDG_DATA_HOME": "/tmp/data"}
    assert "XDG_DATA_HOME" not in env.environ
    with pytest.raises(TypeError):
        env.environ["PATH"] = "/bin"  # type: ignore[index]
