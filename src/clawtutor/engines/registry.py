"""Registry of the engines known to clawtutor."""

from collections.abc import Iterable

from clawtutor.config.environment import Environment
from clawtutor.engines.base import Engine
from clawtutor.engines.codex import build_codex
from clawtutor.engines.opencode import build_opencode


class EngineRegistry:
    """Fixed, ordered collection of engines keyed by id.

    Built once at boot; there is no registration after construction.
    """

    def __init__(self, engines: Iterable[Engine]) -> None:
        self._engines: tuple[Engine, ...] = tuple(engines)
        self._by_id: dict[str, Engine] = {}
        for engine in self._engines:
            if engine.id in self._by_id:
                raise ValueError(f"Duplicate engine id: {engine.id}")
            self._by_id[engine.id] = engine

    def __contains__(self, engine_id: object) -> bool:
        return engine_id in self._by_id

    def get_all(self) -> tuple[Engine, ...]:
        """Return all engines in registration order."""
        return self._engines

    def get(self, engine_id: str) -> Engine | None:
        """Return the engine with this id, or None if it is not registered."""
        return self._by_id.get(engine_id)

    def available(self) -> list[Engine]:
        """Return engines whose CLI is currently installed."""
        return [engine for engine in self._engines if engine.is_installed()]


def build_engines(env: Environment) -> tuple[Engine, ...]:
    """Build every built-in engine, in menu order."""
    return (
        build_opencode(env),
        build_codex(env),
    )


def build_registry(env: Environment) -> EngineRegistry:
    """Build the registry of built-in engines for the given environment."""
    return EngineRegistry(build_engines(env))
