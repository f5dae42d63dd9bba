"""Background initialization that runs while the home screen is up."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from clawtutor.config.init import ensure_workspace_structure
from clawtutor.config.workspace import resolve_workspace_root
from clawtutor.console import console
from clawtutor.engines import EngineRegistry

logger = logging.getLogger(__name__)


@dataclass
class InitReport:
    """Outcome of one background initialization pass."""

    bootstrapped: bool = False
    synced: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class BackgroundInitializer:
    """Bootstraps the workspace and syncs engine configs off the main thread.

    ``start`` returns immediately and nothing waits for the thread. Any
    error is logged and printed as a dim diagnostic; the interactive
    session keeps running and the exit code is unaffected. The thread is
    a daemon, so quitting mid-sync abandons whatever step was running;
    every ``sync_config`` is idempotent and simply runs again next time.
    """

    def __init__(
        self,
        registry: EngineRegistry,
        bootstrap: Callable[[Path], object] = ensure_workspace_structure,
    ) -> None:
        self.registry = registry
        self._bootstrap = bootstrap

    def run(self, cwd: Path) -> InitReport:
        """Run one initialization pass synchronously.

        1. Bootstrap the workspace if its root does not exist yet.
        2. Sync every engine that has a ``sync_config``, one at a time in
           registration order. A failing engine is recorded and the pass
           moves on to the next one.
        """
        report = InitReport()

        root = resolve_workspace_root(cwd)
        if not root.exists():
            logger.debug("Bootstrapping workspace at %s (first run)", root)
            self._bootstrap(cwd)
            report.bootstrapped = True

        engines = self.registry.get_all()
        logger.debug("Syncing %d engine configs", len(engines))
        for engine in engines:
            if engine.sync_config is None:
                continue
            try:
                engine.sync_config()
            except Exception as e:
                logger.warning("Config sync failed for %s", engine.id, exc_info=True)
                report.failures[engine.id] = str(e)
            else:
                report.synced.append(engine.id)

        if report.failures:
            failed = ", ".join(sorted(report.failures))
            logger.warning("Background initialization finished with failures: %s", failed)
        else:
            logger.debug("Background initialization complete")
        return report

    def _run_guarded(self, cwd: Path) -> None:
        try:
            report = self.run(cwd)
        except Exception as e:
            logger.exception("Background initialization failed")
            console.print(f"[dim yellow]Background init error: {e}[/dim yellow]")
            return
        for engine_id, message in report.failures.items():
            console.print(
                f"[dim yellow]Config sync failed for {engine_id}: {message}[/dim yellow]"
            )

    def start(self, cwd: Path) -> threading.Thread:
        """Start initialization on a daemon thread and return without waiting."""
        thread = threading.Thread(
            target=self._run_guarded,
            args=(cwd,),
            name="clawtutor-background-init",
            daemon=True,
        )
        thread.start()
        return thread
