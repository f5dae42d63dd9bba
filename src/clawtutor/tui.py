"""Interactive home screen."""

from __future__ import annotations

import logging
import random
from enum import Enum
from pathlib import Path

import click
from rich.panel import Panel
from rich.text import Text

from clawtutor import __version__
from clawtutor.config.init import SPECIFICATION_TEMPLATE
from clawtutor.console import console

logger = logging.getLogger(__name__)

START_COMMAND = "/start"
EXIT_COMMANDS = ("/exit", "/quit")

SLOGANS = (
    "Your agents are warming up.",
    "Write the spec. Let the swarm argue about it.",
    "One prompt away from a pull request.",
    "Tests first. Apologies never.",
    "The backlog fears you.",
)


class HomeOutcome(Enum):
    """How the home screen ended."""

    START = "start"
    EXIT = "exit"


def render_welcome() -> Panel:
    """Build the welcome banner with version and a slogan."""
    title = Text()
    title.append("Claw", style="bold")
    title.append("Tutor", style="bold cyan")
    title.append(f"  v{__version__}", style="dim")

    body = Text(random.choice(SLOGANS), style="cyan")
    body.append("\n\nCommands: ", style="dim")
    body.append(f"{START_COMMAND}  {'  '.join(EXIT_COMMANDS)}", style="bold")
    return Panel(body, title=title, expand=False)


def check_specification(spec_path: Path) -> str | None:
    """Return a message describing why /start cannot run yet, or None."""
    if not spec_path.is_file():
        return f"Specification not found at {spec_path}. Create it, then run /start."
    try:
        text = spec_path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read specification %s", spec_path, exc_info=True)
        return f"Cannot read specification at {spec_path}: {e}"
    if not text:
        return f"Specification at {spec_path} is empty. Describe your project first."
    if text == SPECIFICATION_TEMPLATE.strip():
        return f"Specification at {spec_path} is still the template. Fill it in first."
    return None


class HomeSession:
    """Command loop for the home screen."""

    def __init__(self, spec_path: Path) -> None:
        self.spec_path = spec_path

    def handle_command(self, command: str) -> HomeOutcome | None:
        """Handle one command. Returns an outcome when the session should end."""
        cmd = command.strip().lower()
        logger.debug("Executing command: %s", cmd)

        if not cmd:
            return None

        if cmd == START_COMMAND:
            problem = check_specification(self.spec_path)
            if problem:
                console.print(f"[blue]ℹ[/blue] {problem}")
                return None
            return HomeOutcome.START

        if cmd in EXIT_COMMANDS:
            return HomeOutcome.EXIT

        console.print(
            f"[red]Unknown command: {command.strip()}. "
            f"Available commands: {START_COMMAND}, {EXIT_COMMANDS[0]}[/red]"
        )
        return None

    def run(self) -> HomeOutcome:
        """Show the welcome banner and read commands until one ends the session."""
        console.print(render_welcome())
        while True:
            try:
                command = click.prompt(">", default="", show_default=False)
            except click.Abort:
                return HomeOutcome.EXIT
            outcome = self.handle_command(command)
            if outcome is not None:
                return outcome


def start_tui(spec_path: Path) -> HomeOutcome:
    """Run the home screen until the user starts a workflow or exits."""
    return HomeSession(spec_path).run()
