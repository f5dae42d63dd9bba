"""Preflight checks to validate the engine environment."""

from clawtutor.console import console
from clawtutor.engines import CredentialState, EngineRegistry

_STATE_LABELS = {
    CredentialState.INSTALLED_WITH_CREDENTIAL: "[green]signed in[/green]",
    CredentialState.INSTALLED_NO_CREDENTIAL: "[yellow]no credential[/yellow]",
}


def check_engines(registry: EngineRegistry) -> bool:
    """Report each engine's install and credential state.

    Returns True when at least one engine is installed.
    """
    console.print("[bold]AI Coding Engines:[/bold]")

    available = registry.available()
    for engine in registry.get_all():
        if engine not in available:
            console.print(
                f"  [dim]✗[/dim] {engine.name} - [dim]{engine.install_command}[/dim]"
            )
            continue
        state = engine.auth.credential_state()
        label = _STATE_LABELS.get(state, "[dim]not installed[/dim]")
        console.print(
            f"  [green]✓[/green] {engine.name} ([cyan]{engine.cli_binary}[/cyan])"
            f" - {label}"
        )

    if not available:
        console.print("\n[yellow]⚠[/yellow] No AI coding engines detected.")
        console.print("[dim]Install at least one engine to use clawtutor.[/dim]")
        return False

    console.print(f"\n[green]✓[/green] {len(available)} engine(s) available")
    console.print(
        "[dim]Run 'clawtutor auth login' to sign in to an engine.[/dim]"
    )
    return True
