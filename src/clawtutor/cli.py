"""Command-line interface for clawtutor."""

import logging
from dataclasses import dataclass
from pathlib import Path

import click
from rich.panel import Panel

from clawtutor import __version__
from clawtutor.background import BackgroundInitializer
from clawtutor.config import (
    ClawtutorConfig,
    Environment,
    get_default_spec_path,
    is_home_directory,
    load_config,
    save_config,
)
from clawtutor.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_yaml_config,
)
from clawtutor.config.preflight import check_engines
from clawtutor.console import console
from clawtutor.engines import (
    AuthAction,
    EngineError,
    EngineRegistry,
    UnknownProviderError,
    build_registry,
)
from clawtutor.logs import configure_logging
from clawtutor.tui import HomeOutcome, start_tui

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """State shared by all commands, built once per invocation."""

    env: Environment
    registry: EngineRegistry
    cwd: Path
    config: ClawtutorConfig


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"clawtutor [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def _print_home_directory_blocked() -> None:
    console.print(
        Panel(
            "clawtutor needs to run in a project directory,\n"
            "not directly in your home folder.\n\n"
            "[dim]Try:[/dim]\n"
            "  [cyan]cd ~/your-project[/cyan]\n"
            "  [cyan]clawtutor[/cyan]\n\n"
            "[dim]Or specify a directory:[/dim]\n"
            "  [cyan]clawtutor --dir ~/your-project[/cyan]",
            title="[bold]Cannot run from home directory[/bold]",
            expand=False,
        )
    )


def _resolve_spec_path(cwd: Path, spec: Path | None, config: ClawtutorConfig) -> Path:
    """Pick the specification file: --spec, then config, then the default."""
    if spec is not None:
        return spec if spec.is_absolute() else cwd / spec
    if config.spec_path:
        return cwd / config.spec_path
    return get_default_spec_path(cwd)


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    help="Target workspace directory (default: $CLAWTUTOR_CWD or current directory).",
)
@click.option(
    "--spec",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the planning specification file.",
)
@click.pass_context
def main(ctx: click.Context, directory: Path | None, spec: Path | None) -> None:
    """ClawTutor - multi-agent CLI orchestrator."""
    env = Environment.from_env()
    cwd = directory if directory is not None else env.working_directory()

    if is_home_directory(cwd, env.home):
        logger.debug("Blocked: attempted to run from home directory %s", cwd)
        _print_home_directory_blocked()
        raise SystemExit(1)

    log_path = configure_logging(env, cwd)
    if log_path:
        logger.debug("Debug log enabled at %s", log_path)

    registry = build_registry(env)
    config = load_config(cwd, env.home)
    ctx.obj = AppContext(env=env, registry=registry, cwd=cwd, config=config)

    if ctx.invoked_subcommand is not None:
        return

    spec_path = _resolve_spec_path(cwd, spec, config)
    logger.debug("Working directory %s, specification %s", cwd, spec_path)

    # Not joined: the home screen never waits for initialization
    BackgroundInitializer(registry).start(cwd)

    if start_tui(spec_path) is HomeOutcome.START:
        console.print(f"[bold green]Specification ready: {spec_path}[/bold green]")


def select_auth_provider(
    registry: EngineRegistry, preferred: str | None = None
) -> str | None:
    """Prompt for an engine id. Returns None if the user cancels."""
    engines = registry.get_all()
    console.print("[bold]Choose authentication provider:[/bold]")
    default = ""
    for i, engine in enumerate(engines, 1):
        console.print(f"  {i}. {engine.name} [dim]({engine.id}) - {engine.description}[/dim]")
        if engine.id == preferred:
            default = str(i)
    console.print("  [dim]Enter a number or engine id, or leave blank to cancel.[/dim]")

    while True:
        try:
            answer: str = click.prompt(
                "Provider", default=default, show_default=bool(default)
            )
        except click.Abort:
            return None
        answer = answer.strip().lower()
        if not answer:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(engines):
            return engines[int(answer) - 1].id
        if answer in registry:
            return answer
        console.print(f"[red]Unknown provider: {answer}[/red]")


def handle_login(registry: EngineRegistry, provider_id: str) -> None:
    """Log in to an engine, or report that it is already authenticated.

    Raises:
        UnknownProviderError: provider_id is not registered.
        EngineError: the engine CLI is missing or failed to launch.
    """
    engine = registry.get(provider_id)
    if engine is None:
        raise UnknownProviderError(provider_id)

    if engine.auth.next_auth_menu_action() is AuthAction.LOGOUT:
        if not engine.auth.supports_provider_list:
            console.print(
                f"Already authenticated with {engine.name}. "
                "Use `clawtutor auth logout` to sign out."
            )
            return

        console.print(
            Panel(f"✅  {engine.name} Already Authenticated", expand=False)
        )
        console.print("Current authentication providers:\n")
        try:
            engine.auth.list_providers()
        except OSError:
            logger.debug("Provider listing failed for %s", engine.id, exc_info=True)
            console.print("(Unable to fetch auth list)")
        console.print()

        try:
            add_another = click.confirm(
                "Do you want to add another authentication provider?", default=False
            )
        except click.Abort:
            console.print("\nAuthentication update cancelled.\n")
            return

        if add_another:
            engine.auth.ensure_auth(force_login=True)
            console.print(
                f"\n[green]{engine.name} authentication provider added "
                "successfully.[/green]"
            )
        else:
            console.print("\nTo sign out and clear all data: clawtutor auth logout")
        return

    engine.auth.ensure_auth()
    console.print(f"[green]{engine.name} authentication successful.[/green]")


def handle_logout(registry: EngineRegistry, provider_id: str) -> None:
    """Clear an engine's credentials and state.

    Raises:
        UnknownProviderError: provider_id is not registered.
    """
    engine = registry.get(provider_id)
    if engine is None:
        raise UnknownProviderError(provider_id)

    engine.auth.clear_auth()
    console.print(f"Signed out from {engine.name}. Next action will be `login`.")


@main.group()
def auth() -> None:
    """Authentication helpers."""


@auth.command("login")
@click.option("--provider", "-p", help="Engine id to authenticate (skips the menu).")
@click.pass_obj
def auth_login(app: AppContext, provider: str | None) -> None:
    """Authenticate with an engine."""
    provider = provider or select_auth_provider(app.registry, app.config.engine)
    if not provider:
        console.print("No provider selected.")
        return

    try:
        handle_login(app.registry, provider.lower())
    except UnknownProviderError as e:
        console.print(f"[yellow]{e}[/yellow]")
    except EngineError as e:
        console.print(f"[red]{e}[/red]")


@auth.command("logout")
@click.option("--provider", "-p", help="Engine id to sign out of (skips the menu).")
@click.pass_obj
def auth_logout(app: AppContext, provider: str | None) -> None:
    """Log out of an engine and remove its local state."""
    provider = provider or select_auth_provider(app.registry, app.config.engine)
    if not provider:
        console.print("No provider selected.")
        return

    try:
        handle_logout(app.registry, provider.lower())
    except UnknownProviderError as e:
        console.print(f"[yellow]{e}[/yellow]")


@main.command()
@click.pass_obj
def preflight(app: AppContext) -> None:
    """Validate environment is ready (engines installed and signed in)."""
    if not check_engines(app.registry):
        raise SystemExit(1)


@main.command("config")
@click.option("--engine", "-e", help="Save the preferred engine to the global config.")
@click.pass_obj
def config_command(app: AppContext, engine: str | None) -> None:
    """Show the effective configuration."""
    home_path = get_home_config_path(app.env.home)
    local_path = get_local_config_path(app.cwd)

    if engine:
        engine = engine.lower()
        if engine not in app.registry:
            console.print(f"[red]Unknown engine: {engine}[/red]")
            console.print(
                "Available engines: "
                + ", ".join(e.id for e in app.registry.get_all())
            )
            raise SystemExit(1)
        existing = ClawtutorConfig.from_dict(load_yaml_config(home_path) or {})
        save_config(existing.merge(ClawtutorConfig(engine=engine)), home_path)
        console.print(f"[green]Saved preferred engine '{engine}' to {home_path}[/green]")
        app.config = load_config(app.cwd, app.env.home)

    console.print("\n[bold]Current Effective Configuration:[/bold]")
    console.print(f"  [dim]Global: {home_path}[/dim]")
    console.print(f"  [dim]Local: {local_path}[/dim]")
    console.print()

    data = app.config.to_dict()
    if data:
        for key, value in data.items():
            console.print(f"  {key}: {value}")
    else:
        console.print("  [dim](using built-in defaults)[/dim]")
