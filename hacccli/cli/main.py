"""Main CLI entry point for hacccli."""

import asyncio
from pathlib import Path

import click

from hacccli.cli.display import (
    console,
    show_banner,
    show_batch_summary,
    show_components,
    show_error,
    show_info,
    show_outcome,
    show_success,
)
from hacccli.cli.prompts import ask_version_choice, prompt_token, select_main_menu_action
from hacccli.cli.wizard import add_component
from hacccli.core.config.settings import Settings, get_settings
from hacccli.core.exceptions.errors import HacccliError
from hacccli.core.logger.logger import setup_logging
from hacccli.models.sync import BatchReport, SyncOutcome
from hacccli.sync.catalog.github import GitHubCatalog
from hacccli.sync.engine import SyncContext, SyncEngine
from hacccli.sync.resolver import DecisionCallback, skip_decision
from hacccli.sync.store import ComponentStore


def create_catalog(settings: Settings, store: ComponentStore) -> GitHubCatalog:
    """Create the GitHub catalog, preferring a configured token over the stored one."""
    return GitHubCatalog(
        token=settings.github.token or store.get_credentials(),
        api_url=settings.github.api_url,
        timeout=settings.github.timeout,
        per_page=settings.github.per_page,
    )


def run_fetch(settings: Settings, interactive: bool = False) -> BatchReport:
    """Sync every registered component.

    Args:
        settings: Application settings.
        interactive: Ask user about releases outside the update tier.

    Returns:
        Report of the batch.
    """
    decide: DecisionCallback = ask_version_choice if interactive else skip_decision

    async def do_fetch() -> BatchReport:
        store = ComponentStore(settings.store.path)
        async with create_catalog(settings, store) as catalog:
            context = SyncContext(store=store, catalog=catalog, settings=settings, decide=decide)
            return await SyncEngine(context).sync_all(on_outcome=show_outcome)

    console.print()
    console.rule("[bold cyan]Fetch Registered Components[/]")
    console.print()

    report = asyncio.run(do_fetch())
    show_batch_summary(report)
    return report


def run_add(settings: Settings, url: str | None = None) -> SyncOutcome | None:
    """Run the registration wizard."""

    async def do_add() -> SyncOutcome | None:
        store = ComponentStore(settings.store.path)
        async with create_catalog(settings, store) as catalog:
            context = SyncContext(store=store, catalog=catalog, settings=settings)
            return await add_component(SyncEngine(context), url)

    console.print()
    console.rule("[bold cyan]Add Custom Component[/]")
    console.print()

    return asyncio.run(do_add())


def ensure_credentials(settings: Settings, store: ComponentStore) -> None:
    """Ask for a GitHub token once when neither settings nor store provide one."""
    if settings.github.token or store.has_credentials():
        return

    token = prompt_token()
    if token:
        store.set_credentials(token)


def run_interactive_mode(settings: Settings) -> None:
    """Run the full interactive CLI mode with main menu."""
    show_banner()

    store = ComponentStore(settings.store.path)
    ensure_credentials(settings, store)

    while True:
        try:
            action = select_main_menu_action()

            if action is None or action == "exit":
                break
            elif action == "add":
                run_add(settings)
            elif action == "fetch":
                run_fetch(settings, interactive=True)
            elif action == "list":
                show_components(store.list_all())

        except HacccliError as e:
            show_error("Error", str(e))
        except KeyboardInterrupt:
            console.print()
            show_info("Interrupted", "Operation cancelled by user.")
            break


@click.group(invoke_without_command=True)
@click.option(
    "--fetch",
    "fetch_all",
    is_flag=True,
    help="Refetch all registered components and download the newest permitted versions",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def main(ctx: click.Context, fetch_all: bool, config_path: Path | None, version: bool) -> None:
    """hacccli - Home Assistant custom component updater.

    Run without arguments to start interactive mode.
    """
    if version:
        from hacccli import __version__

        click.echo(f"hacccli version {__version__}")
        return

    try:
        settings = Settings.from_yaml(config_path) if config_path else get_settings()
    except HacccliError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(settings.logging)
    ctx.obj = settings

    if ctx.invoked_subcommand is not None:
        return

    if fetch_all:
        ctx.invoke(fetch)
    else:
        run_interactive_mode(settings)


@main.command()
@click.option("--interactive", "-i", is_flag=True, help="Ask about releases outside the update tier")
@click.pass_obj
def fetch(settings: Settings, interactive: bool) -> None:
    """Sync all registered components.

    Exits with status 1 when a component failed.

    Example:
        hacccli fetch
    """
    try:
        report = run_fetch(settings, interactive=interactive)
    except HacccliError as e:
        raise click.ClickException(str(e)) from e

    if not report.succeeded:
        raise SystemExit(1)


@main.command()
@click.option("--url", "-u", help="GitHub repository URL")
@click.pass_obj
def add(settings: Settings, url: str | None) -> None:
    """Register a new custom component.

    Example:
        hacccli add --url https://github.com/user/repo
    """
    show_banner()

    try:
        outcome = run_add(settings, url)
    except HacccliError as e:
        raise click.ClickException(str(e)) from e

    if outcome is not None:
        show_success("Success", f"Component {outcome.component.name} added.")


@main.command("list")
@click.pass_obj
def list_components(settings: Settings) -> None:
    """Show all registered components."""
    try:
        components = ComponentStore(settings.store.path).list_all()
    except HacccliError as e:
        raise click.ClickException(str(e)) from e

    show_components(components)


@main.command()
@click.argument("value")
@click.pass_obj
def token(settings: Settings, value: str) -> None:
    """Store a GitHub personal access token."""
    ComponentStore(settings.store.path).set_credentials(value)
    show_success("Token Saved", f"Token stored in {settings.store.path}")


if __name__ == "__main__":
    main()
