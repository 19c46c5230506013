"""Setup and configuration commands for leadq-cli."""

import asyncio
import logging
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from ..config.settings import Settings
from ..onboarding import (
    OnboardingWizard,
    PersistedRecord,
    StorageError,
    create_store,
    list_templates,
    load_record,
    mark_onboarding_complete,
    needs_onboarding,
    reset_onboarding,
)
from ..onboarding.templates import (
    COMMUNICATION_PREFERENCES,
    INDUSTRIES,
    LEAD_SOURCES,
    ROLES,
    TEAM_SIZES,
    option_label,
)
from ..ui.console import print_error, print_info, print_success, print_warning

logger = logging.getLogger(__name__)


def _context(ctx: click.Context) -> tuple[Settings, Console]:
    return ctx.obj["settings"], ctx.obj["console"]


async def _close(store) -> None:
    close = getattr(store, "close", None)
    if close is not None:
        await close()


async def _run_init(settings: Settings, console: Console, force: bool) -> Optional[PersistedRecord]:
    store = create_store(settings.storage)
    try:
        if not force and not await needs_onboarding(
            store, settings.storage.complete_flag_key
        ):
            print_warning(console, "Setup has already been completed.")
            console.print("[dim]Use --force to run the wizard again[/dim]")
            return None

        async def _mark_complete() -> None:
            await mark_onboarding_complete(store, settings.storage.complete_flag_key)

        wizard = OnboardingWizard(
            store=store,
            console=console,
            settings=settings,
            on_complete=_mark_complete,
        )
        return await wizard.run()
    finally:
        await _close(store)


@click.command()
@click.option(
    "--force",
    is_flag=True,
    help="Run the wizard even if setup was already completed",
)
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """
    Run the first-time setup wizard.

    Collects:
    - Your profile and role
    - Your organization
    - Pipeline template and lead sources
    """
    settings, console = _context(ctx)
    console.print("[bold cyan]Starting LeadQ setup...[/bold cyan]\n")

    try:
        asyncio.run(_run_init(settings, console, force))
    except StorageError as e:
        logger.error(f"Setup failed: {e}")
        print_error(console, str(e))
        ctx.exit(1)


async def _run_status(settings: Settings) -> tuple[bool, bool]:
    store = create_store(settings.storage)
    try:
        pending = await needs_onboarding(store, settings.storage.complete_flag_key)
        has_record = await store.get(settings.storage.record_key) is not None
        return pending, has_record
    finally:
        await _close(store)


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show whether setup still needs to run."""
    settings, console = _context(ctx)

    try:
        pending, has_record = asyncio.run(_run_status(settings))
    except StorageError as e:
        print_error(console, str(e))
        ctx.exit(1)
        return

    table = Table(title="Setup Status", show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Backend", settings.storage.backend)
    if settings.storage.backend == "file":
        table.add_row("Store file", settings.storage.path)
    table.add_row(
        "Onboarding",
        "[yellow]pending[/yellow]" if pending else "[green]complete[/green]",
    )
    table.add_row("Saved record", "yes" if has_record else "no")
    console.print(table)

    if pending:
        console.print("\n[dim]Run: leadq-cli init[/dim]")


async def _run_show(settings: Settings) -> tuple[Optional[str], Optional[PersistedRecord]]:
    store = create_store(settings.storage)
    try:
        payload = await store.get(settings.storage.record_key)
        record = await load_record(store, settings.storage.record_key)
        return payload, record
    finally:
        await _close(store)


def _display_record(console: Console, record: PersistedRecord) -> None:
    table = Table(title="LeadQ Setup", show_header=True)
    table.add_column("Section", style="cyan", width=14)
    table.add_column("Field", style="white")
    table.add_column("Value", style="green")

    profile = record.profile
    table.add_row("Profile", "Name", profile.full_name)
    table.add_row("", "Email", profile.email)
    table.add_row("", "Phone", profile.phone)
    table.add_row("", "Location", profile.location)

    company = record.company
    table.add_row("Company", "Name", company.name)
    table.add_row("", "Website", company.website)
    table.add_row("", "Industry", option_label(INDUSTRIES, company.industry))
    table.add_row("", "Team size", option_label(TEAM_SIZES, company.team_size))

    table.add_row("Preferences", "Role", option_label(ROLES, record.preferences.role))
    table.add_row(
        "",
        "Contact via",
        option_label(COMMUNICATION_PREFERENCES, record.preferences.communication_preference),
    )

    crm = record.crm
    table.add_row("CRM", "Pipeline", crm.pipeline)
    table.add_row("", "Stages", " → ".join(crm.stages))
    table.add_row(
        "",
        "Lead sources",
        ", ".join(LEAD_SOURCES.get(source, source) for source in crm.lead_sources),
    )

    table.add_row("Team", "Invites", ", ".join(record.team) or "-")
    table.add_row("", "Completed", record.completed_at)

    console.print(table)


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the raw stored JSON")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """Show the saved setup record."""
    settings, console = _context(ctx)

    try:
        payload, record = asyncio.run(_run_show(settings))
    except (StorageError, ValueError) as e:
        print_error(console, f"Could not read saved setup: {e}")
        ctx.exit(1)
        return

    if record is None:
        print_info(console, "No setup record found.")
        console.print("[dim]Run: leadq-cli init[/dim]")
        return

    if as_json:
        click.echo(payload)
    else:
        _display_record(console, record)


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """
    Clear the saved setup record and completion flag.

    The wizard runs again on the next `leadq-cli init`.
    """
    settings, console = _context(ctx)

    if not yes and not Confirm.ask(
        "[yellow]Delete the saved setup and start over?[/yellow]", default=False
    ):
        console.print("[dim]Reset cancelled[/dim]")
        return

    async def _run_reset() -> bool:
        store = create_store(settings.storage)
        try:
            return await reset_onboarding(
                store,
                settings.storage.record_key,
                settings.storage.complete_flag_key,
            )
        finally:
            await _close(store)

    try:
        asyncio.run(_run_reset())
    except StorageError as e:
        print_error(console, str(e))
        ctx.exit(1)
        return

    print_success(console, "Setup data cleared")


@click.command()
@click.pass_context
def templates(ctx: click.Context) -> None:
    """List the available pipeline templates."""
    _, console = _context(ctx)

    table = Table(title="Pipeline Templates", show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Stages", style="dim")

    for key, name, stages in list_templates():
        table.add_row(key, name, " → ".join(stages))

    console.print(table)
    console.print(
        Panel(
            "Selecting a template replaces the pipeline stages in full.",
            border_style="dim",
        )
    )
