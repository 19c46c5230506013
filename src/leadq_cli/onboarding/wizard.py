"""Interactive terminal setup wizard for LeadQ CLI."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.validation import ValidationError, Validator
from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from .assembler import PersistedRecord
from .controller import StepSequenceController
from .draft import OTHER, DraftState, Known, Other
from .steps import SKIPPABLE_STEPS, STEP_COUNT, WizardStep
from .storage import RECORD_KEY, PersistenceGateway
from .templates import (
    COMMUNICATION_PREFERENCES,
    DEFAULT_TEMPLATE,
    INDUSTRIES,
    LEAD_SOURCES,
    ROLES,
    TEAM_SIZES,
    TEMPLATES,
    list_templates,
    select_template,
    toggle_lead_source,
)
from .validation import is_valid_email

if TYPE_CHECKING:
    from ..config.settings import Settings


class EmailValidator(Validator):
    """Validator for email address input."""

    def validate(self, document: Any) -> None:
        text = document.text
        if not text:
            return

        if not is_valid_email(text):
            raise ValidationError(
                message="Enter an address like you@example.com",
                cursor_position=len(text),
            )


class OnboardingWizard:
    """Interactive setup wizard for first-time users."""

    def __init__(
        self,
        store: PersistenceGateway,
        console: Console | None = None,
        settings: Optional["Settings"] = None,
        session: PromptSession | None = None,
        on_complete: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> None:
        """
        Initialize the onboarding wizard.

        Args:
            store: Store receiving the completed setup record
            console: Rich Console instance for output (injected dependency)
            settings: Application settings (defaults apply when omitted)
            session: prompt_toolkit session, created on first use if omitted
            on_complete: Awaited once after the record is saved
        """
        self.console = console or Console()
        self.store = store
        self._session = session
        self._on_complete = on_complete

        record_key = RECORD_KEY
        skip_requires_validation = True
        template = DEFAULT_TEMPLATE
        communication = "email"
        if settings is not None:
            record_key = settings.storage.record_key
            skip_requires_validation = settings.wizard.skip_requires_validation
            template = settings.wizard.default_template
            communication = settings.wizard.default_communication

        self.draft = DraftState(communication_preference=communication)
        select_template(self.draft, template)

        self.controller = StepSequenceController(
            self.draft,
            store,
            on_complete=self._handle_complete,
            on_error=self._handle_error,
            record_key=record_key,
            skip_requires_validation=skip_requires_validation,
        )

    @property
    def session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession()
        return self._session

    async def run(self) -> Optional[PersistedRecord]:
        """
        Run the wizard until the record is saved or the user quits.

        Returns:
            The saved record, or None if the wizard was abandoned
        """
        while not self.controller.is_complete:
            step = self.controller.current_step
            self._display_step_header(step)
            await self._collect(step)

            action = self._ask_action()
            if action == "quit":
                self.console.print(
                    "\n[yellow]Setup abandoned. Nothing was saved.[/yellow]"
                )
                return None

            await self._dispatch(action)

        self._display_summary()
        return self.controller.record

    def _display_step_header(self, step: WizardStep) -> None:
        self.console.print(
            f"\n[bold cyan]Step {step + 1}/{STEP_COUNT}: {step.title}[/bold cyan]"
            f" [dim]{step.description}[/dim]"
        )

    async def _collect(self, step: WizardStep) -> None:
        if step == WizardStep.WELCOME:
            self._display_welcome()
        elif step == WizardStep.PERSONAL:
            await self._collect_personal()
        elif step == WizardStep.ORGANIZATION:
            self._collect_organization()
        elif step == WizardStep.STRATEGY:
            await self._collect_strategy()

    def _ask_action(self) -> str:
        index = self.controller.current_index
        choices = ["continue"]
        if index in SKIPPABLE_STEPS:
            choices.append("skip")
        if index > 0:
            choices.extend(["back", "jump"])
        choices.append("quit")

        return Prompt.ask("Next", choices=choices, default="continue")

    async def _dispatch(self, action: str) -> None:
        if action in ("continue", "skip"):
            if action == "continue":
                moved, message = await self.controller.advance()
            else:
                moved, message = await self.controller.skip()
            # Persistence failures are reported through _handle_error
            if not moved and message != self.controller.last_error:
                self.console.print(f"[yellow]{message}[/yellow]")
                self._display_errors()
        elif action == "back":
            self.controller.retreat()
        elif action == "jump":
            target = self._choose_earlier_step()
            if not self.controller.jump_to(target):
                self.console.print("[yellow]You can only revisit completed steps.[/yellow]")

    def _choose_earlier_step(self) -> int:
        for step in WizardStep:
            if step < self.controller.current_index:
                self.console.print(f"  [cyan]{step + 1}[/cyan] {step.title}")
        return IntPrompt.ask("Go to step", default=1) - 1

    def _display_errors(self) -> None:
        for field, message in self.controller.current_errors().items():
            self.console.print(f"  [red]✗ {field}: {message}[/red]")

    def _display_welcome(self) -> None:
        """Display welcome screen."""
        welcome_text = """
        [bold cyan]Welcome to LeadQ.ai![/bold cyan]

        Let's set up your workspace in just a few steps.
        We'll ask about:

        • You and your role
        • Your organization
        • Your sales pipeline and lead sources

        Fields marked * are required.
        """

        self.console.print(Panel(welcome_text, border_style="cyan", padding=(1, 2)))

    def _choose_option(
        self, label: str, options: list[tuple[str, str]], current: str = ""
    ) -> str:
        """Show a numbered option table and return the chosen value."""
        table = Table(show_header=True)
        table.add_column("ID", style="cyan", width=4)
        table.add_column(label, style="white")

        default = None
        for i, (value, text) in enumerate(options, 1):
            table.add_row(str(i), text)
            if value == current:
                default = i

        self.console.print(table)

        while True:
            choice = IntPrompt.ask(f"Select {label.lower()}", default=default)
            if choice is not None and 1 <= choice <= len(options):
                return options[choice - 1][0]
            self.console.print(f"[red]Choose a number between 1 and {len(options)}[/red]")

    @staticmethod
    def _split_choice(choice: Known | Other | None) -> tuple[str, str]:
        if choice is None:
            return "", ""
        if isinstance(choice, Other):
            return OTHER, choice.custom_text
        return choice.value, ""

    async def _collect_personal(self) -> None:
        self.console.print("\n[bold]Personal Information[/bold]")
        draft = self.draft

        draft.full_name = Prompt.ask("Full name *", default=draft.full_name)
        draft.email = await self.session.prompt_async(
            "Email address *: ",
            validator=EmailValidator(),
            validate_while_typing=False,
            default=draft.email,
        )
        draft.phone = Prompt.ask("Phone number", default=draft.phone)
        draft.location = Prompt.ask("Location", default=draft.location)

        current, custom = self._split_choice(draft.role)
        role = self._choose_option("Role", ROLES, current)
        if role == OTHER:
            custom = Prompt.ask("Please specify your role *", default=custom)
        draft.set_role(role, custom)

    def _collect_organization(self) -> None:
        self.console.print("\n[bold]Company Details[/bold]")
        draft = self.draft

        draft.company_name = Prompt.ask("Company name *", default=draft.company_name)
        draft.company_website = Prompt.ask("Website", default=draft.company_website)
        draft.company_address = Prompt.ask("Address", default=draft.company_address)

        current, custom = self._split_choice(draft.industry)
        industry = self._choose_option("Industry", INDUSTRIES, current)
        if industry == OTHER:
            custom = Prompt.ask("Please specify your industry *", default=custom)
        draft.set_industry(industry, custom)

        draft.team_size = self._choose_option("Team size", TEAM_SIZES, draft.team_size)
        draft.company_intro = Prompt.ask(
            "Company introduction", default=draft.company_intro
        )

    async def _collect_strategy(self) -> None:
        self.console.print("\n[bold]CRM Strategy & Sourcing[/bold]")
        draft = self.draft

        templates = list_templates()
        table = Table(show_header=True)
        table.add_column("ID", style="cyan", width=4)
        table.add_column("Pipeline", style="white", width=20)
        table.add_column("Stages", style="dim")

        default = 1
        for i, (key, name, stages) in enumerate(templates, 1):
            table.add_row(str(i), name, " → ".join(stages))
            if key == draft.pipeline_template:
                default = i

        self.console.print(table)
        while True:
            choice = IntPrompt.ask("Select pipeline", default=default)
            if 1 <= choice <= len(templates):
                break
            self.console.print(
                f"[red]Choose a number between 1 and {len(templates)}[/red]"
            )
        select_template(draft, templates[choice - 1][0])

        self._display_lead_sources()
        source_completer = WordCompleter(list(LEAD_SOURCES), ignore_case=True)
        answer = await self.session.prompt_async(
            "Toggle lead sources (comma-separated ids, blank to keep): ",
            completer=source_completer,
        )
        for source_id in filter(None, (part.strip() for part in answer.split(","))):
            try:
                toggle_lead_source(draft, source_id)
            except KeyError:
                self.console.print(f"[yellow]Unknown lead source: {source_id}[/yellow]")

        invites = Prompt.ask(
            "Invite teammates (comma-separated emails, optional)",
            default=", ".join(invite for invite in draft.team_invites if invite.strip()),
        )
        draft.team_invites = [part.strip() for part in invites.split(",")]

        draft.communication_preference = self._choose_option(
            "Communication preference",
            COMMUNICATION_PREFERENCES,
            draft.communication_preference,
        )

    def _display_lead_sources(self) -> None:
        table = Table(title="Lead Sources", show_header=True)
        table.add_column("ID", style="cyan")
        table.add_column("Source", style="white")
        table.add_column("Selected", justify="center")

        for source_id, label in LEAD_SOURCES.items():
            selected = "[green]✓[/green]" if source_id in self.draft.lead_sources else ""
            table.add_row(source_id, label, selected)

        self.console.print(table)

    async def _handle_complete(self) -> None:
        self.console.print(
            "\n[green]✓ Great! Your LeadQ.ai environment is ready.[/green]"
        )
        if self._on_complete is not None:
            await self._on_complete()

    def _handle_error(self, message: str) -> None:
        self.console.print(f"\n[red]✗ {message}[/red]")
        self.console.print("[dim]Your answers are kept. Choose continue to retry.[/dim]")

    def summary_lines(self) -> list[str]:
        """Summary of the collected setup shown on the Launch step."""
        draft = self.draft
        pipeline = TEMPLATES.get(draft.pipeline_template, {}).get(
            "name", draft.pipeline_template
        )
        return [
            f"Name: {draft.full_name}",
            f"Company: {draft.company_name}",
            f"Pipeline: {pipeline} ({' → '.join(draft.stages)})",
            f"Lead sources: {len(draft.lead_sources)} sources integrated",
        ]

    def _display_summary(self) -> None:
        """Display success message."""
        summary = "\n".join(f"        {line}" for line in self.summary_lines())
        success_text = f"""
        [bold green]You're All Set![/bold green]

        Your profile and LeadQ CRM strategy are ready.

{summary}

        [dim]To start over: leadq-cli reset[/dim]
        """

        self.console.print(Panel(success_text, border_style="green", padding=(1, 2)))
