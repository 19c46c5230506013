from io import StringIO

from rich.console import Console


def create_console() -> Console:
    """Create a new console instance (factory function).

    This is the preferred way to get a console instance for dependency injection.

    Returns:
        Console: A new Rich Console instance configured for the current environment.
    """
    return Console()


def captured_console() -> Console:
    """Return a console that captures output to a string."""
    return Console(file=StringIO(), width=100)


def print_error(console: Console, text: str, **kwargs) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {text}[/red]", **kwargs)


def print_success(console: Console, text: str, **kwargs) -> None:
    """Print a success message."""
    console.print(f"[green]Success: {text}[/green]", **kwargs)


def print_warning(console: Console, text: str, **kwargs) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {text}[/yellow]", **kwargs)


def print_info(console: Console, text: str, **kwargs) -> None:
    """Print an info message."""
    console.print(f"[blue]Info: {text}[/blue]", **kwargs)
