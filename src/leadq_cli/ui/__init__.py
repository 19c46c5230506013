"""Rich console helpers for the LeadQ CLI."""

from leadq_cli.ui.console import (
    captured_console,
    create_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "captured_console",
    "create_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
