"""Command modules for LeadQ CLI."""

from leadq_cli.commands.setup import init, reset, show, status, templates

__all__ = ["init", "reset", "show", "status", "templates"]
