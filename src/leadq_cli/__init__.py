"""
LeadQ CLI - guided first-run setup for LeadQ.ai workspaces.

This package provides a step-by-step setup wizard that collects:
- Personal profile and role
- Organization details
- CRM pipeline template and lead sources
- Team invites and communication preference

and saves them as a single setup record in a key-value store.
"""

__version__ = "1.0.0"
__author__ = "LeadQ Team"

__all__ = [
    "__version__",
]
