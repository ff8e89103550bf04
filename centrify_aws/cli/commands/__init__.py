# ABOUTME: Commands module for centrify-aws CLI
# ABOUTME: Contains all CLI command implementations

"""CLI commands for centrify-aws."""

from .login import LoginCommand
from .logout import LogoutCommand

__all__ = [
    "LoginCommand",
    "LogoutCommand",
]
