# ABOUTME: CLI module for centrify-aws
# ABOUTME: Provides the login and logout commands evaluated by the calling shell

"""Command-line interface for centrify-aws."""

from cleo.application import Application

from centrify_aws import __version__

from .commands.login import LoginCommand
from .commands.logout import LogoutCommand


def create_application() -> Application:
    """Create the CLI application."""
    application = Application("centrify-aws", __version__)

    application.add(LoginCommand())
    application.add(LogoutCommand())

    return application


def main():
    """Main entry point for the CLI."""
    application = create_application()
    application.run()


if __name__ == "__main__":
    main()
