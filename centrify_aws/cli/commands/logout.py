# ABOUTME: Logout command that clears AWS credential variables from the calling shell
# ABOUTME: Prints the unset statement used by login without contacting any service

"""Logout command - Forget temporary AWS credentials in the current shell."""

from cleo.commands.command import Command

from centrify_aws.export import unset_line


class LogoutCommand(Command):
    name = "logout"
    description = "Print shell statements that unset AWS credential variables"

    def handle(self) -> int:
        """Execute the logout command."""
        print(unset_line())  # noqa: T201
        return 0
