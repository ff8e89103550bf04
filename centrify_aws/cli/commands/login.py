# ABOUTME: Login command that authenticates against Centrify and prints AWS exports
# ABOUTME: Intended for eval "$(centrify-aws login)" in the calling shell

"""Login command - Exchange Centrify MFA for temporary AWS credentials."""

from cleo.commands.command import Command
from cleo.helpers import option
from rich.markup import escape

from centrify_aws.config import Settings
from centrify_aws.console import err_console, set_debug
from centrify_aws.dependencies import check_dependencies
from centrify_aws.exceptions import CentrifyAwsError
from centrify_aws.export import export_line


class LoginCommand(Command):
    name = "login"
    description = "Authenticate with Centrify and print shell exports for temporary AWS credentials"

    options = [
        option("host", description="Centrify tenant host (env: CENTRIFY_HOST)", flag=False, default=None),
        option("app-key", description="AWS SAML application key (env: CENTRIFY_APP_KEY)", flag=False, default=None),
        option("user", "u", description="Login name (env: CENTRIFY_USER)", flag=False, default=None),
        option(
            "role",
            "r",
            description="Role ARN to assume without prompting (env: CENTRIFY_ROLE_ARN)",
            flag=False,
            default=None,
        ),
        option("region", description="AWS region for STS (env: AWS_REGION)", flag=False, default=None),
        option(
            "duration",
            description="Session duration in seconds, overrides the assertion (env: CENTRIFY_DURATION)",
            flag=False,
            default=None,
        ),
        option(
            "oob-timeout",
            description="Give up waiting for out-of-band approval after this many seconds",
            flag=False,
            default=None,
        ),
        option("debug", description="Print debug output to stderr", flag=True),
    ]

    def handle(self) -> int:
        """Execute the login command."""
        if self.option("debug"):
            set_debug(True)

        try:
            check_dependencies()

            # Deferred until the dependency check has passed
            from centrify_aws.flow import obtain_credentials

            settings = Settings.from_env(
                host=self.option("host"),
                app_key=self.option("app-key"),
                user=self.option("user"),
                role_arn=self.option("role"),
                aws_region=self.option("region"),
                duration_seconds=self.option("duration"),
                oob_timeout=self.option("oob-timeout"),
            )
            credentials = obtain_credentials(settings)

        except KeyboardInterrupt:
            # User cancelled - no output needed
            return 1
        except CentrifyAwsError as e:
            err_console.print(f"[red]{escape(str(e))}[/red]")
            return e.exit_code

        # Output credentials for the calling shell to evaluate
        print(export_line(credentials))  # noqa: T201
        return 0
