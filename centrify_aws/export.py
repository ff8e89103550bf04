# ABOUTME: Renders credentials as a single shell-evaluable line
# ABOUTME: Clears stale AWS variables before exporting the new key, secret and token

"""Shell export line for ``eval "$(centrify-aws login)"``."""

import shlex

from .models import CredentialSet

STALE_VARIABLES = (
    "AWS_PROFILE",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_SECURITY_TOKEN",
)


def unset_line() -> str:
    return f"unset {' '.join(STALE_VARIABLES)};"


def export_line(credentials: CredentialSet) -> str:
    """Return one line that unsets stale variables and exports the new credentials."""
    exports = [
        ("AWS_ACCESS_KEY_ID", credentials.access_key_id),
        ("AWS_SECRET_ACCESS_KEY", credentials.secret_access_key),
        ("AWS_SESSION_TOKEN", credentials.session_token),
    ]
    statements = " ".join(f"export {name}={shlex.quote(value)};" for name, value in exports)
    return f"{unset_line()} {statements}"
