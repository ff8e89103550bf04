# ABOUTME: End-to-end pipeline from user identity to temporary AWS credentials
# ABOUTME: Runs session start, challenge loop, assertion fetch, role choice and STS exchange

"""Credential pipeline."""

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from rich.markup import escape

from .assertion import AssertionFetcher, RoleCatalog
from .config import Settings, clamp_duration
from .console import debug_print, err_console
from .exceptions import CentrifyAwsError
from .exchange import CredentialExchanger
from .gateway import HttpGateway
from .models import CredentialSet
from .prompts import Prompter
from .session import SessionMachine


@contextmanager
def phase(name: str) -> Iterator[None]:
    """Tag errors raised inside the block with the pipeline phase."""
    try:
        yield
    except CentrifyAwsError as e:
        if e.phase is None:
            e.phase = name
        raise


def obtain_credentials(
    settings: Settings,
    prompter: Prompter | None = None,
    gateway: HttpGateway | None = None,
    exchanger: CredentialExchanger | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CredentialSet:
    """Authenticate ``settings.user`` and return credentials for the chosen role."""
    settings.validate()
    prompter = prompter or Prompter()
    gateway = gateway or HttpGateway(settings.base_url)
    exchanger = exchanger or CredentialExchanger(region=settings.aws_region)

    machine = SessionMachine(
        gateway,
        prompter,
        max_rounds=settings.max_rounds,
        poll_interval=settings.poll_interval,
        oob_timeout=settings.oob_timeout,
        sleep=sleep,
    )

    with phase("start"):
        err_console.print(f"Authenticating [bold]{escape(settings.user)}[/bold] with {escape(gateway.hostname)}...")
        session = machine.start(settings.user)
        debug_print(f"Session started on {session.endpoint} (tenant {session.tenant_id})")

    with phase("challenge"):
        bearer_token = machine.advance(session)
        err_console.print("[green]Authentication successful.[/green]")

    with phase("assertion"):
        assertion = AssertionFetcher(gateway.with_endpoint(session.endpoint)).fetch(bearer_token, settings.app_key)

    with phase("roles"):
        catalog = RoleCatalog.from_assertion(assertion)
        debug_print(f"Assertion grants {len(catalog)} role(s)")
        binding = catalog.select(prompter, preferred=settings.role_arn)

    with phase("exchange"):
        credentials = exchanger.exchange(
            binding.role_arn,
            binding.provider_arn,
            assertion.raw,
            duration_seconds=settings.duration_seconds or clamp_duration(catalog.session_duration),
        )
        err_console.print(f"[green]Assumed {escape(binding.role_arn)}[/green] (expires {credentials.expiration})")

    return credentials
