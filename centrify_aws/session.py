# ABOUTME: Authentication session state machine
# ABOUTME: Starts the session, follows a one-time pod redirect and sequences challenge rounds

"""Session bootstrapping and the challenge loop."""

import time
from collections.abc import Callable
from dataclasses import dataclass

from .challenges import ChallengeResolver
from .console import debug_print
from .exceptions import ProtocolError
from .gateway import HttpGateway
from .models import AuthSession, Challenge, ChallengeOutcome, SessionState, parse_challenges
from .prompts import Prompter


@dataclass(frozen=True)
class StartResult:
    """What StartAuthentication told us, including an optional pod redirect."""

    tenant_id: str | None
    session_id: str | None
    challenges: tuple[Challenge, ...]
    redirect: str | None = None


class SessionMachine:
    """Owns the authentication session and turns challenge rounds into a bearer token."""

    def __init__(
        self,
        gateway: HttpGateway,
        prompter: Prompter,
        max_rounds: int = 10,
        poll_interval: float = 2.0,
        oob_timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.gateway = gateway
        self.prompter = prompter
        self.max_rounds = max_rounds
        self.poll_interval = poll_interval
        self.oob_timeout = oob_timeout
        self._sleep = sleep

    def start(self, user: str) -> AuthSession:
        """Start authentication for ``user``, following at most one pod redirect."""
        gateway = self.gateway
        result = self._start_once(gateway, user)

        if result.redirect:
            debug_print(f"Tenant redirected to pod {result.redirect}")
            gateway = gateway.with_endpoint(f"https://{result.redirect}")
            result = self._start_once(gateway, user)
            if result.redirect:
                raise ProtocolError(f"Tenant redirected twice (last to {result.redirect})")

        if not result.tenant_id or not result.session_id:
            raise ProtocolError("StartAuthentication returned no TenantId/SessionId")
        if not result.challenges:
            raise ProtocolError("StartAuthentication returned no challenges")

        return AuthSession(
            endpoint=gateway.endpoint,
            tenant_id=result.tenant_id,
            session_id=result.session_id,
            state=SessionState.STARTED,
            pending=list(result.challenges),
        )

    def advance(self, session: AuthSession) -> str:
        """Answer pending challenges until none remain and return the bearer token."""
        if session.state is not SessionState.STARTED:
            raise ProtocolError(f"Cannot advance a session in state {session.state.value}")

        resolver = ChallengeResolver(
            self.gateway.with_endpoint(session.endpoint),
            session,
            self.prompter,
            poll_interval=self.poll_interval,
            oob_timeout=self.oob_timeout,
            sleep=self._sleep,
        )
        session.state = SessionState.AWAITING_CHALLENGE

        last: ChallengeOutcome | None = None
        rounds = 0
        try:
            while session.pending:
                rounds += 1
                if rounds > self.max_rounds:
                    raise ProtocolError(f"Authentication did not finish after {self.max_rounds} challenge rounds")

                last = resolver.resolve(session.pending[0])
                if last.challenges is not None:
                    # Provider sent a fresh challenge package
                    session.pending = list(last.challenges)
                else:
                    session.pending = session.pending[1:]

            if last is None or not last.bearer_token:
                summary = last.summary if last else "none"
                raise ProtocolError(f"Authentication finished without a bearer token (summary: {summary})")
        except ProtocolError:
            session.state = SessionState.FAILED
            raise

        session.state = SessionState.AUTHENTICATED
        return last.bearer_token

    def _start_once(self, gateway: HttpGateway, user: str) -> StartResult:
        result = gateway.start_authentication(user)

        redirect = result.get("PodFqdn")
        if redirect and redirect.lower() == gateway.hostname:
            redirect = None

        return StartResult(
            tenant_id=result.get("TenantId"),
            session_id=result.get("SessionId"),
            challenges=() if redirect else parse_challenges(result.get("Challenges")),
            redirect=redirect,
        )
