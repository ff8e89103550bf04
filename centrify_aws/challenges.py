# ABOUTME: Resolves one round of the multi-factor challenge loop
# ABOUTME: Handles password/OTP answers and polls out-of-band mechanisms until they settle

"""Challenge resolution for a single authentication round."""

import time
from collections.abc import Callable

from .console import debug_print, err_console
from .exceptions import OobTimeoutError, ProtocolError
from .gateway import HttpGateway
from .models import AdvanceAction, AnswerType, AuthSession, Challenge, ChallengeOutcome, Mechanism
from .prompts import Prompter, select_option


class ChallengeResolver:
    """Answers one challenge set on behalf of the user.

    Text mechanisms are answered with a hidden prompt. StartTextOob mechanisms
    start the out-of-band channel and then take either a typed code or an
    empty line meaning the user approved elsewhere. Everything else is
    treated as pure out-of-band and polled every ``poll_interval`` seconds
    while the provider reports ``OobPending``.
    """

    def __init__(
        self,
        gateway: HttpGateway,
        session: AuthSession,
        prompter: Prompter,
        poll_interval: float = 2.0,
        oob_timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gateway = gateway
        self.session = session
        self.prompter = prompter
        self.poll_interval = poll_interval
        self.oob_timeout = oob_timeout
        self._sleep = sleep
        self._clock = clock
        self._handlers: dict[AnswerType, Callable[[Mechanism], ChallengeOutcome]] = {
            AnswerType.TEXT: self._answer_text,
            AnswerType.START_TEXT_OOB: self._answer_text_or_oob,
            AnswerType.OOB: self._answer_oob,
        }

    def resolve(self, challenge: Challenge) -> ChallengeOutcome:
        """Let the user pick a mechanism and drive it to a non-pending outcome."""
        if not challenge.mechanisms:
            raise ProtocolError("Challenge offered no authentication mechanisms")

        labels = [m.selection_label for m in challenge.mechanisms]
        mechanism = challenge.mechanisms[select_option(self.prompter, "Choose an authentication mechanism:", labels)]
        debug_print(f"Using mechanism {mechanism.selection_label} ({mechanism.answer_type.value})")

        handler = self._handlers.get(mechanism.answer_type, self._answer_oob)
        return handler(mechanism)

    def _advance(self, mechanism: Mechanism, action: AdvanceAction, answer: str | None = None) -> ChallengeOutcome:
        result = self.gateway.advance_authentication(
            self.session.tenant_id,
            self.session.session_id,
            mechanism.mechanism_id,
            action.value,
            answer=answer,
        )
        outcome = ChallengeOutcome.from_result(result)
        debug_print(f"{action.value} -> {outcome.summary}")
        return outcome

    def _answer_text(self, mechanism: Mechanism) -> ChallengeOutcome:
        answer = self.prompter.secret(f"{mechanism.prompt_label}:")
        return self._advance(mechanism, AdvanceAction.ANSWER, answer)

    def _answer_text_or_oob(self, mechanism: Mechanism) -> ChallengeOutcome:
        outcome = self._advance(mechanism, AdvanceAction.START_OOB)
        self.prompter.show(mechanism.prompt_label)

        code = self.prompter.text("Enter the code, or press Enter once approved:").strip()
        if code:
            return self._advance(mechanism, AdvanceAction.ANSWER, code)
        return self._poll(mechanism, outcome)

    def _answer_oob(self, mechanism: Mechanism) -> ChallengeOutcome:
        self.prompter.show(mechanism.prompt_label)
        outcome = self._advance(mechanism, AdvanceAction.START_OOB)
        return self._poll(mechanism, outcome)

    def _poll(self, mechanism: Mechanism, outcome: ChallengeOutcome) -> ChallengeOutcome:
        """Poll while the provider reports OobPending; it decides when the wait is over."""
        deadline = self._clock() + self.oob_timeout if self.oob_timeout else None

        with err_console.status("Waiting for out-of-band approval..."):
            while outcome.is_pending:
                if deadline is not None and self._clock() >= deadline:
                    raise OobTimeoutError(f"No approval for '{mechanism.selection_label}' within {self.oob_timeout:g}s")
                self._sleep(self.poll_interval)
                outcome = self._advance(mechanism, AdvanceAction.POLL)

        return outcome
