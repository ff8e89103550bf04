# ABOUTME: Data model for authentication sessions, challenges, roles and credentials
# ABOUTME: Parses Centrify JSON payloads into typed dataclasses

"""
Data model for the Centrify authentication pipeline.

Provider payloads arrive as loosely structured JSON. Everything downstream of
the gateway works with the dataclasses defined here instead of raw dicts.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import ProtocolError


class SessionState(str, Enum):
    """Lifecycle of an authentication session."""

    STARTED = "Started"
    AWAITING_CHALLENGE = "AwaitingChallenge"
    AUTHENTICATED = "Authenticated"
    FAILED = "Failed"


class AnswerType(str, Enum):
    """How a mechanism expects to be answered."""

    TEXT = "Text"
    START_TEXT_OOB = "StartTextOob"
    OOB = "Oob"

    @classmethod
    def parse(cls, value: str | None) -> "AnswerType":
        """Map a provider AnswerType string, treating anything unknown as out-of-band."""
        for member in cls:
            if member.value == value:
                return member
        return cls.OOB


class AdvanceAction(str, Enum):
    ANSWER = "Answer"
    START_OOB = "StartOOB"
    POLL = "Poll"


# AdvanceAuthentication summary while an out-of-band mechanism awaits approval
SUMMARY_OOB_PENDING = "OobPending"


@dataclass(frozen=True)
class Mechanism:
    """One way of answering a challenge (password, OTP, push, ...)."""

    mechanism_id: str
    answer_type: AnswerType
    selection_label: str
    prompt_label: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Mechanism":
        if not isinstance(data, dict) or not data.get("MechanismId"):
            raise ProtocolError(f"Malformed mechanism in challenge: {data!r}")

        name = data.get("Name") or data["MechanismId"]
        selection_label = data.get("PromptSelectMech") or name
        return cls(
            mechanism_id=data["MechanismId"],
            answer_type=AnswerType.parse(data.get("AnswerType")),
            selection_label=selection_label,
            prompt_label=data.get("PromptMechChosen") or selection_label,
        )


@dataclass(frozen=True)
class Challenge:
    """An ordered set of mechanisms, exactly one of which the user answers."""

    mechanisms: tuple[Mechanism, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Challenge":
        raw = data.get("Mechanisms") if isinstance(data, dict) else None
        if not raw or not isinstance(raw, list):
            raise ProtocolError("Challenge offered no authentication mechanisms")
        return cls(mechanisms=tuple(Mechanism.from_dict(item) for item in raw))


def parse_challenges(raw: Any) -> tuple[Challenge, ...]:
    """Parse a provider ``Challenges`` array."""
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ProtocolError(f"Expected a list of challenges, got {type(raw).__name__}")
    return tuple(Challenge.from_dict(item) for item in raw)


@dataclass
class AuthSession:
    """Authentication session held for the lifetime of one run."""

    endpoint: str
    tenant_id: str
    session_id: str
    state: SessionState = SessionState.STARTED
    pending: list[Challenge] = field(default_factory=list)


@dataclass(frozen=True)
class ChallengeOutcome:
    """Result of advancing or polling a mechanism."""

    summary: str
    challenges: tuple[Challenge, ...] | None = None
    bearer_token: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.summary == SUMMARY_OOB_PENDING

    @classmethod
    def from_result(cls, result: dict[str, Any]) -> "ChallengeOutcome":
        if not isinstance(result, dict) or not result.get("Summary"):
            raise ProtocolError("AdvanceAuthentication returned no Summary")

        challenges = None
        if result.get("Challenges") is not None:
            challenges = parse_challenges(result["Challenges"])

        return cls(
            summary=result["Summary"],
            challenges=challenges,
            bearer_token=result.get("Auth") or None,
        )


@dataclass(frozen=True)
class RoleBinding:
    """An assumable role paired with the SAML provider that vouches for it."""

    role_arn: str
    provider_arn: str

    @property
    def account_id(self) -> str:
        parts = self.role_arn.split(":")
        return parts[4] if len(parts) > 4 else ""

    @property
    def role_name(self) -> str:
        return self.role_arn.split("/", 1)[-1]

    @property
    def label(self) -> str:
        return f"{self.account_id} {self.role_name}".strip()


@dataclass(frozen=True)
class FederationAssertion:
    """Base64 SAML payload as received, plus its decoded XML text."""

    raw: str
    document: str


@dataclass(frozen=True)
class CredentialSet:
    """Temporary AWS credentials issued by STS."""

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: str
