# ABOUTME: SAML assertion retrieval and role extraction
# ABOUTME: Pulls SAMLResponse out of the app launch page and lists the roles it grants

"""Federation assertion retrieval and role catalog."""

import base64
import binascii
import html as html_module
import re

from .console import debug_print
from .exceptions import AssertionNotFoundError, DecodeError, NoRolesFoundError
from .gateway import HttpGateway
from .models import FederationAssertion, RoleBinding
from .prompts import Prompter, select_option

ASSERTION_FIELD = "SAMLResponse"
SESSION_DURATION_ATTRIBUTE = "https://aws.amazon.com/SAML/Attributes/SessionDuration"

# The launch page is not guaranteed to be well-formed HTML, so the field is
# located by name and its value read from the same tag.
_INPUT_TAG_RE = re.compile(r"<input\b[^>]*>", re.IGNORECASE | re.DOTALL)
_FIELD_NAME_RE = re.compile(r"""\bname\s*=\s*["']?%s["'\s/>]""" % ASSERTION_FIELD, re.IGNORECASE)
_VALUE_RE = re.compile(r"""\bvalue\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+))""", re.IGNORECASE | re.DOTALL)

_ATTRIBUTE_VALUE_RE = re.compile(
    r"<(?:[\w.-]+:)?AttributeValue\b[^>]*>(.*?)</(?:[\w.-]+:)?AttributeValue\s*>",
    re.DOTALL,
)
_ROLE_ARN_RE = re.compile(r"^arn:aws[\w-]*:iam::\d{12}:role/[\w+=,.@/-]+$")
_PROVIDER_ARN_RE = re.compile(r"^arn:aws[\w-]*:iam::\d{12}:saml-provider/[\w+=,.@/-]+$")
_SESSION_DURATION_RE = re.compile(
    r"""<(?:[\w.-]+:)?Attribute\b[^>]*\bName\s*=\s*["']%s["'][^>]*>\s*"""
    r"""<(?:[\w.-]+:)?AttributeValue\b[^>]*>\s*(\d+)\s*<""" % re.escape(SESSION_DURATION_ATTRIBUTE),
    re.DOTALL,
)


class AssertionFetcher:
    """Launches the AWS application with a bearer token and decodes the SAML assertion."""

    def __init__(self, gateway: HttpGateway):
        self.gateway = gateway

    def fetch(self, bearer_token: str, app_key: str) -> FederationAssertion:
        page = self.gateway.handle_app_click(bearer_token, app_key)
        return decode_assertion(extract_assertion_field(page))


def extract_assertion_field(page: str) -> str:
    """Return the raw base64 value of the SAMLResponse form field.

    Raises:
        AssertionNotFoundError: If the page has no such field.
    """
    for match in _INPUT_TAG_RE.finditer(page or ""):
        tag = match.group(0)
        if not _FIELD_NAME_RE.search(tag):
            continue
        value = _VALUE_RE.search(tag)
        if value:
            return html_module.unescape(next(g for g in value.groups() if g is not None))

    raise AssertionNotFoundError(
        f"No {ASSERTION_FIELD} field in the application response. "
        "Check that the app key refers to the AWS SAML application."
    )


def decode_assertion(raw: str) -> FederationAssertion:
    """Base64-decode the assertion into its XML text.

    Raises:
        DecodeError: If the value is not base64 or decodes to nothing.
    """
    raw = "".join((raw or "").split())
    try:
        decoded = base64.b64decode(raw, validate=True)
        document = decoded.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DecodeError(f"Could not decode {ASSERTION_FIELD}: {e}") from e

    if not document.strip():
        raise DecodeError(f"{ASSERTION_FIELD} decoded to an empty document")

    debug_print(f"Decoded assertion ({len(decoded)} bytes)")
    return FederationAssertion(raw=raw, document=document)


def extract_roles(document: str) -> tuple[RoleBinding, ...]:
    """List the role/provider pairs granted by the assertion, in document order.

    Each Role attribute value is a comma-separated pair of a role ARN and a
    saml-provider ARN, in either order. Values that are not such a pair are
    ignored.

    Raises:
        NoRolesFoundError: If the assertion grants no roles.
    """
    bindings = []
    for match in _ATTRIBUTE_VALUE_RE.finditer(document or ""):
        binding = _parse_role_value(html_module.unescape(match.group(1)))
        if binding:
            bindings.append(binding)

    if not bindings:
        raise NoRolesFoundError("The SAML assertion does not grant any AWS roles")
    return tuple(bindings)


def _parse_role_value(text: str) -> RoleBinding | None:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        return None

    role_arn = next((p for p in parts if _ROLE_ARN_RE.match(p)), None)
    provider_arn = next((p for p in parts if _PROVIDER_ARN_RE.match(p)), None)
    if not role_arn or not provider_arn:
        return None
    return RoleBinding(role_arn=role_arn, provider_arn=provider_arn)


def session_duration(document: str) -> int | None:
    """Return the SessionDuration attribute in seconds, if the assertion sets one."""
    match = _SESSION_DURATION_RE.search(document or "")
    return int(match.group(1)) if match else None


class RoleCatalog:
    """Roles granted by one assertion, parsed once and never modified."""

    def __init__(self, bindings: tuple[RoleBinding, ...], session_duration: int | None = None):
        self.bindings = bindings
        self.session_duration = session_duration

    @classmethod
    def from_assertion(cls, assertion: FederationAssertion) -> "RoleCatalog":
        return cls(extract_roles(assertion.document), session_duration(assertion.document))

    def __len__(self) -> int:
        return len(self.bindings)

    def select(self, prompter: Prompter, preferred: str | None = None) -> RoleBinding:
        return select_role(prompter, self.bindings, preferred)


def select_role(prompter: Prompter, bindings: tuple[RoleBinding, ...], preferred: str | None = None) -> RoleBinding:
    """Pick the role to assume.

    A ``preferred`` role ARN is used without prompting; otherwise the same
    numbered selection as mechanism choice applies.
    """
    if not bindings:
        raise NoRolesFoundError("The SAML assertion does not grant any AWS roles")

    if preferred:
        for binding in bindings:
            if binding.role_arn == preferred:
                return binding
        raise NoRolesFoundError(f"Role {preferred} is not granted by the SAML assertion")

    labels = [f"{b.label}  ({b.role_arn})" for b in bindings]
    return bindings[select_option(prompter, "Choose a role to assume:", labels)]
