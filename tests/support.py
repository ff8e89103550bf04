"""Test doubles and SAML fixtures shared by the test suite."""

import base64

from centrify_aws.exceptions import ProtocolError

TENANT_URL = "https://acme.my.centrify.net"


class ScriptedPrompter:
    """Prompter double that replays canned answers and records what was shown."""

    def __init__(self, texts=None, secrets=None):
        self.texts = list(texts or [])
        self.secrets = list(secrets or [])
        self.shown = []
        self.text_prompts = []
        self.secret_prompts = []

    def show(self, message):
        self.shown.append(message)

    def text(self, message):
        self.text_prompts.append(message)
        if not self.texts:
            raise AssertionError(f"Unexpected text prompt: {message}")
        return self.texts.pop(0)

    def secret(self, message):
        self.secret_prompts.append(message)
        if not self.secrets:
            raise AssertionError(f"Unexpected secret prompt: {message}")
        return self.secrets.pop(0)


class ScriptedGateway:
    """Gateway double that replays provider results; exceptions in a script are raised."""

    def __init__(self, endpoint=TENANT_URL, start=None, advance=None, page=""):
        self.endpoint = endpoint
        self.start_results = list(start or [])
        self.advance_results = list(advance or [])
        self.page = page
        self.calls = []

    @property
    def hostname(self):
        return self.endpoint.split("://", 1)[-1].split("/", 1)[0].lower()

    def with_endpoint(self, endpoint):
        self.endpoint = endpoint.rstrip("/")
        return self

    def start_authentication(self, user):
        self.calls.append(("start", self.endpoint, user))
        return self._next(self.start_results)

    def advance_authentication(self, tenant_id, session_id, mechanism_id, action, answer=None):
        self.calls.append(("advance", mechanism_id, action, answer))
        return self._next(self.advance_results)

    def handle_app_click(self, bearer_token, app_key):
        self.calls.append(("app_click", bearer_token, app_key))
        return self.page

    @property
    def actions(self):
        return [call[2] for call in self.calls if call[0] == "advance"]

    @staticmethod
    def _next(script):
        if not script:
            raise AssertionError("Gateway script exhausted")
        item = script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def mechanism(mechanism_id, answer_type="Text", label=None, prompt=None):
    return {
        "MechanismId": mechanism_id,
        "AnswerType": answer_type,
        "Name": mechanism_id.upper(),
        "PromptSelectMech": label or mechanism_id,
        "PromptMechChosen": prompt or f"Enter {mechanism_id}",
    }


def start_result(*challenges, pod=None):
    return {
        "TenantId": "ABC1234",
        "SessionId": "session-1",
        "PodFqdn": pod,
        "Challenges": [{"Mechanisms": list(mechs)} for mechs in challenges],
    }


def pending():
    return {"Summary": "OobPending"}


def provider_failure(message="Authentication (login or challenge) has failed."):
    return ProtocolError(f"/Security/AdvanceAuthentication failed: {message}")


ROLE_ATTRIBUTE = "https://aws.amazon.com/SAML/Attributes/Role"


def saml_document(role_values, extra_attributes=None, session_duration=None):
    """Build a minimal SAML response with the given Role attribute values."""
    attributes = [
        '<saml2:Attribute Name="https://aws.amazon.com/SAML/Attributes/RoleSessionName">'
        "<saml2:AttributeValue>jane@acme.com</saml2:AttributeValue></saml2:Attribute>"
    ]
    role_xml = "".join(f"<saml2:AttributeValue>{value}</saml2:AttributeValue>" for value in role_values)
    attributes.append(f'<saml2:Attribute Name="{ROLE_ATTRIBUTE}">{role_xml}</saml2:Attribute>')
    if session_duration is not None:
        attributes.append(
            '<saml2:Attribute Name="https://aws.amazon.com/SAML/Attributes/SessionDuration">'
            f"<saml2:AttributeValue>{session_duration}</saml2:AttributeValue></saml2:Attribute>"
        )
    for name, value in (extra_attributes or {}).items():
        attributes.append(
            f'<saml2:Attribute Name="{name}"><saml2:AttributeValue>{value}</saml2:AttributeValue></saml2:Attribute>'
        )

    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<saml2p:Response xmlns:saml2p="urn:oasis:names:tc:SAML:2.0:protocol" '
        'xmlns:saml2="urn:oasis:names:tc:SAML:2.0:assertion">'
        "<saml2:Assertion><saml2:AttributeStatement>"
        + "".join(attributes)
        + "</saml2:AttributeStatement></saml2:Assertion></saml2p:Response>"
    )


def encode(document):
    return base64.b64encode(document.encode("utf-8")).decode("ascii")


def launch_page(saml_value):
    """HTML the provider returns from handleAppClick."""
    return (
        "<html><body onload=\"document.forms[0].submit()\">"
        '<form method="post" action="https://signin.aws.amazon.com/saml">'
        f'<input type="hidden" name="SAMLResponse" value="{saml_value}" />'
        '<input type="hidden" name="RelayState" value="" />'
        "</form></body></html>"
    )


def role_pair(account, role, provider="Centrify"):
    return f"arn:aws:iam::{account}:role/{role},arn:aws:iam::{account}:saml-provider/{provider}"
