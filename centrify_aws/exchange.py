# ABOUTME: Exchanges a SAML assertion for temporary AWS credentials
# ABOUTME: Calls STS AssumeRoleWithSAML and insists on a complete credential set

"""SAML to STS credential exchange."""

import boto3
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .console import debug_print
from .exceptions import ExchangeError, IncompleteCredentialError
from .models import CredentialSet

CREDENTIAL_FIELDS = ("AccessKeyId", "SecretAccessKey", "SessionToken", "Expiration")


class CredentialExchanger:
    """Turns an assertion plus a chosen role into temporary credentials."""

    def __init__(self, region: str = "us-east-1", sts_client=None):
        self.region = region
        self._sts_client = sts_client

    @property
    def sts_client(self):
        # AssumeRoleWithSAML is authenticated by the assertion, so requests go unsigned
        if self._sts_client is None:
            self._sts_client = boto3.client("sts", region_name=self.region, config=Config(signature_version=UNSIGNED))
        return self._sts_client

    def exchange(
        self,
        role_arn: str,
        provider_arn: str,
        raw_assertion: str,
        duration_seconds: int | None = None,
    ) -> CredentialSet:
        """Call AssumeRoleWithSAML.

        Args:
            role_arn: Role to assume.
            provider_arn: SAML provider the role trusts.
            raw_assertion: Base64 assertion exactly as the provider issued it.
            duration_seconds: Requested session length; STS default when None.

        Returns:
            CredentialSet with all four fields populated.

        Raises:
            ExchangeError: If STS rejects the call or cannot be reached.
            IncompleteCredentialError: If STS answers without one of the fields.
        """
        params = {
            "RoleArn": role_arn,
            "PrincipalArn": provider_arn,
            "SAMLAssertion": raw_assertion,
        }
        if duration_seconds:
            params["DurationSeconds"] = duration_seconds

        debug_print(f"Assuming role: {role_arn}")
        debug_print(f"Principal: {provider_arn}")

        try:
            response = self.sts_client.assume_role_with_saml(**params)
        except ClientError as e:
            error = e.response.get("Error", {})
            raise ExchangeError(
                f"AssumeRoleWithSAML failed: {error.get('Code', 'Unknown')}: {error.get('Message', str(e))}"
            ) from e
        except BotoCoreError as e:
            raise ExchangeError(f"AssumeRoleWithSAML failed: {e}") from e

        return credentials_from_response(response)


def credentials_from_response(response: dict) -> CredentialSet:
    """Build a CredentialSet from an AssumeRoleWithSAML response, or fail loudly."""
    creds = (response or {}).get("Credentials") or {}

    missing = [name for name in CREDENTIAL_FIELDS if not creds.get(name)]
    if missing:
        raise IncompleteCredentialError(
            f"STS response is missing {', '.join(missing)}; the assertion may have expired, please log in again"
        )

    expiration = creds["Expiration"]
    credentials = CredentialSet(
        access_key_id=str(creds["AccessKeyId"]),
        secret_access_key=str(creds["SecretAccessKey"]),
        session_token=str(creds["SessionToken"]),
        expiration=expiration.isoformat() if hasattr(expiration, "isoformat") else str(expiration),
    )
    debug_print(f"Successfully obtained credentials, expires: {credentials.expiration}")
    return credentials
