# ABOUTME: Tests for the STS AssumeRoleWithSAML exchange
# ABOUTME: Ensures partial credential sets are rejected and STS errors are wrapped

"""Tests for CredentialExchanger."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore import UNSIGNED
from botocore.exceptions import ClientError, EndpointConnectionError

from centrify_aws.exceptions import ExchangeError, IncompleteCredentialError
from centrify_aws.exchange import CredentialExchanger, credentials_from_response

ROLE_ARN = "arn:aws:iam::111111111111:role/Admin"
PROVIDER_ARN = "arn:aws:iam::111111111111:saml-provider/Centrify"
EXPIRATION = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def sts_response(**overrides):
    credentials = {
        "AccessKeyId": "ASIAEXAMPLE",
        "SecretAccessKey": "secret/key+value",
        "SessionToken": "FwoGZXIvYXdzEXAMPLE",
        "Expiration": EXPIRATION,
    }
    credentials.update(overrides)
    return {"Credentials": {k: v for k, v in credentials.items() if v is not None}}


class TestCredentialExchanger:
    """Tests for the AssumeRoleWithSAML call."""

    def test_successful_exchange(self):
        sts = MagicMock()
        sts.assume_role_with_saml.return_value = sts_response()

        credentials = CredentialExchanger(sts_client=sts).exchange(ROLE_ARN, PROVIDER_ARN, "QUJD")

        sts.assume_role_with_saml.assert_called_once_with(
            RoleArn=ROLE_ARN, PrincipalArn=PROVIDER_ARN, SAMLAssertion="QUJD"
        )
        assert credentials.access_key_id == "ASIAEXAMPLE"
        assert credentials.secret_access_key == "secret/key+value"
        assert credentials.session_token == "FwoGZXIvYXdzEXAMPLE"
        assert credentials.expiration == "2026-10-18T12:00:00+00:00"

    def test_duration_passed_when_requested(self):
        sts = MagicMock()
        sts.assume_role_with_saml.return_value = sts_response()

        CredentialExchanger(sts_client=sts).exchange(ROLE_ARN, PROVIDER_ARN, "QUJD", duration_seconds=3600)

        assert sts.assume_role_with_saml.call_args.kwargs["DurationSeconds"] == 3600

    def test_missing_session_token_is_incomplete(self):
        sts = MagicMock()
        sts.assume_role_with_saml.return_value = sts_response(SessionToken=None)

        with pytest.raises(IncompleteCredentialError, match="SessionToken"):
            CredentialExchanger(sts_client=sts).exchange(ROLE_ARN, PROVIDER_ARN, "QUJD")

    def test_client_error_wrapped(self):
        sts = MagicMock()
        sts.assume_role_with_saml.side_effect = ClientError(
            {"Error": {"Code": "ExpiredTokenException", "Message": "Token must be redeemed within 5 minutes"}},
            "AssumeRoleWithSAML",
        )

        with pytest.raises(ExchangeError, match="ExpiredTokenException"):
            CredentialExchanger(sts_client=sts).exchange(ROLE_ARN, PROVIDER_ARN, "QUJD")

    def test_connection_error_wrapped(self):
        sts = MagicMock()
        sts.assume_role_with_saml.side_effect = EndpointConnectionError(endpoint_url="https://sts.amazonaws.com")

        with pytest.raises(ExchangeError):
            CredentialExchanger(sts_client=sts).exchange(ROLE_ARN, PROVIDER_ARN, "QUJD")

    @patch("centrify_aws.exchange.boto3.client")
    def test_default_client_is_unsigned_and_regional(self, mock_client):
        mock_client.return_value.assume_role_with_saml.return_value = sts_response()

        CredentialExchanger(region="eu-west-1").exchange(ROLE_ARN, PROVIDER_ARN, "QUJD")

        args, kwargs = mock_client.call_args
        assert args == ("sts",)
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["config"].signature_version is UNSIGNED


class TestCredentialsFromResponse:
    """Tests for completeness checking of STS responses."""

    @pytest.mark.parametrize("field", ["AccessKeyId", "SecretAccessKey", "SessionToken", "Expiration"])
    def test_each_field_required(self, field):
        response = sts_response()
        response["Credentials"][field] = ""

        with pytest.raises(IncompleteCredentialError, match=field):
            credentials_from_response(response)

    def test_no_credentials_block(self):
        with pytest.raises(IncompleteCredentialError):
            credentials_from_response({"AssumedRoleUser": {}})

    def test_string_expiration_kept(self):
        credentials = credentials_from_response(sts_response(Expiration="2026-10-18T12:00:00Z"))

        assert credentials.expiration == "2026-10-18T12:00:00Z"
