# ABOUTME: Error taxonomy for the Centrify to AWS credential pipeline
# ABOUTME: Each error class carries the process exit status the CLI reports

"""Errors raised while exchanging Centrify MFA for AWS credentials."""


class CentrifyAwsError(Exception):
    """Base class for every failure the pipeline reports to the operator."""

    exit_code = 1

    def __init__(self, message: str, phase: str | None = None):
        super().__init__(message)
        self.message = message
        self.phase = phase

    def __str__(self) -> str:
        if self.phase:
            return f"Error during {self.phase}: {self.message}"
        return self.message


class ConfigError(CentrifyAwsError):
    """Host, application key or user identity missing or invalid."""

    exit_code = 2


class DependencyError(CentrifyAwsError):
    """A library the pipeline needs cannot be imported."""

    exit_code = 3


class ProtocolError(CentrifyAwsError):
    """The identity provider reported failure or answered with an unexpected shape."""

    exit_code = 4


class OobTimeoutError(ProtocolError):
    """The local out-of-band deadline elapsed while the provider still reported OobPending."""


class AssertionNotFoundError(CentrifyAwsError):
    exit_code = 5


class DecodeError(CentrifyAwsError):
    exit_code = 6


class NoRolesFoundError(CentrifyAwsError):
    exit_code = 7


class ExchangeError(CentrifyAwsError):
    """AssumeRoleWithSAML failed."""

    exit_code = 8


class IncompleteCredentialError(CentrifyAwsError):
    """AssumeRoleWithSAML answered without one of the four credential fields."""

    exit_code = 9
