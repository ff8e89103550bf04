# ABOUTME: centrify-aws package
# ABOUTME: Exchanges Centrify multi-factor authentication for temporary AWS credentials

"""Centrify SAML login for AWS."""

__version__ = "1.0.0"
