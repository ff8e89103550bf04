"""Pytest configuration and shared fixtures."""

import os

import pytest
from support import ScriptedPrompter


# Set AWS region for all tests to avoid NoRegionError
@pytest.fixture(autouse=True, scope="session")
def set_aws_region():
    """Set AWS region for all tests."""
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["AWS_REGION"] = "us-east-1"


@pytest.fixture(autouse=True)
def reset_debug():
    """Keep --debug from leaking between tests."""
    from centrify_aws.console import set_debug

    yield
    set_debug(False)


@pytest.fixture
def prompter():
    return ScriptedPrompter()
