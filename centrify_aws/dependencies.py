# ABOUTME: Preflight check for the libraries the credential pipeline relies on
# ABOUTME: Reports every missing capability at once instead of failing mid-run

"""Dependency presence checks."""

import importlib.util

from .exceptions import DependencyError

# module name -> capability it provides
REQUIRED_MODULES = {
    "requests": "HTTP client",
    "boto3": "AWS STS client",
    "botocore": "AWS STS client",
    "questionary": "terminal prompts",
}


def missing_dependencies(modules: dict[str, str] | None = None) -> list[str]:
    """Return descriptions of the required modules that cannot be imported."""
    modules = REQUIRED_MODULES if modules is None else modules
    return [f"{name} ({purpose})" for name, purpose in modules.items() if importlib.util.find_spec(name) is None]


def check_dependencies(modules: dict[str, str] | None = None) -> None:
    missing = missing_dependencies(modules)
    if missing:
        raise DependencyError(f"Missing required packages: {', '.join(missing)}")
