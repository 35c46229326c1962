"""Configuration path handling for the PTU calculator.

Table files resolve in this order: environment variable, user config
directory (XDG via platformdirs), bundled package copy. History lives in the
user data directory.
"""

import os
from pathlib import Path

import platformdirs

# Application name used for directory paths
APP_NAME = "azure-ptu-calculator"

# Environment variable names
ENV_PRICING_PATH = "APC_PRICING_PATH"
ENV_PTU_RULES_PATH = "APC_PTU_RULES_PATH"
ENV_PTU_REFERENCE_PATH = "APC_PTU_REFERENCE_PATH"
ENV_FALLBACK_MODEL = "APC_FALLBACK_MODEL"
ENV_DATA_DIR = "APC_DATA_DIR"

# Default filenames
PRICING_FILENAME = "pricing.yaml"
PTU_RULES_FILENAME = "ptu_rules.yaml"
PTU_REFERENCE_FILENAME = "ptu_reference.yaml"
HISTORY_FILENAME = "history.json"

DEFAULT_FALLBACK_MODEL = "gpt-4o-mini"


def get_package_config_dir() -> Path:
    """Get the path to the package's bundled config directory."""
    return Path(__file__).parent / "config"


def get_user_config_dir() -> Path:
    """Get the path to the user's config directory for this application."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_user_data_dir() -> Path:
    """Get the user data directory, respecting the APC_DATA_DIR override."""
    custom_dir = os.environ.get(ENV_DATA_DIR)
    if custom_dir:
        return Path(custom_dir)
    return Path(platformdirs.user_data_dir(APP_NAME))


def _resolve(env_var: str, filename: str) -> str:
    # 1. Check environment variable
    env_path = os.environ.get(env_var)
    if env_path and Path(env_path).is_file():
        return env_path

    # 2. Check user config directory
    user_path = get_user_config_dir() / filename
    if user_path.is_file():
        return str(user_path)

    # 3. Fall back to package directory
    return str(get_package_config_dir() / filename)


def get_pricing_path() -> str:
    """Get the path to the PAYGO pricing table."""
    return _resolve(ENV_PRICING_PATH, PRICING_FILENAME)


def get_ptu_rules_path() -> str:
    """Get the path to the PTU rule and rate table."""
    return _resolve(ENV_PTU_RULES_PATH, PTU_RULES_FILENAME)


def get_ptu_reference_path() -> str:
    """Get the path to the authoritative PTU reference used by validation."""
    return _resolve(ENV_PTU_REFERENCE_PATH, PTU_REFERENCE_FILENAME)


def get_history_path() -> Path:
    """Get the path to the calculation history file."""
    return get_user_data_dir() / HISTORY_FILENAME


def get_fallback_model() -> str:
    """Get the fallback model used for unknown identifiers."""
    return os.environ.get(ENV_FALLBACK_MODEL) or DEFAULT_FALLBACK_MODEL


def describe_path_source(path: str, env_var: str) -> str:
    """Describe where a resolved path came from.

    Args:
        path: Resolved path
        env_var: Environment variable that may have supplied it

    Returns:
        One of ``"Environment variable (...)"``, ``"User config"``, ``"Bundled"``
    """
    if os.environ.get(env_var) == path:
        return f"Environment variable ({env_var})"
    if Path(path).parent == get_user_config_dir():
        return "User config"
    return "Bundled"
