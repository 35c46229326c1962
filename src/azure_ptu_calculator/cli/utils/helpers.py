"""Helper functions for CLI operations."""

import os
import sys
from typing import Any, Dict, List, Optional

import click

from ...config_paths import (
    ENV_DATA_DIR,
    ENV_FALLBACK_MODEL,
    ENV_PRICING_PATH,
    ENV_PTU_REFERENCE_PATH,
    ENV_PTU_RULES_PATH,
)
from ...errors import ConfigurationError
from ...tables import PricingTables


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    MODEL_NOT_FOUND = 3
    DATA_SOURCE_ERROR = 4
    VALIDATION_FAILED = 5  # CI-friendly code for 'ptu validate'


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    if sys.stdout.isatty():
        return default_tty
    return default_non_tty


def resolve_log_level(verbose: int = 0, quiet: int = 0, debug: bool = False) -> str:
    """Map the verbosity flags to a logging level name."""
    if debug:
        return "DEBUG"
    if verbose > quiet:
        return "DEBUG" if verbose >= 2 else "INFO"
    if quiet > verbose:
        return "ERROR" if quiet >= 2 else "WARNING"
    return "WARNING"


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def get_apc_env_vars() -> Dict[str, Optional[str]]:
    """Get all APC_* environment variables.

    Returns:
        Dictionary of APC environment variables and their values
    """
    apc_vars: Dict[str, Optional[str]] = {key: value for key, value in os.environ.items() if key.startswith("APC_")}

    # Include the recognised variables even if not set
    common_vars: List[str] = [
        ENV_PRICING_PATH,
        ENV_PTU_RULES_PATH,
        ENV_PTU_REFERENCE_PATH,
        ENV_FALLBACK_MODEL,
        ENV_DATA_DIR,
    ]
    for var in common_vars:
        apc_vars.setdefault(var, None)

    return apc_vars


def validate_format_support(
    format_type: str,
    supported_formats: List[str],
    command_name: str,
    ctx_obj: Dict[str, Any],
) -> str:
    """Validate format support for a command, falling back from table to json.

    Args:
        format_type: The requested format
        supported_formats: List of supported formats for this command
        command_name: Name of the command for messages
        ctx_obj: Click context object containing verbosity settings

    Returns:
        The validated format (may be changed from input for fallback)

    Raises:
        click.BadParameter: For unsupported formats that can't fall back
    """
    if format_type in supported_formats:
        return format_type

    if format_type == "table":
        fallback_format = "json" if "json" in supported_formats else supported_formats[0]
        if ctx_obj.get("verbose", 0) > 0:
            click.echo(
                f"Note: {command_name} doesn't support '{format_type}' format, using {fallback_format} instead.",
                err=True,
            )
        return fallback_format

    supported_list = "', '".join(supported_formats)
    raise click.BadParameter(f"Format '{format_type}' is not supported for {command_name}. Use '{supported_list}'.")


def load_default_tables() -> PricingTables:
    """Load the default pricing tables, exiting with DATA_SOURCE_ERROR on failure."""
    try:
        return PricingTables.get_default()
    except ConfigurationError as e:
        handle_error(e, ExitCode.DATA_SOURCE_ERROR)
        raise
