"""CLI utilities package."""

from .helpers import (
    ExitCode,
    get_apc_env_vars,
    handle_error,
    load_default_tables,
    resolve_format,
    resolve_log_level,
    validate_format_support,
)
from .options import output_option, rate_options, usage_options

__all__ = [
    "ExitCode",
    "resolve_format",
    "resolve_log_level",
    "handle_error",
    "load_default_tables",
    "get_apc_env_vars",
    "validate_format_support",
    "usage_options",
    "rate_options",
    "output_option",
]
