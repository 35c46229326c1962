"""Common CLI options and decorators."""

from functools import wraps
from typing import Any, Callable, TypeVar, cast

import click

F = TypeVar("F", bound=Callable[..., Any])

# Usage options take raw strings: values are coerced like form input, so
# "abc" or "-5" become 0 instead of a usage error.
USAGE_OPTION_FIELDS = {
    "avg_tpm": "average_tokens_per_minute",
    "p99_tpm": "p99_tokens_per_minute",
    "max_tpm": "max_tokens_per_minute",
    "ptu": "recommended_ptu",
    "avg_ptu": "average_ptu",
    "p99_ptu": "p99_ptu",
    "max_ptu": "max_ptu",
    "base_ptus": "base_ptus",
    "minutes": "monthly_active_minutes",
    "input_ratio": "input_output_ratio",
}


def usage_options(func: F) -> F:
    """Add usage figure options to a command.

    The wrapped function receives a single ``usage`` keyword: a mapping of
    UsageInput field names to the raw strings that were given.
    """

    @click.option("--avg-tpm", type=str, help="Average tokens per minute.")
    @click.option("--p99-tpm", type=str, help="99th percentile tokens per minute.")
    @click.option("--max-tpm", type=str, help="Peak tokens per minute.")
    @click.option("--ptu", type=str, help="Recommended PTU count from the capacity calculator (overrides TPM sizing).")
    @click.option("--avg-ptu", type=str, help="Average PTU utilization.")
    @click.option("--p99-ptu", type=str, help="99th percentile PTU utilization.")
    @click.option("--max-ptu", type=str, help="Peak PTU utilization.")
    @click.option("--base-ptus", type=str, help="Base PTUs reserved in a hybrid plan.")
    @click.option("--minutes", type=str, help="Active minutes per month (default 43800).")
    @click.option("--input-ratio", type=str, help="Fraction of tokens that are input (default 0.5).")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        usage = {}
        for option, field_name in USAGE_OPTION_FIELDS.items():
            value = kwargs.pop(option, None)
            if value is not None:
                usage[field_name] = value
        kwargs["usage"] = usage
        return func(*args, **kwargs)

    return cast(F, wrapper)


def rate_options(func: F) -> F:
    """Add custom per-PTU rate options to a command."""

    @click.option("--hourly-rate", type=click.FloatRange(min=0), help="Custom on-demand price per PTU per hour.")
    @click.option("--monthly-rate", type=click.FloatRange(min=0), help="Custom monthly reservation price per PTU.")
    @click.option("--yearly-rate", type=click.FloatRange(min=0), help="Custom yearly reservation price per PTU.")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def output_option(func: F) -> F:
    """Add --output option to a command."""

    @click.option("--output", "-o", type=click.Path(), help="Write output to file instead of stdout.")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)
