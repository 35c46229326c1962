"""Quote command for the PTU calculator CLI."""

from typing import Any, Dict, Optional, TextIO

import click

from ...calculator import PAYGO_BASELINE_BLENDED, PAYGO_BASELINE_SPLIT, RecommendationPolicy
from ...config_paths import DEFAULT_FALLBACK_MODEL
from ...deployment import DeploymentType
from ...errors import HistoryError, InvalidDeploymentTypeError
from ...history import HistoryStore
from ...quote import PtuCalculator
from ..formatters import create_console, format_json, format_quote_json, format_quote_table
from ..utils import (
    ExitCode,
    handle_error,
    load_default_tables,
    output_option,
    rate_options,
    usage_options,
)


@click.command()
@click.option("--model", "-m", default=DEFAULT_FALLBACK_MODEL, show_default=True, help="Model identifier.")
@click.option(
    "--deployment",
    "-d",
    type=click.Choice([d.value for d in DeploymentType], case_sensitive=False),
    default=DeploymentType.GLOBAL.value,
    show_default=True,
    help="Deployment type.",
)
@usage_options
@rate_options
@click.option(
    "--baseline",
    type=click.Choice([PAYGO_BASELINE_BLENDED, PAYGO_BASELINE_SPLIT], case_sensitive=False),
    default=PAYGO_BASELINE_BLENDED,
    show_default=True,
    help="PAYGO baseline: 'blended' assumes a 50/50 input/output split, 'split' uses --input-ratio.",
)
@click.option("--enforce-increment", is_flag=True, help="Round the PTU count up to a purchasable increment.")
@click.option("--save", is_flag=True, help="Save the calculation to history.")
@output_option
@click.pass_context
def quote(
    ctx: click.Context,
    model: str,
    deployment: str,
    usage: Dict[str, Any],
    hourly_rate: Optional[float] = None,
    monthly_rate: Optional[float] = None,
    yearly_rate: Optional[float] = None,
    baseline: str = PAYGO_BASELINE_BLENDED,
    enforce_increment: bool = False,
    save: bool = False,
    output: Optional[str] = None,
) -> None:
    """Compare PAYGO and PTU costs for a workload.

    Sizes a PTU deployment from average TPM (or an explicit --ptu), applies
    the deployment's minimum PTU and recommends PAYGO, a hybrid plan or a
    full PTU reservation. Numeric inputs are read like form fields: invalid
    or negative values count as 0.

    Examples:
      # Size gpt-4o on a global deployment from average throughput
      ptu quote --model gpt-4o --avg-tpm 100000

      # Use the capacity calculator's PTU figure and custom reservation prices
      ptu quote -m gpt-4o-mini --ptu 25 --monthly-rate 730 --yearly-rate 6132
    """
    tables = load_default_tables()

    try:
        policy = RecommendationPolicy(paygo_baseline=baseline.lower(), enforce_increment=enforce_increment)
        rates = tables.get_ptu_rates(deployment)
        if any(value is not None for value in (hourly_rate, monthly_rate, yearly_rate)):
            rates = rates.with_overrides(hourly=hourly_rate, monthly=monthly_rate, yearly=yearly_rate)
        result = PtuCalculator(tables, policy).quote(model, deployment, usage, rates)
    except InvalidDeploymentTypeError as e:
        handle_error(e, ExitCode.INVALID_USAGE)
        return
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
        return

    output_file: Optional[TextIO] = None
    if output:
        output_file = open(output, "w", encoding="utf-8")

    try:
        if ctx.obj["format"] == "json":
            format_json(format_quote_json(result), output_file)
        else:
            console = create_console(output=output_file, no_color=ctx.obj["no_color"])
            format_quote_table(result, console)
    finally:
        if output_file:
            output_file.close()

    if save:
        try:
            HistoryStore().record(model, result.deployment_type, result.usage, result.result)
        except HistoryError as e:
            handle_error(e, ExitCode.GENERIC_ERROR)
            return
        if ctx.obj["format"] != "json":
            click.echo("Saved to history.", err=True)
