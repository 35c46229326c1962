"""Rich table formatter for CLI output."""

import sys
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...calculator import Recommendation
from ...deployment import DeploymentType
from ...history import HistoryEntry
from ...quote import Quote
from ...validation import ValidationReport

_RECOMMENDATION_STYLES = {
    Recommendation.FULL_PTU_RESERVATION: "bold green",
    Recommendation.HYBRID: "bold yellow",
    Recommendation.PAYGO: "bold cyan",
}


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    return Console(file=output, no_color=no_color)


def _format_currency(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"${value:,.2f}"


def _format_number(value: Optional[float]) -> str:
    """Format a count, dropping the decimals of whole numbers."""
    if value is None:
        return "N/A"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def _format_rule(rule: Optional[Dict[str, Any]]) -> str:
    if not rule:
        return "-"
    return f"{rule['min_ptu']} / +{rule['increment']}"


def format_quote_table(quote: Quote, console: Optional[Console] = None) -> None:
    """Format a quote as Rich tables.

    Args:
        quote: Quote to display
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    result = quote.result
    if not result.has_valid_data:
        console.print(
            "[yellow]No usage data.[/yellow] Provide --avg-tpm, --p99-tpm or --ptu to size a deployment."
        )
        return

    title = f"PTU Quote: {quote.model} ({quote.deployment_type.value})"
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    minimum_note = " (minimum applied)" if result.is_using_minimum else ""
    increment_note = " (rounded to increment)" if result.is_increment_rounded else ""
    table.add_row("Calculated PTU", _format_number(result.calculated_ptu))
    table.add_row("Actual PTU", f"{_format_number(result.actual_ptu)}{minimum_note}{increment_note}")
    table.add_row("Minimum / increment", f"{result.minimum_ptu} / +{result.increment_ptu}")
    table.add_row("Monthly tokens (M)", _format_number(result.monthly_tokens_millions))
    table.add_row("Monthly PTU cost", _format_currency(result.monthly_ptu_cost))
    table.add_row("Yearly PTU cost", _format_currency(result.yearly_ptu_cost))
    table.add_row("Monthly PAYGO cost", _format_currency(result.monthly_paygo_cost))
    console.print(table)

    if quote.pricing.is_fallback:
        console.print(f"[yellow]Note:[/yellow] no pricing for '{quote.model}', using {quote.pricing.model} rates.")

    recommendation = result.recommendation
    if recommendation is not None:
        style = _RECOMMENDATION_STYLES[recommendation]
        console.print(Text(f"Recommendation: {recommendation.label}", style=style))
        console.print(recommendation.reason)

    analysis = quote.analysis
    if analysis is None:
        return

    plans = Table(title="Monthly Cost by Plan", show_header=True, header_style="bold magenta")
    plans.add_column("Plan", style="cyan")
    plans.add_column("Monthly cost", justify="right")
    cheapest = analysis.cheapest_plan().name
    for plan in analysis.plan_costs:
        cost = _format_currency(plan.monthly_cost)
        plans.add_row(plan.name, Text(cost, style="green") if plan.name == cheapest else cost)
    console.print(plans)

    profile = analysis.profile
    console.print(
        f"Usage pattern: [bold]{profile.usage_pattern}[/bold] "
        f"(burst {profile.burst_ratio:.2f}x, peak {profile.peak_ratio:.2f}x), "
        f"utilization {analysis.utilization_rate:.1%}"
    )


def format_models_table(models: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Format models as a Rich table.

    Args:
        models: Mapping of model name to its description
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Models", show_header=True, header_style="bold magenta")
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Input $/1M", justify="right")
    table.add_column("Output $/1M", justify="right")
    table.add_column("TPM per PTU", justify="right")
    for deployment in DeploymentType:
        table.add_column(f"{deployment.value} min/inc", justify="center")

    for name, info in sorted(models.items()):
        pricing = info.get("pricing") or {}
        deployments = info.get("deployments") or {}
        throughput = info.get("throughput_per_ptu")
        table.add_row(
            name,
            _format_currency(pricing.get("input_rate_per_million")),
            _format_currency(pricing.get("output_rate_per_million")),
            _format_number(throughput) if throughput is not None else "-",
            *[_format_rule(deployments.get(d.value)) for d in DeploymentType],
        )

    console.print(table)
    console.print(f"\nTotal: {len(models)} models")


def format_validation_table(report: ValidationReport, console: Optional[Console] = None) -> None:
    """Format a validation report as a Rich table."""
    if console is None:
        console = create_console()

    table = Table(title="PTU Rule Validation", show_header=True, header_style="bold magenta")
    table.add_column("Model", style="cyan")
    table.add_column("Deployment")
    for name in ("minimum", "increment", "throughput"):
        table.add_column(name.capitalize(), justify="center")
    table.add_column("Status", justify="center")

    for result in report.results:
        cells: List[Any] = []
        for name in ("minimum", "increment", "throughput"):
            check = result.check_for(name)
            if check is None:
                cells.append(Text("-", style="dim"))
            elif check.matches:
                cells.append(Text(_format_number(check.expected), style="green"))
            else:
                actual = "missing" if check.actual is None else _format_number(check.actual)
                cells.append(Text(f"{actual} != {_format_number(check.expected)}", style="red"))
        status = Text("✓", style="green") if result.passed else Text("✗", style="red")
        table.add_row(result.model, result.deployment_type, *cells, status)

    console.print(table)
    failed = len(report.failures)
    if failed:
        console.print(f"[red]{failed} of {len(report.results)} rules do not match the reference.[/red]")
    else:
        console.print(f"[green]All {len(report.results)} rules match the reference.[/green]")


def format_history_table(entries: List[HistoryEntry], console: Optional[Console] = None) -> None:
    """Format saved calculations as a Rich table."""
    if console is None:
        console = create_console()

    if not entries:
        console.print("No saved calculations.")
        return

    table = Table(title="Recent Calculations", show_header=True, header_style="bold magenta")
    table.add_column("Saved", style="dim")
    table.add_column("Model", style="cyan")
    table.add_column("Deployment")
    table.add_column("Avg TPM", justify="right")
    table.add_column("PTU", justify="right")
    table.add_column("Monthly PTU", justify="right")
    table.add_column("Monthly PAYGO", justify="right")
    table.add_column("Recommendation")

    for entry in entries:
        result = entry.result
        table.add_row(
            entry.timestamp[:19].replace("T", " "),
            entry.model,
            entry.deployment_type,
            _format_number(entry.usage_input.average_tokens_per_minute),
            _format_number(result.get("actual_ptu")),
            _format_currency(result.get("monthly_ptu_cost")),
            _format_currency(result.get("monthly_paygo_cost")),
            str(result.get("recommendation") or "No data"),
        )

    console.print(table)


def format_data_paths_table(paths: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Format data paths as a Rich table.

    Args:
        paths: Path information
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Data Source Paths", show_header=True, header_style="bold magenta")

    table.add_column("File", style="cyan")
    table.add_column("Source", style="yellow")
    table.add_column("Path", style="dim")
    table.add_column("Status", justify="center")

    for file_type, path_info in paths.items():
        exists = path_info.get("exists", False)
        table.add_row(
            file_type,
            path_info.get("source", "Unknown"),
            str(path_info.get("path", "N/A")),
            Text("✓" if exists else "✗", style="green" if exists else "red"),
        )

    console.print(table)


def format_env_vars_table(env_vars: Dict[str, Optional[str]], console: Optional[Console] = None) -> None:
    """Format environment variables as a Rich table.

    Args:
        env_vars: Environment variables
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="APC Environment Variables", show_header=True, header_style="bold magenta")

    table.add_column("Variable", style="cyan")
    table.add_column("Value", style="yellow")
    table.add_column("Set", justify="center")

    for key, value in sorted(env_vars.items()):
        is_set = value is not None
        display_value = value if is_set else "[dim]<not set>[/dim]"
        status = "✓" if is_set else "✗"
        status_style = "green" if is_set else "red"

        table.add_row(key, display_value, Text(status, style=status_style))

    console.print(table)
