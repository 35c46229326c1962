"""PTU rule validation command."""

from typing import Optional

import click

from ...errors import ConfigurationError
from ...validation import validate_ptu_rules
from ..formatters import create_console, format_json, format_validation_json, format_validation_table
from ..utils import ExitCode, handle_error, load_default_tables


@click.command()
@click.option(
    "--reference",
    type=click.Path(dir_okay=False),
    help="Reference YAML to compare against. Defaults to APC_PTU_REFERENCE_PATH, user config or the bundled copy.",
)
@click.pass_context
def validate(ctx: click.Context, reference: Optional[str] = None) -> None:
    """Check the PTU rule table against the published PTU figures.

    Compares minimum PTU, purchase increment and throughput per PTU for each
    model and deployment type in the reference. Exits with code 5 when any
    rule is missing or differs, so it can gate CI.
    """
    tables = load_default_tables()
    try:
        report = validate_ptu_rules(tables, reference_path=reference)
    except ConfigurationError as e:
        handle_error(e, ExitCode.DATA_SOURCE_ERROR)
        return

    if ctx.obj["format"] == "json":
        format_json(format_validation_json(report))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_validation_table(report, console)

    if not report.passed:
        ctx.exit(ExitCode.VALIDATION_FAILED)
