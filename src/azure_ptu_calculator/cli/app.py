"""Main CLI application for the Azure PTU calculator."""

from typing import Optional

import click
import rich_click as rich_click

from ..logging import configure_logging
from .utils import resolve_format, resolve_log_level

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


@click.group(cls=rich_click.RichGroup, invoke_without_command=True)
@click.option(
    "--format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option("--version", is_flag=True, help="Print CLI and library version information.")
@click.pass_context
def app(
    ctx: click.Context,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
    version: bool = False,
) -> None:
    """Azure OpenAI PTU calculator - compare pay-as-you-go and provisioned throughput costs.

    Sizes a PTU deployment from token throughput, applies the minimum PTU
    purchase for the deployment type and recommends PAYGO, a hybrid plan or
    a full PTU reservation.

    Examples:
      # Quote gpt-4o on a global deployment
      ptu quote --model gpt-4o --avg-tpm 100000

      # List models with their PTU minimums
      ptu models list

      # Check the PTU rules against the published figures
      ptu validate
    """
    if version:
        from .. import __version__

        click.echo(f"PTU calculator version: {__version__}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()

    log_level = resolve_log_level(verbose, quiet, debug)
    configure_logging(log_level)

    # Store global options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "log_level": log_level,
        }
    )


# Subcommands are registered after the group is defined.
from .commands import data, history, models, quote, validate  # noqa: E402

app.add_command(quote.quote)
app.add_command(models.models)
app.add_command(validate.validate)
app.add_command(history.history)
app.add_command(data.data)


if __name__ == "__main__":
    app()
