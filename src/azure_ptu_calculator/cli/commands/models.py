"""Model inspection commands for the PTU calculator CLI."""

from typing import Optional, TextIO

import click

from ..formatters import (
    create_console,
    format_json,
    format_models_list_json,
    format_models_table,
)
from ..utils import ExitCode, handle_error, load_default_tables, output_option, validate_format_support


@click.group()
def models() -> None:
    """Model pricing and PTU rule inspection."""
    pass


@models.command("list")
@click.pass_context
def list_models(ctx: click.Context) -> None:
    """List every model with its PAYGO rates and per-deployment PTU rules."""
    tables = load_default_tables()
    try:
        data = tables.dump()["models"]

        if ctx.obj["format"] == "json":
            format_json(format_models_list_json(data))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_models_table(data, console)

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)


@models.command()
@click.argument("model_name")
@output_option
@click.pass_context
def get(ctx: click.Context, model_name: str, output: Optional[str] = None) -> None:
    """Get pricing, throughput and PTU rules for a specific model.

    Only the tables' own entries are shown; unknown models are an error here
    rather than falling back.
    """
    tables = load_default_tables()
    if model_name not in tables.list_models():
        handle_error(Exception(f"Model '{model_name}' not found"), ExitCode.MODEL_NOT_FOUND)
        return

    try:
        validate_format_support(ctx.obj["format"], ["json"], "models get", ctx.obj)
    except click.BadParameter as e:
        handle_error(e, ExitCode.INVALID_USAGE)
        return

    payload = {"name": model_name, **tables.describe_model(model_name)}

    output_file: Optional[TextIO] = None
    if output:
        output_file = open(output, "w", encoding="utf-8")
    try:
        format_json(payload, output_file)
    finally:
        if output_file:
            output_file.close()
