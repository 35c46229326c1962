"""Data source inspection commands."""

import os
from pathlib import Path
from typing import Any, Dict

import click

from ...config_paths import (
    ENV_DATA_DIR,
    ENV_PTU_REFERENCE_PATH,
    describe_path_source,
    get_history_path,
    get_ptu_reference_path,
)
from ..formatters import (
    create_console,
    format_data_paths_json,
    format_data_paths_table,
    format_env_vars_json,
    format_env_vars_table,
    format_json,
)
from ..utils import ExitCode, get_apc_env_vars, handle_error, load_default_tables


@click.group()
def data() -> None:
    """Data source inspection."""
    pass


def _collect_paths() -> Dict[str, Dict[str, Any]]:
    tables = load_default_tables()
    paths: Dict[str, Dict[str, Any]] = {}
    for label, info in tables.get_data_info().items():
        paths[f"{label}.yaml"] = info

    reference_path = get_ptu_reference_path()
    paths["ptu_reference.yaml"] = {
        "path": reference_path,
        "source": describe_path_source(reference_path, ENV_PTU_REFERENCE_PATH),
        "exists": Path(reference_path).is_file(),
        "version": None,
    }

    history_path = get_history_path()
    paths["history.json"] = {
        "path": str(history_path),
        "source": f"Environment variable ({ENV_DATA_DIR})" if os.environ.get(ENV_DATA_DIR) else "User data",
        "exists": history_path.is_file(),
        "version": None,
    }
    return paths


@data.command()
@click.pass_context
def paths(ctx: click.Context) -> None:
    """Show resolved data source paths and precedence."""
    try:
        resolved = _collect_paths()

        if ctx.obj["format"] == "json":
            format_json(format_data_paths_json(resolved))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_data_paths_table(resolved, console)

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)


@data.command()
@click.pass_context
def env(ctx: click.Context) -> None:
    """Show effective APC environment variables."""
    try:
        env_vars = get_apc_env_vars()

        if ctx.obj["format"] == "json":
            format_json(format_env_vars_json(env_vars))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_env_vars_table(env_vars, console)

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
