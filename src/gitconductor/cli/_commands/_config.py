# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, FBT002
"""Config commands for inspecting the merged configuration."""

from typing import Annotated

import tomli_w
from cyclopts import App, Parameter

from ._context import CLIContext, OutputFormat
from ._shared import ExitCode, exit_with_error, format_json, format_yaml

app = App(
    name="config",
    help="Inspect gitconductor configuration",
    help_on_error=True,
)


@app.command(name="show")
def _show(
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (toml, json, yaml)"),
    ] = OutputFormat.TOML,
    section: Annotated[
        str | None,
        Parameter(name="--section", help="Show one section only (logging, git)"),
    ] = None,
    no_defaults: Annotated[
        bool,
        Parameter(name="--no-defaults", help="Exclude default values"),
    ] = False,
    show_sources: Annotated[
        bool,
        Parameter(name="--show-sources", help="List the files that were merged"),
    ] = False,
) -> None:
    """Show the merged configuration

    Args:
        format: Output format.
        section: Show one section only.
        no_defaults: Exclude default values.
        show_sources: List the contributing sources after the configuration.
    """
    ctx = CLIContext.get_current()
    config = ctx.config
    if ctx.config_error is not None:
        exit_with_error(ctx.config_error, ExitCode.LOAD_ERROR)

    data = config.to_dict(include_defaults=not no_defaults)
    if section is not None:
        if section not in data or not isinstance(data[section], dict):
            exit_with_error(f"Section '{section}' not found", ExitCode.NOT_FOUND)
        data = {section: data[section]}

    match format:
        case OutputFormat.JSON:
            output = format_json(data)
        case OutputFormat.YAML:
            output = format_yaml(data)
        case OutputFormat.TOML:
            output = tomli_w.dumps(data)
        case _:
            exit_with_error(
                f"Unsupported format for config: {format.value}",
                ExitCode.VALIDATION_ERROR,
            )
    print(output.rstrip())

    if show_sources:
        for source in config.sources:
            path = f" ({source.path})" if source.path else ""
            print(f"# {source.name.value}{path}")
