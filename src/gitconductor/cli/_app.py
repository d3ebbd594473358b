"""The command-line interface for gitconductor."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from gitconductor.config import safe_load_config
from gitconductor.utils import create_cli_logger

from ._commands import register_commands
from ._commands._context import CLIContext

_HELP = "Drive git merges, rebases, patches and pulls without an editor."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the CLI application.

    Args:
        console: Console for help and normal output.
        error_console: Console for cyclopts parse errors.
        exit_on_error: Exit on parse errors instead of raising.

    Returns:
        The application. Invoke ``app.meta()`` to honour the global options.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="gitconductor",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Enable verbose output")] = False,
        quiet: Annotated[bool, Parameter(help="Suppress non-essential output")] = False,
        no_color: Annotated[
            bool, Parameter(name="--no-color", help="Disable colored output")
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        repo_root: Annotated[
            Path | None,
            Parameter(
                name="--repo-root",
                help="Repository whose git directory holds gitconductor.toml",
            ),
        ] = None,
    ) -> None:
        """Launch the gitconductor CLI with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Enable verbose output with additional details.
            quiet: Suppress non-essential output.
            no_color: Disable colored output.
            config: Explicit path to config file.
            repo_root: Repository searched for a repository-local config file.
        """
        # Verbose output also means debug logging
        cli_overrides: dict[str, object] | None = None
        if verbose:
            cli_overrides = {"logging": {"level": "debug"}}

        loaded_config, config_error = safe_load_config(
            config_path=config,
            repo_path=repo_root,
            cli_overrides=cli_overrides,
        )

        cli_logger = create_cli_logger(
            level=loaded_config.logging.level.value,
            log_format=loaded_config.logging.format.value,  # type: ignore[arg-type]
            log_file=loaded_config.logging.file,
            command=tokens[0] if tokens else "",
        )

        ctx = CLIContext(
            config=loaded_config,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
            repo_root=repo_root,
            config_error=config_error,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `gitconductor` CLI."""
    create_app().meta()


if __name__ == "__main__":
    main()
