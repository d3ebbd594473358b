from collections.abc import Callable

import pytest
from rich.console import Console

from gitconductor.cli import create_app


@pytest.fixture
def gitconductor_cli(console: Console) -> Callable[..., int]:
    """Run the CLI with global option handling and return the exit code."""
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app.meta(list(args))
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
