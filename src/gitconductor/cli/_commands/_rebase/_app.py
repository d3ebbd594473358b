"""Rebase command app."""

from cyclopts import App

app = App(
    name="rebase",
    help="Run interactive rebases from a plan file, without an editor",
    help_on_error=True,
)
