"""Conflicts command app."""

from cyclopts import App

app = App(
    name="conflicts",
    help="Inspect and resolve conflicts of the active merge, rebase or patch",
    help_on_error=True,
)
