# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Rebase command app for plan-driven interactive rebases."""

# Import command modules to register commands with the app
from . import _commits as _commits, _session as _session
from ._app import app
from ._plan import load_plan

__all__ = ["app", "load_plan"]
