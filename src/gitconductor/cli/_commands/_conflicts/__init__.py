# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Conflicts command app for inspecting and resolving conflicted operations."""

# Import command modules to register commands with the app
from . import _inspect as _inspect, _resolve as _resolve, _sequence as _sequence
from ._app import app
from ._render import describe_state, print_state

__all__ = ["app", "describe_state", "print_state"]
