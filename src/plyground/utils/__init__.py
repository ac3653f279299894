"""Generic utilities and helpers.

Helpers that are not bound to any specific component,
like printing tables of data or describing python objects.
"""

from . import inspect, tabulate

__all__ = ("inspect", "tabulate")
