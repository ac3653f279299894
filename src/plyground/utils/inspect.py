"""Provide insights about Python objects."""

import inspect
from typing import Any


def get_qualname(obj: Any) -> str:
    """Get the qualified name of the given object.

    Used to print the compute functions invoked by expressions,
    so that plans read like ``pyarrow.compute.greater(...)``.

    >>> import pyarrow.compute as pc
    >>> get_qualname(pc.greater)
    'pyarrow.compute.greater'
    >>> class Planner:
    ...   def plan(self):
    ...     pass
    >>> get_qualname(Planner().plan)
    'plyground.utils.inspect.Planner.plan'
    """
    module = inspect.getmodule(obj)
    module_name = module.__name__ if module is not None else "builtins"
    if inspect.ismethod(obj):
        return f"{module_name}.{obj.__self__.__class__.__name__}.{obj.__name__}"
    elif inspect.isfunction(obj) or inspect.isbuiltin(obj):
        return f"{module_name}.{obj.__qualname__}"
    elif inspect.isclass(obj):
        return f"{module_name}.{obj.__name__}"
    elif inspect.ismodule(obj):
        return obj.__name__
    return f"{module_name}.{obj.__class__.__name__}"
