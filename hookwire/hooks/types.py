"""Listener records and identity for the hook registry."""

import inspect
import pkgutil
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

Callback = Union[Callable[..., Any], str, None]


class ListenerKind(Enum):
    """Shape of the callable reference a listener was registered with."""

    FUNCTION = "function"
    REFERENCE = "reference"
    BOUND_METHOD = "bound_method"
    STATIC_METHOD = "static_method"
    EMPTY = "empty"


@dataclass
class Listener:
    """A callback attached to a tag at a given priority.

    Parameters
    ----------
    callback : callable, str or None
        The callable, a ``"module:attr"`` reference resolved at dispatch,
        or None for an inert slot.
    kind : ListenerKind
        How ``id`` was derived from ``callback``.
    id : str
        Identity key, unique within one (tag, priority) bucket.
    priority : int
        Lower values run earlier.
    accepted_args : int
        How many leading dispatch arguments the callback receives.
    """

    callback: Callback
    kind: ListenerKind
    id: str
    priority: int
    accepted_args: int

    def resolve(self) -> Optional[Callable[..., Any]]:
        """Return the callable to invoke, importing string references."""
        if self.kind is ListenerKind.REFERENCE:
            return pkgutil.resolve_name(self.callback)
        return self.callback

    @property
    def name(self) -> str:
        """Readable label for logs and introspection."""
        if self.kind in (ListenerKind.REFERENCE, ListenerKind.EMPTY):
            return self.id or "<empty>"
        return getattr(self.callback, "__qualname__", None) or self.id


def _object_key(obj: Any) -> str:
    return f"{type(obj).__qualname__}@{id(obj):x}"


def _function_key(func: Any) -> str:
    module = getattr(func, "__module__", None) or "builtins"
    qualname = func.__qualname__
    # Lambdas and closures share a qualname across instances
    if "<" in qualname:
        return f"{module}:{qualname}@{id(func):x}"
    return f"{module}:{qualname}"


def classify(callback: Callback) -> tuple[ListenerKind, str]:
    """Derive the kind and identity key of a callback.

    Plain functions are keyed by ``module:qualname``, which is also the form
    of a string reference, so either spelling finds the same entry. Bound
    methods are keyed by their owner instance plus the method name; methods
    bound to a class are keyed by the class name plus the method name.

    Parameters
    ----------
    callback : callable, str or None
        Anything a caller handed to the registry.

    Returns
    -------
    tuple[ListenerKind, str]
        The listener kind and its identity key.
    """
    if callback is None:
        return ListenerKind.EMPTY, ""

    if isinstance(callback, str):
        return ListenerKind.REFERENCE, callback

    owner = getattr(callback, "__self__", None)
    if inspect.ismethod(callback):
        name = callback.__func__.__name__
        if inspect.isclass(owner):
            return ListenerKind.STATIC_METHOD, f"{owner.__module__}:{owner.__qualname__}.{name}"
        return ListenerKind.BOUND_METHOD, f"{_object_key(owner)}.{name}"

    if inspect.isfunction(callback):
        # A staticmethod looked up on its class is a plain function
        # whose qualname carries the owning class.
        qualname = callback.__qualname__
        if "." in qualname and "<" not in qualname:
            return ListenerKind.STATIC_METHOD, _function_key(callback)
        return ListenerKind.FUNCTION, _function_key(callback)

    if inspect.isbuiltin(callback):
        # Builtin methods of instances (e.g. ``items.append``)
        if owner is not None and not inspect.ismodule(owner):
            if inspect.isclass(owner):
                return ListenerKind.STATIC_METHOD, f"{owner.__module__}:{owner.__qualname__}.{callback.__name__}"
            return ListenerKind.BOUND_METHOD, f"{_object_key(owner)}.{callback.__name__}"
        return ListenerKind.FUNCTION, _function_key(callback)

    return ListenerKind.FUNCTION, _object_key(callback)
