"""Hook registry for filters and actions."""

from .registry import HookRegistry
from .types import Listener, ListenerKind, classify

__all__ = [
    "HookRegistry",
    "Listener",
    "ListenerKind",
    "classify",
]
