"""Module-level hook functions backed by one shared registry."""

from typing import Any, Callable, Optional, Sequence, TypeVar, Union

from .hooks.registry import HookRegistry
from .hooks.types import Callback

F = TypeVar("F", bound=Callable[..., Any])

# Global registry instance
_global_registry: Optional[HookRegistry] = None


def get_registry() -> HookRegistry:
    """Get the shared registry, creating it on first use.

    Returns
    -------
    HookRegistry
        The process-wide registry.
    """
    global _global_registry
    if _global_registry is None:
        _global_registry = HookRegistry()
    return _global_registry


def set_registry(registry: HookRegistry) -> None:
    """Use an explicitly constructed registry for the module-level functions."""
    global _global_registry
    _global_registry = registry


def reset_registry() -> None:
    """Drop the shared registry; the next call creates a fresh one."""
    global _global_registry
    _global_registry = None


def add_filter(
    tag: str,
    callback: Callback,
    priority: Optional[int] = None,
    accepted_args: Optional[int] = None,
) -> bool:
    return get_registry().add_filter(tag, callback, priority, accepted_args)


def remove_filter(tag: str, callback: Callback, priority: Optional[int] = None) -> bool:
    return get_registry().remove_filter(tag, callback, priority)


def remove_all_filters(tag: str, priority: Optional[int] = None) -> bool:
    return get_registry().remove_all_filters(tag, priority)


def has_filter(tag: str, callback: Callback = None) -> Union[bool, int]:
    return get_registry().has_filter(tag, callback)


def apply_filters(tag: str, value: Any, *args: Any) -> Any:
    return get_registry().apply_filters(tag, value, *args)


def apply_filters_indexed(tag: str, args: Sequence[Any]) -> Any:
    return get_registry().apply_filters_indexed(tag, args)


def add_action(
    tag: str,
    callback: Callback,
    priority: Optional[int] = None,
    accepted_args: Optional[int] = None,
) -> bool:
    return get_registry().add_action(tag, callback, priority, accepted_args)


def has_action(tag: str, callback: Callback = None) -> Union[bool, int]:
    return get_registry().has_action(tag, callback)


def remove_action(tag: str, callback: Callback, priority: Optional[int] = None) -> bool:
    return get_registry().remove_action(tag, callback, priority)


def remove_all_actions(tag: str, priority: Optional[int] = None) -> bool:
    return get_registry().remove_all_actions(tag, priority)


def do_action(tag: str, *args: Any) -> None:
    get_registry().do_action(tag, *args)


def do_action_copied(tag: str, *args: Any) -> None:
    get_registry().do_action_copied(tag, *args)


def do_action_indexed(tag: str, args: Sequence[Any]) -> None:
    get_registry().do_action_indexed(tag, args)


def did_action(tag: str) -> int:
    return get_registry().did_action(tag)


def current_filter() -> Optional[str]:
    return get_registry().current_filter()


def doing_filter(tag: Optional[str] = None) -> bool:
    return get_registry().doing_filter(tag)


def doing_action(tag: Optional[str] = None) -> bool:
    return get_registry().doing_action(tag)


def on_filter(
    tag: str,
    priority: Optional[int] = None,
    accepted_args: Optional[int] = None,
    registry: Optional[HookRegistry] = None,
) -> Callable[[F], F]:
    """Decorator to register a function as a filter.

    Usage:
        @on_filter("title", priority=5)
        def shout(title):
            return title.upper()

    Parameters
    ----------
    tag : str
        Filter name.
    priority : int, optional
        Lower values run earlier.
    accepted_args : int, optional
        Number of leading arguments the function receives.
    registry : HookRegistry, optional
        Registry to attach to (default: the shared one).

    Returns
    -------
    callable
        Decorator returning the function unchanged.
    """

    def decorator(func: F) -> F:
        (registry or get_registry()).add_filter(tag, func, priority, accepted_args)
        return func

    return decorator


def on_action(
    tag: str,
    priority: Optional[int] = None,
    accepted_args: Optional[int] = None,
    registry: Optional[HookRegistry] = None,
) -> Callable[[F], F]:
    """Decorator to register a function as an action. See :func:`on_filter`."""

    def decorator(func: F) -> F:
        (registry or get_registry()).add_action(tag, func, priority, accepted_args)
        return func

    return decorator
