# hookwire: priority-ordered filters and actions

from .config import HookSettings
from .functions import (
    add_action,
    add_filter,
    apply_filters,
    apply_filters_indexed,
    current_filter,
    did_action,
    do_action,
    do_action_copied,
    do_action_indexed,
    doing_action,
    doing_filter,
    get_registry,
    has_action,
    has_filter,
    on_action,
    on_filter,
    remove_action,
    remove_all_actions,
    remove_all_filters,
    remove_filter,
    reset_registry,
    set_registry,
)
from .hooks import HookRegistry, Listener, ListenerKind

__all__ = [
    "HookRegistry",
    "HookSettings",
    "Listener",
    "ListenerKind",
    "add_action",
    "add_filter",
    "apply_filters",
    "apply_filters_indexed",
    "current_filter",
    "did_action",
    "do_action",
    "do_action_copied",
    "do_action_indexed",
    "doing_action",
    "doing_filter",
    "get_registry",
    "has_action",
    "has_filter",
    "on_action",
    "on_filter",
    "remove_action",
    "remove_all_actions",
    "remove_all_filters",
    "remove_filter",
    "reset_registry",
    "set_registry",
]
