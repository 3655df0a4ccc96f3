"""Priority-ordered filter and action registry."""

import copy
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence, Union

from loguru import logger

from ..config import HookSettings
from .types import Callback, Listener, classify


class HookRegistry:
    """Registry of filters and actions keyed by tag.

    Listeners are stored as ``tag -> priority -> id -> Listener``. Priority
    buckets are sorted lazily the first time a tag is dispatched after it
    changed; within a bucket, listeners keep their insertion order, and
    re-adding an existing id replaces the entry in place.

    Listeners run synchronously on the caller's thread and may re-enter the
    registry (register, remove, or dispatch other tags). The listeners of a
    tag are snapshotted before they run, so changes a listener makes to the
    tag currently being dispatched are unspecified and must not be relied on.

    The registry never validates or wraps listener calls: whatever a
    listener raises, including failures to resolve a string reference,
    propagates to the dispatch caller.
    """

    def __init__(self, settings: Optional[HookSettings] = None) -> None:
        """Initialize registry.

        Parameters
        ----------
        settings : HookSettings, optional
            Defaults for priority, accepted args and the observer tag.
        """
        self.settings = settings or HookSettings()
        self._filters: dict[str, dict[int, dict[str, Listener]]] = {}
        self._sorted: set[str] = set()
        self._actions: dict[str, int] = {}
        self._lock = threading.RLock()
        self._local = threading.local()

    @property
    def _stack(self) -> list[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    # Registration

    def add_filter(
        self,
        tag: str,
        callback: Callback,
        priority: Optional[int] = None,
        accepted_args: Optional[int] = None,
    ) -> bool:
        """Attach a callback to a tag.

        Parameters
        ----------
        tag : str
            Filter or action name.
        callback : callable, str or None
            Function, bound method, classmethod, ``"module:attr"`` reference,
            or None for an inert slot. Not checked for callability.
        priority : int, optional
            Lower values run earlier (default from settings, 10).
        accepted_args : int, optional
            Number of leading arguments passed on dispatch (default from
            settings, 1).

        Returns
        -------
        bool
            Always True.
        """
        if priority is None:
            priority = self.settings.default_priority
        if accepted_args is None:
            accepted_args = self.settings.default_accepted_args

        kind, listener_id = classify(callback)
        listener = Listener(
            callback=callback,
            kind=kind,
            id=listener_id,
            priority=priority,
            accepted_args=accepted_args,
        )

        with self._lock:
            self._filters.setdefault(tag, {}).setdefault(priority, {})[listener_id] = listener
            self._sorted.discard(tag)

        logger.debug(f"Added '{listener.name}' to '{tag}' at priority {priority}")
        return True

    def remove_filter(self, tag: str, callback: Callback, priority: Optional[int] = None) -> bool:
        """Detach a callback from a tag.

        Parameters
        ----------
        tag : str
            Filter or action name.
        callback : callable, str or None
            The callback as it was registered (or its string reference).
        priority : int, optional
            Priority it was registered at (default from settings, 10).

        Returns
        -------
        bool
            True if the callback was attached and is now removed.
        """
        if priority is None:
            priority = self.settings.default_priority

        _, listener_id = classify(callback)

        with self._lock:
            buckets = self._filters.get(tag)
            if not buckets or listener_id not in buckets.get(priority, {}):
                return False

            bucket = buckets[priority]
            del bucket[listener_id]
            if not bucket:
                del buckets[priority]
            if not buckets:
                del self._filters[tag]
            self._sorted.discard(tag)

        logger.debug(f"Removed '{listener_id}' from '{tag}' at priority {priority}")
        return True

    def remove_all_filters(self, tag: str, priority: Optional[int] = None) -> bool:
        """Detach every callback from a tag, or from one priority of it.

        Always returns True, whether or not anything was attached.
        """
        with self._lock:
            buckets = self._filters.get(tag)
            if buckets is not None:
                if priority is None:
                    del self._filters[tag]
                else:
                    buckets.pop(priority, None)
                    if not buckets:
                        del self._filters[tag]
            self._sorted.discard(tag)

        if priority is None:
            logger.debug(f"Removed all listeners from '{tag}'")
        else:
            logger.debug(f"Removed all listeners from '{tag}' at priority {priority}")
        return True

    def has_filter(self, tag: str, callback: Callback = None) -> Union[bool, int]:
        """Check whether a tag, or a specific callback on it, is registered.

        Parameters
        ----------
        tag : str
            Filter or action name.
        callback : callable or str, optional
            Callback to look for.

        Returns
        -------
        bool or int
            Without a callback, whether the tag has any listener. With one,
            the lowest priority it is attached at or False. A priority of 0 is
            falsy, so compare the result with ``is False``.
        """
        with self._lock:
            buckets = self._filters.get(tag)
            if callback is None:
                return bool(buckets)
            if not buckets:
                return False

            _, listener_id = classify(callback)
            for priority in sorted(buckets):
                if listener_id in buckets[priority]:
                    return priority
        return False

    # Actions share storage with filters

    def add_action(
        self,
        tag: str,
        callback: Callback,
        priority: Optional[int] = None,
        accepted_args: Optional[int] = None,
    ) -> bool:
        """Attach a callback to an action. Same as :meth:`add_filter`."""
        return self.add_filter(tag, callback, priority, accepted_args)

    def remove_action(self, tag: str, callback: Callback, priority: Optional[int] = None) -> bool:
        return self.remove_filter(tag, callback, priority)

    def remove_all_actions(self, tag: str, priority: Optional[int] = None) -> bool:
        return self.remove_all_filters(tag, priority)

    def has_action(self, tag: str, callback: Callback = None) -> Union[bool, int]:
        return self.has_filter(tag, callback)

    # Dispatch

    def apply_filters(self, tag: str, value: Any, *args: Any) -> Any:
        """Pass a value through every filter attached to a tag.

        Each listener receives the first ``accepted_args`` of
        ``(value, *args)``, where ``value`` is the previous listener's
        return value.

        Parameters
        ----------
        tag : str
            Filter name.
        value : Any
            Value to transform.
        *args : Any
            Extra arguments passed after the value.

        Returns
        -------
        Any
            The transformed value, or ``value`` unchanged if nothing is
            attached.
        """
        with self._dispatching(tag, (tag, value, *args)) as listeners:
            for listener in listeners:
                if listener.callback is None:
                    continue
                call_args = (value, *args)[: int(listener.accepted_args)]
                value = listener.resolve()(*call_args)
        return value

    def apply_filters_indexed(self, tag: str, args: Sequence[Any]) -> Any:
        """Like :meth:`apply_filters` with all arguments in one sequence.

        ``args[0]`` is the value being filtered. The caller's sequence is
        not modified. Observers of the ``all`` tag receive ``(tag, args)``.
        """
        args = list(args) or [None]
        with self._dispatching(tag, (tag, args)) as listeners:
            for listener in listeners:
                if listener.callback is None:
                    continue
                args[0] = listener.resolve()(*args[: int(listener.accepted_args)])
        return args[0]

    def do_action(self, tag: str, *args: Any) -> None:
        """Run every action attached to a tag.

        Arguments are passed as-is, so listeners share the caller's
        objects and may mutate them. Use :meth:`do_action_copied` to give
        listeners private copies instead. Return values are discarded and
        the tag's call count is incremented even when nothing is attached.
        """
        self._run_actions(tag, args, (tag, *args))

    def do_action_copied(self, tag: str, *args: Any) -> None:
        """Run every action attached to a tag on deep copies of the arguments.

        The arguments are copied once per dispatch, before the ``all``
        observers run; the caller's objects are never touched.
        """
        args = copy.deepcopy(args)
        self._run_actions(tag, args, (tag, *args))

    def do_action_indexed(self, tag: str, args: Sequence[Any]) -> None:
        """Like :meth:`do_action` with all arguments in one sequence.

        Observers of the ``all`` tag receive ``(tag, args)``.
        """
        self._run_actions(tag, tuple(args), (tag, args))

    def did_action(self, tag: str) -> int:
        """Return how many times an action has been dispatched."""
        with self._lock:
            return self._actions.get(tag, 0)

    def current_filter(self) -> Optional[str]:
        """Return the innermost tag being dispatched on this thread, if any."""
        stack = self._stack
        return stack[-1] if stack else None

    def doing_filter(self, tag: Optional[str] = None) -> bool:
        """Check whether a tag (or any tag when omitted) is being dispatched."""
        if tag is None:
            return bool(self._stack)
        return tag in self._stack

    def doing_action(self, tag: Optional[str] = None) -> bool:
        return self.doing_filter(tag)

    # Introspection

    def listeners(self, tag: str) -> list[Listener]:
        """Return the listeners of a tag in dispatch order."""
        return self._snapshot(tag)

    def tags(self) -> list[str]:
        """Return every tag with at least one listener."""
        with self._lock:
            return list(self._filters)

    def clear(self) -> None:
        """Remove all listeners and reset action counts."""
        with self._lock:
            self._filters.clear()
            self._sorted.clear()
            self._actions.clear()

    def _run_actions(self, tag: str, args: tuple, all_args: tuple) -> None:
        with self._lock:
            self._actions[tag] = self._actions.get(tag, 0) + 1

        with self._dispatching(tag, all_args) as listeners:
            for listener in listeners:
                if listener.callback is None:
                    continue
                listener.resolve()(*args[: int(listener.accepted_args)])

    def _snapshot(self, tag: str) -> list[Listener]:
        """Return a tag's listeners in dispatch order, sorting if needed."""
        with self._lock:
            buckets = self._filters.get(tag)
            if not buckets:
                return []
            if tag not in self._sorted:
                self._filters[tag] = buckets = dict(sorted(buckets.items()))
                self._sorted.add(tag)
            return [listener for bucket in buckets.values() for listener in bucket.values()]

    @contextmanager
    def _dispatching(self, tag: str, all_args: tuple) -> Iterator[list[Listener]]:
        """Run the ``all`` observers, then yield the listeners of ``tag``.

        The tag stays on this thread's stack for as long as observers or
        listeners run, and is popped on every exit path.
        """
        stack = self._stack
        depth = len(stack)
        try:
            observers = self._snapshot(self.settings.all_tag)
            if observers:
                stack.append(tag)
                for observer in observers:
                    if observer.callback is not None:
                        observer.resolve()(*all_args)

            listeners = self._snapshot(tag)
            if listeners and len(stack) == depth:
                stack.append(tag)

            logger.trace(f"Dispatching '{tag}' to {len(listeners)} listener(s)")
            yield listeners
        finally:
            del stack[depth:]
