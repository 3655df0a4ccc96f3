"""Unit tests for listener identity."""

import functools

import pytest

from hookwire.hooks.types import Listener, ListenerKind, classify


def module_function(value):
    return value


class Widget:
    def render(self, value):
        return value

    @classmethod
    def build(cls, value):
        return value

    @staticmethod
    def helper(value):
        return value


class TestClassify:
    """Tests for classify()."""

    def test_module_function(self):
        """Named functions are keyed by module and qualname."""
        kind, key = classify(module_function)

        assert kind is ListenerKind.FUNCTION
        assert key == f"{__name__}:module_function"

    def test_string_reference(self):
        """String references are their own key."""
        assert classify("os.path:basename") == (ListenerKind.REFERENCE, "os.path:basename")

    def test_none(self):
        """None is an inert slot with an empty key."""
        assert classify(None) == (ListenerKind.EMPTY, "")

    def test_lambdas_do_not_collide(self):
        """Distinct lambdas get distinct keys; the same lambda is stable."""
        first = lambda v: v  # noqa: E731
        second = lambda v: v  # noqa: E731

        assert classify(first)[1] != classify(second)[1]
        assert classify(first) == classify(first)

    def test_bound_method_same_instance(self):
        """The same instance and method always produce the same key."""
        widget = Widget()

        kind, key = classify(widget.render)

        assert kind is ListenerKind.BOUND_METHOD
        assert classify(widget.render)[1] == key
        assert key.endswith(".render")

    def test_bound_method_different_instances(self):
        """Two instances with the same method do not collide."""
        first, second = Widget(), Widget()

        assert classify(first.render)[1] != classify(second.render)[1]

    def test_classmethod(self):
        """Methods bound to a class are keyed by class and method name."""
        kind, key = classify(Widget.build)

        assert kind is ListenerKind.STATIC_METHOD
        assert key == f"{__name__}:Widget.build"

    def test_staticmethod(self):
        """Static methods are keyed by their qualified name."""
        kind, key = classify(Widget.helper)

        assert kind is ListenerKind.STATIC_METHOD
        assert key == f"{__name__}:Widget.helper"

    def test_builtin_function(self):
        """Builtins resolve to the builtins module."""
        assert classify(len) == (ListenerKind.FUNCTION, "builtins:len")

    def test_builtin_bound_method(self):
        """Builtin methods of instances are keyed by their owner."""
        items = []

        kind, key = classify(items.append)

        assert kind is ListenerKind.BOUND_METHOD
        assert key == classify(items.append)[1]
        assert key.endswith(".append")

    def test_callable_object(self):
        """Other callables are keyed by object identity."""
        partial = functools.partial(module_function)

        kind, key = classify(partial)

        assert kind is ListenerKind.FUNCTION
        assert key.startswith("partial@")


class TestListener:
    """Tests for Listener records."""

    def test_resolve_reference(self):
        """String references are imported on resolve."""
        kind, key = classify("os.path:basename")
        listener = Listener(callback="os.path:basename", kind=kind, id=key, priority=10, accepted_args=1)

        assert listener.resolve()("/a/b.txt") == "b.txt"
        assert listener.name == "os.path:basename"

    def test_resolve_callable(self):
        """Callables resolve to themselves."""
        kind, key = classify(module_function)
        listener = Listener(callback=module_function, kind=kind, id=key, priority=3, accepted_args=1)

        assert listener.resolve() is module_function
        assert listener.name == "module_function"
        assert listener.accepted_args == 1

    def test_empty_name(self):
        """Empty slots have a placeholder name."""
        listener = Listener(callback=None, kind=ListenerKind.EMPTY, id="", priority=10, accepted_args=0)

        assert listener.resolve() is None
        assert listener.name == "<empty>"

    def test_priority_and_accepted_args_required(self):
        """Listener records carry no defaults of their own."""
        kind, key = classify(module_function)

        with pytest.raises(TypeError):
            Listener(callback=module_function, kind=kind, id=key)
