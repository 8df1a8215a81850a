#!/usr/bin/env python3
"""
Unit tests for error handler routing.
"""

import unittest

from microioc import Container, ContainerException, ErrorHandler, ExceptionKind


class CollectingHandler:
    def __init__(self, container):
        self.container = container
        self.errors = []

    def handle(self, error):
        self.errors.append(error)
        return "fallback"


class NotCallableHandler:
    handle = None

    def __init__(self, container):
        self.container = container


class TestErrorHandler(unittest.TestCase):
    def test_handler_is_constructed_with_container(self):
        container = Container()

        result = container.error_handler(CollectingHandler)

        self.assertIs(result, container)
        self.assertIs(container._error_handler.container, container)

    def test_handler_return_value_replaces_failed_resolution(self):
        container = Container().error_handler(CollectingHandler)

        result = container.make("Missing")

        self.assertEqual(result, "fallback")
        [error] = container._error_handler.errors
        self.assertIsInstance(error, ContainerException)
        self.assertIs(error.kind, ExceptionKind.BINDING)

    def test_nested_unbound_dependency_falls_back_at_failure_site(self):
        container = Container().error_handler(CollectingHandler)
        container.bind("A", lambda Missing: ("A", Missing))

        self.assertEqual(container.make("A"), ("A", "fallback"))

        [error] = container._error_handler.errors
        self.assertIs(error.kind, ExceptionKind.BINDING)
        self.assertIn("Missing", str(error))

    def test_nested_failing_factory_falls_back_at_failure_site(self):
        container = Container().error_handler(CollectingHandler)

        def broken():
            raise RuntimeError("boom")

        container.bind("B", broken)
        container.bind("A", lambda B: ("A", B))

        self.assertEqual(container.make("A"), ("A", "fallback"))

        [error] = container._error_handler.errors
        self.assertIsInstance(error, RuntimeError)
        self.assertFalse(container.is_resolved("B"))
        self.assertTrue(container.is_resolved("A"))

    def test_fallback_value_is_not_cached(self):
        container = Container().error_handler(CollectingHandler)
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("first call fails")
            return "ok"

        container.bind("flaky", flaky)

        self.assertEqual(container.make("flaky"), "fallback")
        self.assertEqual(container.make("flaky"), "ok")

    def test_nested_unbound_dependency_raises_without_handler(self):
        container = Container()
        container.bind("A", lambda Missing: ("A", Missing))

        with self.assertRaises(ContainerException) as ctx:
            container.make("A")

        self.assertIs(ctx.exception.kind, ExceptionKind.BINDING)
        self.assertFalse(container.is_resolved("A"))

    def test_circular_dependency_routed_once(self):
        container = Container().error_handler(CollectingHandler)
        container.bind("A", lambda B: "a")
        container.bind("B", lambda A: "b")

        self.assertEqual(container.make("A"), "fallback")

        [error] = container._error_handler.errors
        self.assertIs(error.kind, ExceptionKind.CIRCULAR_DEPENDENCY)
        self.assertFalse(container.is_resolved("A"))
        self.assertFalse(container.is_resolved("B"))

    def test_factory_exceptions_are_routed_through_handler(self):
        container = Container().error_handler(CollectingHandler)

        def broken():
            raise RuntimeError("boom")

        container.bind("broken", broken)

        self.assertEqual(container.make("broken"), "fallback")
        [error] = container._error_handler.errors
        self.assertIsInstance(error, RuntimeError)

    def test_default_handler_logs_and_returns_none(self):
        container = Container().error_handler(ErrorHandler)

        with self.assertLogs("microioc.exceptions", level="ERROR") as logs:
            result = container.make("Missing")

        self.assertIsNone(result)
        self.assertIn("Container Binding Exception", logs.output[0])

    def test_non_callable_handler_reraises(self):
        container = Container().error_handler(NotCallableHandler)

        with self.assertRaises(ContainerException):
            container.make("Missing")

    def test_handle_error_without_handler_reraises_same_object(self):
        container = Container()
        error = ValueError("original")

        with self.assertRaises(ValueError) as ctx:
            container.handle_error(error)

        self.assertIs(ctx.exception, error)


class TestContainerException(unittest.TestCase):
    def test_name_and_message(self):
        error = ContainerException(ExceptionKind.CIRCULAR_DEPENDENCY, "A requires A -> A", "Container")

        self.assertEqual(error.name, "Container Circular Dependency Exception")
        self.assertEqual(error.message, "A requires A -> A")
        self.assertEqual(str(error), "Container Circular Dependency Exception: A requires A -> A")

    def test_make_exception_uses_container_name(self):
        error = Container().make_exception(ExceptionKind.SHARING, "nope")

        self.assertEqual(error.name, "Container Sharing Exception")


if __name__ == "__main__":
    unittest.main()
