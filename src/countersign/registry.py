import inspect
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, Callable

from .exc import DuplicateTestError, InvalidTestError, NamedTestContext
from .settings import Setting

__all__ = ("TestFunction", "TestRegistry")

logger = logging.getLogger(__name__)

TestFunction = Callable[[str, Setting], bool | Awaitable[bool]]
"""
A test receives the password and its setting and returns (or resolves to) whether
the password is acceptable. Raising aborts the evaluation it is part of.
"""


@dataclass(slots=True)
class TestRegistry:
    """Maps test names to test functions. A name can be registered only once."""

    _tests: dict[str, TestFunction] = field(init=False, default_factory=dict)

    def add(self, name: str, fn: Any) -> None:
        """
        Register a test function.

        Raises:
            DuplicateTestError: A test is already registered under ``name``.
            InvalidTestError: ``name`` is not a non-empty string, or ``fn`` cannot be
                called with the password and the setting.
        """
        if not isinstance(name, str) or not name:
            raise InvalidTestError(
                "Test name must be a non-empty string, not {ctx[test_name]!r}",
                ctx=InvalidTestError.Context(
                    test_name=str(name), reason="invalid name"
                ),
            )

        if name in self._tests:
            raise DuplicateTestError(
                "Test {ctx[test_name]!r} is already present",
                ctx=NamedTestContext(test_name=name),
            )

        if not callable(fn):
            raise InvalidTestError(
                "Test {ctx[test_name]!r} must be a function",
                ctx=InvalidTestError.Context(
                    test_name=name, reason="%s is not callable" % type(fn).__name__
                ),
            )

        try:
            signature = inspect.signature(fn)
        except (TypeError, ValueError):
            # not introspectable, e.g. some builtins
            signature = None

        if signature is not None:
            try:
                _ = signature.bind("", True)
            except TypeError as ex:
                raise InvalidTestError(
                    "Test {ctx[test_name]!r} must accept the password and the "
                    "setting as positional arguments ({ctx[reason]})",
                    ctx=InvalidTestError.Context(test_name=name, reason=str(ex)),
                ) from ex

        self._tests[name] = fn
        logger.debug("registered test %r", name)

    def snapshot(self) -> dict[str, TestFunction]:
        return dict(self._tests)

