import pathlib
from dataclasses import dataclass
from typing import Any

from typing_extensions import TypedDict, override

__all__ = (
    "CountersignError",
    "ConfigurationError",
    "DuplicateTestError",
    "InvalidTestError",
    "UnknownTestError",
    "InvalidSettingError",
    "InvalidInputError",
    "DictionaryError",
    "DictionaryLoadError",
    "DictionaryParseError",
)


@dataclass(slots=True)
class CountersignError(Exception):
    """
    Base exception for all countersign errors.

    Attributes:
        message: A format string. It is rendered with the ``ctx`` mapping, e.g.
            ``"Test {ctx[test_name]!r} is already present"``.
        ctx: Structured details about the error, suitable for presenting a message
            to the end user without parsing ``message``.
    """

    class Context(TypedDict): ...

    message: str
    ctx: Context | None

    def format_message(self) -> str:
        return self.message.format(ctx=self.ctx or {})

    @override
    def __str__(self) -> str:
        return self.format_message()


@dataclass(slots=True)
class ConfigurationError(CountersignError):
    """
    Raised when the tests or their settings are misconfigured.

    Configuration errors are programmer errors. They are raised synchronously at
    the call site that introduced them, or before an evaluation schedules any test.
    """


class NamedTestContext(TypedDict):
    test_name: str


@dataclass(slots=True)
class DuplicateTestError(ConfigurationError):
    """Raised when a test is registered under a name that is already taken."""

    ctx: NamedTestContext


@dataclass(slots=True)
class InvalidTestError(ConfigurationError):
    """
    Raised when a test function cannot be registered.

    A test function must be callable with two positional arguments, the password
    and the setting value.
    """

    class Context(NamedTestContext):
        reason: str

    ctx: Context


@dataclass(slots=True)
class UnknownTestError(ConfigurationError):
    """Raised when an enabled setting refers to a test that was never registered."""

    ctx: NamedTestContext


@dataclass(slots=True)
class InvalidSettingError(ConfigurationError):
    """
    Raised when a setting value is neither a boolean nor a non-negative integer.
    """

    class Context(NamedTestContext):
        """
        Attributes:
            errors: The condensed pydantic validation errors.
        """

        errors: list[Any]

    ctx: Context


@dataclass(slots=True)
class InvalidInputError(CountersignError):
    """Raised when the password handed to an evaluation is not a string."""

    class Context(TypedDict):
        input_type: str

    ctx: Context


@dataclass(slots=True)
class DictionaryError(CountersignError):
    class Context(TypedDict):
        """
        Attributes:
            name: The name of the word list.
            path: The file the word list was expected at.
        """

        name: str
        path: pathlib.Path

    ctx: Context


@dataclass(slots=True)
class DictionaryLoadError(DictionaryError):
    """Raised when a word list is missing or cannot be read."""

    @override
    def format_message(self) -> str:
        return "Unable to load dictionary %r (%s): %s" % (
            self.ctx["name"],
            str(self.ctx["path"]),
            self.message,
        )


@dataclass(slots=True)
class DictionaryParseError(DictionaryError):
    """Raised when a word list is not a JSON array of strings."""

    @override
    def format_message(self) -> str:
        return "Unable to parse dictionary %r (%s).\n\n%s" % (
            self.ctx["name"],
            str(self.ctx["path"]),
            self.message,
        )
