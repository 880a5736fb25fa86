import pathlib
from dataclasses import dataclass
from typing import TypedDict

import click
from typing_extensions import override


class Location(TypedDict):
    filename: pathlib.Path


@dataclass(slots=True)
class CLIError(click.ClickException):
    """
    Signals that an error has occurred in the application.

    Provides an `exit_code` attribute for specifying a specific exit code, and a
    `message` attribute containing a human-readable description of the error.

    Warning:
        Exit code 1 is reserved for a password that fails the test, so errors use
        codes from 2 upwards.
    """

    message: str
    exit_code: int = 2

    def __post_init__(self) -> None:
        click.ClickException.__init__(self, self.message)


@dataclass(slots=True)
class ConfigError(CLIError):
    pass


@dataclass(slots=True, kw_only=True)
class ConfigSyntaxError(ConfigError):
    class Context(TypedDict):
        loc: Location

    ctx: Context

    @override
    def format_message(self) -> str:
        return "Decoding failed for configuration file %r.\n\n%s" % (
            str(self.ctx["loc"]["filename"]),
            self.message,
        )


@dataclass(slots=True, kw_only=True)
class ConfigValidationError(ConfigError):
    @override
    def format_message(self) -> str:
        return "Invalid configuration input.\n\n%s" % self.message
