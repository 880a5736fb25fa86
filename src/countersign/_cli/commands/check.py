import asyncio
from collections.abc import Callable, Coroutine
from logging import getLogger
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.table import Table

from ... import exc
from ..._conf import Settings
from ...core import Countersign
from ...result import Result
from ..exc import CLIError

__all__ = ["score", "test"]

T = TypeVar("T")

logger = getLogger(__name__)

password_argument = click.argument("password", required=False)
json_option = click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the result as JSON instead of a table.",
)


def read_password(password: str | None) -> str:
    if password is None:
        password = click.prompt("Password", hide_input=True, type=str)
    assert isinstance(password, str)
    return password


def evaluate(
    conf: Settings, coro_factory: Callable[[Countersign], Coroutine[Any, Any, T]]
) -> T:
    """Build an instance from ``conf`` and run the coroutine it produces."""
    try:
        return asyncio.run(coro_factory(Countersign.from_settings(conf)))
    except exc.CountersignError as ex:
        logger.debug(ex, exc_info=ex)
        raise CLIError(str(ex)) from ex


def compose_table(result: Result) -> Table:
    table = Table(
        title="score %d/%d (min %d)"
        % (result.score, result.max_score, result.min_score),
        caption="PASSED" if result.success else "FAILED",
    )
    table.add_column("Test")
    table.add_column("Kind")
    table.add_column("Outcome")

    for kind, outcomes in (
        ("required", result.test_results.required),
        ("optional", result.test_results.optional),
    ):
        for name, success in sorted(outcomes.items()):
            table.add_row(
                name,
                kind,
                "[green]pass[/green]" if success else "[red]fail[/red]",
            )

    return table


def render(result: Result, as_json: bool) -> None:
    if as_json:
        click.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        Console().print(compose_table(result))


@click.command()
@password_argument
@click.option(
    "--min-score",
    type=click.IntRange(min=0),
    default=None,
    help="The score to reach. Defaults to the configured 'min_score'.",
)
@json_option
@click.pass_obj
def test(
    conf: Settings, password: str | None, min_score: int | None, as_json: bool
) -> None:
    """
    Test a password against the configured tests.

    Exits with status 0 if the password passes and 1 if it fails. The password is
    prompted for when omitted.
    """
    text = read_password(password)
    success, result = evaluate(
        conf,
        lambda cs: cs.test(
            text, conf.min_score if min_score is None else min_score
        ),
    )
    render(result, as_json)

    if not success:
        click.get_current_context().exit(1)


@click.command()
@password_argument
@json_option
@click.pass_obj
def score(conf: Settings, password: str | None, as_json: bool) -> None:
    """
    Score a password: count the configured tests it passes.

    The password is prompted for when omitted.
    """
    text = read_password(password)
    _, result = evaluate(conf, lambda cs: cs.score(text))
    render(result, as_json)
