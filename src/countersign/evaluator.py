import asyncio
import logging
from dataclasses import dataclass
from typing import Annotated, Any

import annotated_types

from .exc import InvalidInputError, NamedTestContext, UnknownTestError
from .registry import TestFunction, TestRegistry
from .result import Outcomes, Result
from .settings import Setting, TestSettings, is_required
from .util.coro import (
    BoundlessSemaphore,
    create_task_limited,
    first_exception,
    resolve,
)

__all__ = ("Evaluator", "MaxConcurrencyType")

MaxConcurrencyType = Annotated[int, annotated_types.Ge(0)]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Evaluator:
    """
    Runs every enabled test against a password and aggregates the outcomes.

    The tests of one evaluation run concurrently within a task group. If one of them
    raises, the others are cancelled and the error is re-raised as is: there is no
    partial result.

    Attributes:
        max_concurrency: The maximum number of tests running at the same time.
            Defaults to ``0``, which means no limit is set.
    """

    max_concurrency: MaxConcurrencyType = 0

    async def run(
        self,
        settings: TestSettings,
        registry: TestRegistry,
        text: Any,
        min_score: int,
    ) -> Result:
        """
        Evaluate ``text``.

        The settings and the registry are copied before any test is scheduled, so
        changing them while the evaluation is in flight has no effect on it.

        Raises:
            InvalidInputError: ``text`` is not a string.
            UnknownTestError: An enabled setting has no registered test.
        """
        if not isinstance(text, str):
            raise InvalidInputError(
                "Test input must be a string, not {ctx[input_type]!r}",
                ctx=InvalidInputError.Context(input_type=type(text).__name__),
            )

        enabled, tests = settings.enabled(), registry.snapshot()

        for name in enabled:
            if name not in tests:
                raise UnknownTestError(
                    "Invalid setting {ctx[test_name]!r} specified, there is no such "
                    "test",
                    ctx=NamedTestContext(test_name=name),
                )

        logger.debug("evaluating tests %r", tuple(enabled))

        sem = (
            asyncio.BoundedSemaphore(self.max_concurrency)
            if self.max_concurrency > 0
            else BoundlessSemaphore()
        )
        tasks: dict[str, asyncio.Task[bool]] = {}
        failure: BaseException | None = None

        try:
            async with asyncio.TaskGroup() as tg:
                for name, setting in enabled.items():
                    tasks[name] = await create_task_limited(
                        tg, sem, self._run_test(name, tests[name], text, setting)
                    )
        except ExceptionGroup as ex:
            failure = first_exception(ex)

        if failure is not None:
            logger.debug("evaluation aborted: %r", failure)
            raise failure

        result = self._aggregate(
            {
                name: (setting, tasks[name].result())
                for name, setting in enabled.items()
            },
            min_score,
        )
        logger.debug(
            "evaluation finished with score %d/%d (success=%r)",
            result.score,
            result.max_score,
            result.success,
        )
        return result

    @staticmethod
    async def _run_test(
        name: str, fn: TestFunction, text: str, setting: Setting
    ) -> bool:
        success = bool(await resolve(fn(text, setting)))
        logger.debug("test %r %s", name, "passed" if success else "failed")
        return success

    @staticmethod
    def _aggregate(
        outcomes: dict[str, tuple[Setting, bool]], min_score: int
    ) -> Result:
        required: dict[str, bool] = {}
        optional: dict[str, bool] = {}
        score = 0

        for name, (setting, success) in outcomes.items():
            if is_required(setting):
                required[name] = success
            else:
                optional[name] = success

            if success:
                score += 1

        return Result(
            success=all(required.values()) and score >= min_score,
            score=score,
            min_score=min_score,
            max_score=len(outcomes),
            test_results=Outcomes(required=required, optional=optional),
        )
