import asyncio
import functools
import inspect
from collections.abc import Awaitable, Coroutine
from typing import Any, Literal, TypeVar

from typing_extensions import override

__all__ = (
    "create_task_limited",
    "resolve",
    "first_exception",
    "BoundlessSemaphore",
)

T = TypeVar("T")


def _release_sem(_: asyncio.Task[Any], *, sem: asyncio.Semaphore) -> None:
    sem.release()


async def create_task_limited(
    tg: asyncio.TaskGroup, sem: asyncio.Semaphore, coro: Coroutine[Any, Any, T]
) -> asyncio.Task[T]:
    """
    Create a task in the task group once the semaphore lets it through.

    The semaphore is released as soon as the task is done, whatever its outcome.

    Args:
        tg: Task group to create the task in.
        sem: Semaphore to acquire before creating the task.
        coro: Coroutine to run as the task.

    Returns:
        The created task. The caller keeps the reference to collect its result once
        the task group has exited.
    """
    _ = await sem.acquire()
    task = tg.create_task(coro)
    task.add_done_callback(functools.partial(_release_sem, sem=sem))
    return task


async def resolve(value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


def first_exception(ex: BaseException) -> BaseException:
    """
    Return the first leaf exception of a (possibly nested) exception group.

    Task groups wrap the errors of their children, but callers expect the error
    raised by the failing unit itself.
    """
    while isinstance(ex, BaseExceptionGroup):
        ex = ex.exceptions[0]
    return ex


class BoundlessSemaphore(asyncio.Semaphore):
    @override
    def locked(self) -> bool:
        return False

    @override
    async def acquire(self) -> Literal[True]:
        return True

    @override
    def release(self) -> None:
        return
