import asyncio

import pytest

from countersign import Evaluator, registry, settings
from countersign.exc import InvalidInputError, UnknownTestError


class Boom(Exception):
    pass


@pytest.fixture
def model() -> settings.TestSettings:
    return settings.TestSettings()


@pytest.fixture
def reg() -> registry.TestRegistry:
    return registry.TestRegistry()


def passes(text, setting):
    return True


def fails(text, setting):
    return False


@pytest.mark.asyncio
async def test_no_enabled_tests(model, reg):
    result = await Evaluator().run(model, reg, "whatever", 0)

    assert result.success is True
    assert (result.score, result.max_score) == (0, 0)
    assert result.test_results.required == {}
    assert result.test_results.optional == {}

    result = await Evaluator().run(model, reg, "whatever", 1)

    assert result.success is False


@pytest.mark.asyncio
async def test_aggregation(model, reg):
    reg.add("a", passes)
    reg.add("b", fails)
    reg.add("c", passes)
    model.merge({"a": True, "b": 0, "c": 2})

    result = await Evaluator().run(model, reg, "secret", 2)

    assert result.success is True
    assert result.score == 2
    assert result.min_score == 2
    assert result.max_score == 3
    assert result.test_results.required == {"a": True, "c": True}
    assert result.test_results.optional == {"b": False}


@pytest.mark.asyncio
async def test_failed_required_test_fails_the_verdict(model, reg):
    reg.add("a", passes)
    reg.add("b", fails)
    model.merge({"a": True, "b": True})

    result = await Evaluator().run(model, reg, "secret", 0)

    assert result.success is False
    assert result.score == 1


@pytest.mark.asyncio
async def test_score_below_minimum_fails_the_verdict(model, reg):
    reg.add("a", passes)
    model.set("a", True)

    result = await Evaluator().run(model, reg, "secret", 2)

    assert result.success is False
    assert result.test_results.required == {"a": True}


@pytest.mark.asyncio
async def test_tests_receive_the_input_and_their_setting(model, reg):
    seen = {}

    def spy(text, setting):
        seen[text] = setting
        return True

    reg.add("spy", spy)
    model.set("spy", 4)

    await Evaluator().run(model, reg, "secret", 0)

    assert seen == {"secret": 4}


@pytest.mark.asyncio
async def test_truthy_values_are_coerced(model, reg):
    reg.add("one", lambda text, setting: 1)
    reg.add("empty", lambda text, setting: "")
    model.merge({"one": True, "empty": 0})

    result = await Evaluator().run(model, reg, "secret", 0)

    assert result.test_results.required == {"one": True}
    assert result.test_results.optional == {"empty": False}


@pytest.mark.parametrize("text", [None, b"secret", 123, ["secret"]])
@pytest.mark.asyncio
async def test_input_must_be_a_string(model, reg, text):
    with pytest.raises(InvalidInputError) as info:
        await Evaluator().run(model, reg, text, 0)

    assert info.value.ctx["input_type"] == type(text).__name__


@pytest.mark.asyncio
async def test_unknown_enabled_test(model, reg):
    calls = []
    reg.add("known", lambda text, setting: calls.append(text) or True)
    model.merge({"known": True, "ghost": True})

    with pytest.raises(UnknownTestError) as info:
        await Evaluator().run(model, reg, "secret", 0)

    assert info.value.ctx["test_name"] == "ghost"
    assert calls == []


@pytest.mark.asyncio
async def test_unknown_disabled_test_is_ignored(model, reg):
    model.set("ghost", False)

    result = await Evaluator().run(model, reg, "secret", 0)

    assert result.max_score == 0


@pytest.mark.asyncio
async def test_failure_aborts_the_evaluation(model, reg):
    error = Boom("dictionary unavailable")

    async def broken(text, setting):
        raise error

    reg.add("ok", passes)
    reg.add("broken", broken)
    model.merge({"ok": True, "broken": True})

    with pytest.raises(Boom) as info:
        await Evaluator().run(model, reg, "secret", 0)

    assert info.value is error


@pytest.mark.asyncio
async def test_synchronous_failure_aborts_the_evaluation(model, reg):
    def broken(text, setting):
        raise Boom()

    reg.add("broken", broken)
    model.set("broken", 0)

    with pytest.raises(Boom):
        await Evaluator().run(model, reg, "secret", 0)


@pytest.mark.asyncio
async def test_failure_cancels_pending_tests(model, reg):
    cancelled = asyncio.Event()

    async def slow(text, setting):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return True

    async def broken(text, setting):
        await asyncio.sleep(0)
        raise Boom()

    reg.add("slow", slow)
    reg.add("broken", broken)
    model.merge({"slow": True, "broken": True})

    async with asyncio.timeout(5):
        with pytest.raises(Boom):
            await Evaluator().run(model, reg, "secret", 0)

    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_tests_run_concurrently(model, reg):
    first, second = asyncio.Event(), asyncio.Event()

    async def ping(text, setting):
        first.set()
        await second.wait()
        return True

    async def pong(text, setting):
        await first.wait()
        second.set()
        return True

    reg.add("ping", ping)
    reg.add("pong", pong)
    model.merge({"ping": True, "pong": True})

    async with asyncio.timeout(5):
        result = await Evaluator().run(model, reg, "secret", 2)

    assert result.success is True


@pytest.mark.asyncio
async def test_max_concurrency(model, reg):
    running, peak = 0, 0

    async def tracked(text, setting):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return True

    for name in ("a", "b", "c", "d"):
        reg.add(name, tracked)
        model.set(name, True)

    result = await Evaluator(max_concurrency=2).run(model, reg, "secret", 0)

    assert result.score == 4
    assert peak == 2


@pytest.mark.asyncio
async def test_changes_during_an_evaluation_do_not_apply_to_it(model, reg):
    async def meddling(text, setting):
        await asyncio.sleep(0)
        model.set("late", True)
        return True

    reg.add("meddling", meddling)
    reg.add("late", fails)
    model.set("meddling", True)

    result = await Evaluator().run(model, reg, "secret", 0)

    assert result.test_results.required == {"meddling": True}
    assert model["late"] is True


@pytest.mark.asyncio
async def test_repeated_evaluations_are_identical(model, reg):
    reg.add("a", passes)
    reg.add("b", fails)
    model.merge({"a": 3, "b": 0})
    evaluator = Evaluator()

    first = await evaluator.run(model, reg, "secret", 1)
    second = await evaluator.run(model, reg, "secret", 1)

    assert first == second
