import pytest

from countersign import registry
from countersign.exc import DuplicateTestError, InvalidTestError


def always(text, setting):
    return True


async def always_async(text, setting):
    return True


@pytest.fixture
def reg() -> registry.TestRegistry:
    return registry.TestRegistry()


def test_add(reg):
    reg.add("always", always)

    assert reg.snapshot() == {"always": always}


def test_async_functions_are_accepted(reg):
    reg.add("always", always_async)

    assert reg.snapshot()["always"] is always_async


@pytest.mark.parametrize(
    "fn",
    [
        lambda text, setting, extra=None: True,
        lambda *args: True,
        lambda text, *rest: True,
    ],
)
def test_flexible_signatures_are_accepted(reg, fn):
    reg.add("flexible", fn)


def test_duplicate_name(reg):
    reg.add("always", always)

    with pytest.raises(DuplicateTestError) as info:
        reg.add("always", always_async)

    assert info.value.ctx["test_name"] == "always"
    assert str(info.value) == "Test 'always' is already present"
    assert reg.snapshot()["always"] is always


def test_not_callable(reg):
    with pytest.raises(InvalidTestError) as info:
        reg.add("broken", "not a function")

    assert info.value.ctx["test_name"] == "broken"
    assert info.value.ctx["reason"] == "str is not callable"
    assert "broken" not in reg.snapshot()


@pytest.mark.parametrize(
    "fn",
    [
        lambda: True,
        lambda text: True,
        lambda text, setting, finish: True,
        lambda *, text, setting: True,
    ],
)
def test_wrong_shape(reg, fn):
    with pytest.raises(InvalidTestError, match="must accept the password"):
        reg.add("broken", fn)


@pytest.mark.parametrize("name", ["", None, 3])
def test_invalid_name(reg, name):
    with pytest.raises(InvalidTestError):
        reg.add(name, always)


def test_snapshot_is_independent(reg):
    reg.add("always", always)
    snapshot = reg.snapshot()

    reg.add("later", always)

    assert list(snapshot) == ["always"]
    assert list(reg.snapshot()) == ["always", "later"]
