import logging
from collections import UserDict
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any

import annotated_types
import pydantic
from typing_extensions import override

from . import constants
from .exc import InvalidSettingError
from .util.model import convert_errors

__all__ = (
    "Setting",
    "SettingValue",
    "TestSettings",
    "is_enabled",
    "is_required",
    "validate_setting",
)

logger = logging.getLogger(__name__)

Setting = bool | int
"""
``False`` disables a test, ``True`` enables it with its default parameter and a
non-negative integer enables it with a count threshold.
"""

SettingValue = pydantic.StrictBool | Annotated[
    pydantic.StrictInt, annotated_types.Ge(0)
]

_setting_adapter: pydantic.TypeAdapter[Setting] = pydantic.TypeAdapter(SettingValue)


def validate_setting(name: str, value: Any) -> Setting:
    if not isinstance(name, str) or not name:
        raise InvalidSettingError(
            "Setting name must be a non-empty string, not {ctx[test_name]!r}",
            ctx=InvalidSettingError.Context(test_name=str(name), errors=[]),
        )

    try:
        return _setting_adapter.validate_python(value)
    except pydantic.ValidationError as ex:
        raise InvalidSettingError(
            "Invalid setting {ctx[test_name]!r}: expected a boolean or a non-negative "
            "integer",
            ctx=InvalidSettingError.Context(
                test_name=name, errors=convert_errors(ex)
            ),
        ) from ex


def is_enabled(setting: Setting) -> bool:
    """An enabled test is evaluated. Only ``False`` disables a test."""
    return setting is not False


def is_required(setting: Setting) -> bool:
    """A required test fails the whole evaluation when it fails."""
    return bool(setting)


@dataclass(slots=True)
class TestSettings(UserDict[str, Setting]):
    """
    Per-test settings, keyed by test name.

    Every built-in test starts disabled. Values are validated on every write, so the
    mapping only ever holds booleans and non-negative integers.
    """

    data: dict[str, Setting] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.data.update(dict.fromkeys(constants.BUILTIN_TESTS, False))

    @override
    def __setitem__(self, key: str, item: Any) -> None:
        self.data[key] = validate_setting(key, item)

    def merge(self, partial: Mapping[str, Any]) -> None:
        """
        Overwrite the given entries and leave the others untouched.

        The values are validated before anything is written, so an invalid value
        rejects the whole merge.
        """
        validated = {
            name: validate_setting(name, value) for name, value in partial.items()
        }
        self.data.update(validated)
        logger.debug("merged settings %r", validated)

    def set(self, name: str, value: Any) -> None:
        self[name] = value
        logger.debug("set %r to %r", name, self.data[name])

    def enabled(self) -> dict[str, Setting]:
        return {name: value for name, value in self.data.items() if is_enabled(value)}
