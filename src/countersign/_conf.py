import pathlib
from typing import Annotated

import annotated_types
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .evaluator import MaxConcurrencyType

# Lax: environment variables only carry strings, e.g.
# COUNTERSIGN_TESTS__DIGITS=2. The strict check happens in TestSettings.
ConfiguredSetting = Annotated[int, annotated_types.Ge(0)] | bool


class Settings(BaseSettings):
    """
    Configuration of a :class:`~countersign.Countersign` instance.

    Values are read from the keyword arguments (e.g. a parsed YAML file) and from
    ``COUNTERSIGN_*`` environment variables, the latter taking precedence. Nested
    values use ``__`` as the delimiter, so ``COUNTERSIGN_TESTS__LENGTH=12`` sets the
    ``length`` test to 12.
    """

    model_config = SettingsConfigDict(
        env_prefix="COUNTERSIGN_",
        env_nested_delimiter="__",
        extra="forbid",
        validate_default=False,
    )

    tests: dict[str, ConfiguredSetting] = Field(default_factory=dict)
    min_score: Annotated[int, annotated_types.Ge(0)] = 0
    dictionaries_dir: pathlib.Path | None = None
    max_concurrency: MaxConcurrencyType = 0

    @classmethod
    def settings_customise_sources(
        cls,
        _: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, file_secret_settings, init_settings
