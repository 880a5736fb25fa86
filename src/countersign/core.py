import logging
from collections.abc import Mapping
from dataclasses import KW_ONLY, InitVar, dataclass, field
from typing import Any, Self

from . import checks, constants
from ._conf import Settings
from .dictionary import WordListRepo
from .evaluator import Evaluator, MaxConcurrencyType
from .registry import TestRegistry
from .result import Result
from .settings import TestSettings

__all__ = ("Countersign",)

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass(slots=True)
class Countersign:
    """
    Password strength testing made simple.

    Example::

        cs = Countersign({"length": 8, "uppercase": True})
        cs.set_test("digits", 2).add_test(
            "not_passw0rd", lambda text, _: text != "passw0rd"
        )

        success, result = await cs.test("abc123", min_score=3)

    Args:
        tests: Initial test settings, merged over the defaults (every built-in test
            disabled).
        word_lists: Where the ``common`` test reads its word list from. Defaults to
            the lists bundled with the package.
        max_concurrency: The maximum number of tests of one evaluation running at the
            same time. Defaults to ``0``, which means no limit is set.
    """

    tests: InitVar[Mapping[str, Any] | None] = None
    _: KW_ONLY
    word_lists: WordListRepo = field(default_factory=WordListRepo.default)
    max_concurrency: InitVar[MaxConcurrencyType] = 0

    _settings: TestSettings = field(init=False, default_factory=TestSettings)
    _registry: TestRegistry = field(init=False, default_factory=TestRegistry)
    _evaluator: Evaluator = field(init=False)

    def __post_init__(
        self, tests: Mapping[str, Any] | None, max_concurrency: MaxConcurrencyType
    ) -> None:
        self._evaluator = Evaluator(max_concurrency=max_concurrency)

        if tests is not None:
            self.set_test(tests)

        for name, fn in checks.builtin_checks(self.word_lists).items():
            self.add_test(name, fn)

    @classmethod
    def from_settings(cls, conf: Settings) -> Self:
        logger.debug("building countersign from %r", conf)
        return cls(
            conf.tests,
            word_lists=(
                WordListRepo(base_dir=conf.dictionaries_dir)
                if conf.dictionaries_dir is not None
                else WordListRepo.default()
            ),
            max_concurrency=conf.max_concurrency,
        )

    @property
    def settings(self) -> TestSettings:
        return self._settings

    @property
    def registry(self) -> TestRegistry:
        return self._registry

    def set_test(self, p1: Mapping[str, Any] | str, p2: Any = _UNSET) -> Self:
        """
        Apply settings to tests.

        Usage::

            cs.set_test({"length": 10, "lowercase": True})
            cs.set_test("length", 10)

        Raises:
            InvalidSettingError: A value is neither a boolean nor a non-negative
                integer.
        """
        if isinstance(p1, Mapping) and p2 is _UNSET:
            self._settings.merge(p1)
        elif isinstance(p1, str) and p2 is not _UNSET:
            self._settings.set(p1, p2)
        else:
            raise TypeError(
                "set_test() expects either a mapping of settings, or a test name "
                "and a value"
            )

        return self

    def add_test(self, name: str, fn: Any) -> Self:
        """
        Add a custom test.

        The test is enabled (and required) unless a setting was already given for
        ``name``.

        Raises:
            DuplicateTestError: A test named ``name`` already exists.
            InvalidTestError: ``fn`` cannot be called with the password and the
                setting.
        """
        self._registry.add(name, fn)

        if name not in self._settings:
            self._settings.set(name, True)

        return self

    async def test(
        self, text: str, min_score: int = constants.DEFAULT_MIN_SCORE
    ) -> tuple[bool, Result]:
        """
        Test the password. It succeeds when every required test passes and the score
        reaches ``min_score``.

        Returns:
            The verdict and the full result.
        """
        result = await self._evaluator.run(
            self._settings, self._registry, text, min_score
        )
        return result.success, result

    async def score(self, text: str) -> tuple[int, Result]:
        """
        Score the password.

        Returns:
            The number of tests passed and the full result.
        """
        result = await self._evaluator.run(self._settings, self._registry, text, 0)
        return result.score, result
