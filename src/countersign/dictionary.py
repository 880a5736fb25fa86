import asyncio
import logging
import pathlib
import re
from dataclasses import dataclass, field
from typing import Self

import pydantic

from .exc import DictionaryLoadError, DictionaryParseError
from .util.model import convert_errors

__all__ = ("DEFAULT_DICTIONARIES_DIR", "WordListRepo")

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARIES_DIR = pathlib.Path(__file__).with_name("dictionaries")
WORD_LIST_NAME = re.compile(r"[A-Za-z0-9_-]+")

_word_list_adapter = pydantic.TypeAdapter(list[str])


@dataclass(slots=True)
class WordListRepo:
    """
    Loads named word lists from a directory of JSON files.

    A word list named ``common`` is read from ``<base_dir>/common.json``, which must
    hold a JSON array of strings. Lists are cached once loaded; failed loads are
    retried on the next call.

    Example::

        repo = WordListRepo.default()

        assert await repo.is_common("password", "common")
    """

    base_dir: pathlib.Path
    _cache: dict[str, frozenset[str]] = field(init=False, default_factory=dict)

    @classmethod
    def default(cls) -> Self:
        """Return a repo backed by the word lists bundled with the package."""
        return cls(base_dir=DEFAULT_DICTIONARIES_DIR)

    def build_path(self, name: str) -> pathlib.Path:
        return self.base_dir / f"{name}.json"

    def load(self, name: str) -> frozenset[str]:
        """
        Read a word list.

        Raises:
            DictionaryLoadError: The name is not a plain identifier, or the file is
                missing or unreadable.
            DictionaryParseError: The file is not a JSON array of strings.
        """
        if not WORD_LIST_NAME.fullmatch(name):
            raise DictionaryLoadError(
                "the name may only contain letters, digits, '-' and '_'",
                ctx=DictionaryLoadError.Context(name=name, path=self.base_dir),
            )

        if (words := self._cache.get(name)) is not None:
            logger.debug("word list %r served from cache", name)
            return words

        path = self.build_path(name)

        try:
            raw = path.read_bytes()
        except OSError as ex:
            raise DictionaryLoadError(
                str(ex), ctx=DictionaryLoadError.Context(name=name, path=path)
            ) from ex

        try:
            words = frozenset(_word_list_adapter.validate_json(raw))
        except pydantic.ValidationError as ex:
            raise DictionaryParseError(
                str(convert_errors(ex)),
                ctx=DictionaryParseError.Context(name=name, path=path),
            ) from ex

        logger.debug("loaded word list %r (%d words) from %s", name, len(words), path)
        self._cache[name] = words
        return words

    async def is_common(self, text: str, name: str) -> bool:
        """
        Check whether ``text`` is one of the words of the named list.

        The comparison is exact and case-sensitive. The list is read in a worker
        thread so that other tests of the same evaluation keep running.
        """
        words = await asyncio.to_thread(self.load, name)
        return text in words
