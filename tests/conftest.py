import json
import pathlib

import pytest

from countersign import Countersign, WordListRepo


@pytest.fixture
def dictionaries_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """A word list directory holding a small ``common`` list."""
    path = tmp_path / "dictionaries"
    path.mkdir()
    (path / "common.json").write_text(json.dumps(["123456", "password"]))
    return path


@pytest.fixture
def word_lists(dictionaries_dir: pathlib.Path) -> WordListRepo:
    return WordListRepo(base_dir=dictionaries_dir)


@pytest.fixture
def make_countersign(word_lists: WordListRepo):
    """Build instances reading the ``common`` list from ``dictionaries_dir``."""

    def factory(tests=None, **kwargs) -> Countersign:
        return Countersign(tests, word_lists=word_lists, **kwargs)

    return factory
