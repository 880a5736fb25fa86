import functools
import re

from .settings import Setting

__all__ = ("Charset", "char_match", "compile_charset", "count_chars", "required_count")

Charset = str | re.Pattern[str]


def required_count(setting: Setting) -> int:
    """
    Return the count threshold carried by a setting.

    Only an integer setting carries a count. ``True`` (and ``False``, for tests run
    as optional) stands for the default threshold of 1.
    """
    if isinstance(setting, int) and not isinstance(setting, bool):
        return setting
    return 1


@functools.lru_cache(maxsize=128)
def compile_charset(chars: str) -> re.Pattern[str]:
    """
    Compile a literal set of characters into a single-character pattern.

    Every character is escaped, so ``"a-z"`` is the three characters ``a``, ``-`` and
    ``z`` rather than a range, and ``"."`` matches a full stop only.
    """
    return re.compile("[" + "".join(map(re.escape, chars)) + "]")


def count_chars(text: str, charset: Charset) -> int:
    """Count the characters of ``text`` that belong to ``charset``."""
    if not isinstance(charset, re.Pattern):
        if not charset:
            return 0
        charset = compile_charset(charset)
    return sum(1 for _ in charset.finditer(text))


def char_match(text: str, setting: Setting, charset: Charset) -> bool:
    """
    Check that ``text`` holds at least as many characters from ``charset`` as the
    setting requires.

    Characters are counted with repetition and regardless of their position, so
    ``char_match("a1b1", 2, "0123456789")`` is true.

    Args:
        text: The password.
        setting: The test setting. An integer is the required count; any other value
            requires a single character.
        charset: Either a string, whose characters are taken literally, or a
            compiled pattern matching exactly one character (e.g. ``re.compile(r"\\s")``).

    Returns:
        Whether the required count is reached. A count of 0 is always reached.
    """
    if (count := required_count(setting)) <= 0:
        return True
    return count_chars(text, charset) >= count
