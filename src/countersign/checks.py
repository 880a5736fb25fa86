"""
Built-in tests.

Each test takes the password and its setting and tells whether the password is
acceptable. The character-class tests accept a count (``digits: 2`` asks for two
digits); ``True`` asks for one.
"""

import re
import string

from . import constants
from .dictionary import WordListRepo
from .matcher import Charset, char_match, required_count
from .registry import TestFunction
from .settings import Setting

__all__ = (
    "PUNCTUATION",
    "WHITESPACE",
    "builtin_checks",
    "charset_check",
    "check_length",
    "common_check",
)

WHITESPACE = re.compile(r"\s")
PUNCTUATION = "".join(
    (
        "±!@£$%^&*()_+",  # shift + numbers
        "¡€#¢∞§¶•ªº–≠",  # alt + numbers
        "[];'\\,./",  # other symbols
        '{}:"|<>?',  # shift + other symbols
        "“‘…æ«≤≥÷",  # alt + other symbols
        "œ∑´®†¥¨^øπ“‘",  # alt + qwerty row
        "åß∂ƒ©˙∆˚¬…æ«",  # alt + asdfg row
        "`Ω≈ç√∫~µ≤≥÷",  # alt + zxcvb row
    )
)


def check_length(text: str, setting: Setting) -> bool:
    return len(text) >= required_count(setting)


def charset_check(charset: Charset) -> TestFunction:
    """
    Build a test requiring characters from ``charset``.

    A string charset is taken literally, so ``charset_check("._")`` counts full stops
    and underscores only.
    """

    def check(text: str, setting: Setting) -> bool:
        return char_match(text, setting, charset)

    return check


def common_check(
    word_lists: WordListRepo, list_name: str = constants.COMMON_WORD_LIST
) -> TestFunction:
    """Build a test that passes when the password is not in the named word list."""

    async def check(text: str, _: Setting) -> bool:
        return not await word_lists.is_common(text, list_name)

    return check


def builtin_checks(word_lists: WordListRepo) -> dict[str, TestFunction]:
    return {
        "length": check_length,
        "digits": charset_check(string.digits),
        "uppercase": charset_check(string.ascii_uppercase),
        "lowercase": charset_check(string.ascii_lowercase),
        "whitespace": charset_check(WHITESPACE),
        "punctuation": charset_check(PUNCTUATION),
        "common": common_check(word_lists),
    }
