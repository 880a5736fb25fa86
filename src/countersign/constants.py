BUILTIN_TESTS = (
    "length",
    "digits",
    "uppercase",
    "lowercase",
    "whitespace",
    "punctuation",
    "common",
)
COMMON_WORD_LIST = "common"
DEFAULT_MIN_SCORE = 0
