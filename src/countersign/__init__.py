__all__ = (
    "exc",
    "Countersign",
    "Evaluator",
    "Outcomes",
    "Result",
    "Settings",
    "WordListRepo",
    "char_match",
    "charset_check",
)
__version__ = "0.1.0"

from . import exc
from ._conf import Settings
from .checks import charset_check
from .core import Countersign
from .dictionary import WordListRepo
from .evaluator import Evaluator
from .matcher import char_match
from .result import Outcomes, Result
