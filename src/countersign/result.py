from typing import Annotated

import annotated_types
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = ("Result", "Outcomes")

_model_config = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, frozen=True
)

Count = Annotated[int, annotated_types.Ge(0)]


class Outcomes(BaseModel):
    """Per-test outcomes, split by whether the test gates the verdict."""

    model_config = _model_config

    required: dict[str, bool] = Field(default_factory=dict)
    optional: dict[str, bool] = Field(default_factory=dict)


class Result(BaseModel):
    """
    The outcome of an evaluation.

    Attributes:
        success: Whether every required test passed and the score reached
            ``min_score``.
        score: The number of tests that passed.
        min_score: The score the evaluation was asked to reach.
        max_score: The number of tests that were evaluated.
        test_results: The outcome of each evaluated test.

    Dumping with ``by_alias=True`` yields camelCase keys (``minScore``,
    ``maxScore``, ``testResults``).
    """

    model_config = _model_config

    success: bool
    score: Count
    min_score: int
    max_score: Count
    test_results: Outcomes = Field(default_factory=Outcomes)
