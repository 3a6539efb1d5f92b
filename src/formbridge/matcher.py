"""Similarity-based suggestions for fields without an exact counterpart."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from formbridge.similarity import similarity
from formbridge.typing.models import FieldDescriptor

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_SIMILARITY_THRESHOLD = 0.7


class FieldSuggestion(BaseModel):
    """Candidate field scoring above the similarity threshold."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    candidate: FieldDescriptor
    score: float

    @property
    def percent(self) -> int:
        """Return the score as a percentage rounded half up."""
        return math.floor(self.score * 100 + 0.5)

    @property
    def text(self) -> str:
        """Return the user-facing suggestion line."""
        return f"Map to {self.candidate.name} ({self.percent}% match)"


def match_similar_fields(
    source: FieldDescriptor,
    candidates: Sequence[FieldDescriptor],
    *,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[FieldSuggestion]:
    """Return candidates whose name scores strictly above the threshold.

    Names are compared lower-cased. Results keep the order of `candidates`.

    Args:
        source (FieldDescriptor): Field looking for a counterpart.
        candidates (Sequence[FieldDescriptor]): Fields from the opposite set.
        threshold (float): Exclusive minimum score.

    Returns:
        list[FieldSuggestion]: Retained candidates with their scores.
    """
    source_name = source.name.lower()
    suggestions: list[FieldSuggestion] = []
    for candidate in candidates:
        score = similarity(source_name, candidate.name.lower())
        if score > threshold:
            suggestions.append(FieldSuggestion(candidate=candidate, score=score))
    return suggestions


def find_similar_fields(
    source: FieldDescriptor,
    candidates: Sequence[FieldDescriptor],
    *,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[str]:
    """Return suggestion lines such as ``Map to first_name (90% match)``.

    Args:
        source (FieldDescriptor): Field looking for a counterpart.
        candidates (Sequence[FieldDescriptor]): Fields from the opposite set.
        threshold (float): Exclusive minimum score.

    Returns:
        list[str]: One line per retained candidate, in candidate order.
    """
    return [suggestion.text for suggestion in match_similar_fields(source, candidates, threshold=threshold)]
