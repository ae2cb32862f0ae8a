# noqa: D401
"""Wire models for the faces game API."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Game(_WireModel):
    """A started game and the number of questions it holds."""

    id: str
    nb_questions: int = Field(alias="nbQuestions", ge=0)


class Suggestion(_WireModel):
    id: int
    value: str


class Question(_WireModel):
    """One round: an image to recognise and four candidate names."""

    id: int
    image_url: str = Field(alias="imageUrl")
    suggestions: List[Suggestion] = Field(min_length=4, max_length=4)

    def suggestion_named(self, name: str) -> Optional[Suggestion]:
        for suggestion in self.suggestions:
            if suggestion.value == name:
                return suggestion
        return None

    def suggestion_by_id(self, suggestion_id: int) -> Optional[Suggestion]:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None


class GuessFeedback(_WireModel):
    """Service verdict for a submitted guess."""

    score: int
    is_correct: bool = Field(alias="isCorrect")
    correct_suggestion_id: int = Field(alias="correctSuggestionId")


__all__ = ["Game", "GuessFeedback", "Question", "Suggestion"]
