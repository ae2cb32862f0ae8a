# noqa: D401
"""Game orchestration: start a game, answer its questions, learn the answers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .client import SessionClient
from .errors import (
    GameStartFailed,
    GameStateError,
    HttpError,
    MalformedResponse,
    UnknownAnswer,
)
from .fingerprint import RANGE_HEADER, fingerprint
from .logging import get_logger
from .models import Game, GuessFeedback, Question, Suggestion
from .store import AnswerStore

logger = get_logger(__name__)

FACES_PATH = "faces/api"

ModelT = TypeVar("ModelT", bound=BaseModel)


class GameState(Enum):
    """Lifecycle of a game session; transitions only move forward."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class QuestionResult:
    """Outcome of one answered question."""

    index: int
    question_id: int
    fingerprint: int
    guessed: str
    correct: str
    cache_hit: bool
    is_correct: bool
    score: int


def _parse(model: Type[ModelT], response: httpx.Response) -> ModelT:
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise MalformedResponse(
            f"Unexpected {model.__name__} payload from {response.request.url}: {exc}"
        ) from exc


class GameSession:
    """Plays one game against the faces API.

    The answer store is consulted before every guess and updated with the
    answer the service declares correct, right or wrong.
    """

    def __init__(
        self,
        client: SessionClient,
        store: AnswerStore,
        training: bool = False,
        flush_each_question: bool = False,
        on_result: Optional[Callable[[QuestionResult], None]] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.training = training
        self.flush_each_question = flush_each_question
        self.on_result = on_result
        self.state = GameState.NOT_STARTED
        self.game: Optional[Game] = None
        self.question_index = 0

    def start_game(self) -> Game:
        if self.state is not GameState.NOT_STARTED:
            raise GameStateError(f"Cannot start a game from state {self.state.value}")

        path = f"{FACES_PATH}/games"
        payload: Dict[str, Any] = {}
        if self.training:
            path += "/training"
            payload = {"departmentIds": [], "establishmentIds": []}

        try:
            response = self.client.request("POST", path, json=payload)
        except HttpError as exc:
            self.state = GameState.FAILED
            raise GameStartFailed(exc.status, exc.url) from exc

        self.game = self._guarded(_parse, Game, response)
        self.state = GameState.IN_PROGRESS
        logger.info(
            "game_started",
            game_id=self.game.id,
            questions=self.game.nb_questions,
            training=self.training,
        )
        return self.game

    def play_question(self) -> int:
        """Answer the next question and return the score it earned."""

        game = self._require_in_progress()
        return self._guarded(self._play_question, game)

    def play_game(self) -> List[int]:
        """Answer every question of the started game, in order."""

        game = self._require_in_progress(need_question=False)
        scores: List[int] = []
        while self.question_index < game.nb_questions:
            scores.append(self.play_question())
        self.state = GameState.COMPLETED
        logger.info("game_completed", game_id=game.id, total=sum(scores))
        return scores

    def _require_in_progress(self, need_question: bool = True) -> Game:
        if self.state is not GameState.IN_PROGRESS or self.game is None:
            raise GameStateError(f"No game in progress (state {self.state.value})")
        if need_question and self.question_index >= self.game.nb_questions:
            raise GameStateError(f"Game {self.game.id} has no questions left")
        return self.game

    def _guarded(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except Exception:
            self.state = GameState.FAILED
            raise

    def _play_question(self, game: Game) -> int:
        response = self.client.request(
            "POST", f"{FACES_PATH}/games/{game.id}/questions/next", json={}
        )
        question = _parse(Question, response)

        image = self.client.request(
            "GET", question.image_url, headers={"Range": RANGE_HEADER}
        )
        key = fingerprint(image.content)

        remembered = self.store.get(key)
        if remembered is None:
            guess = question.suggestions[0]
        else:
            match = question.suggestion_named(remembered)
            if match is None:
                raise UnknownAnswer(key, remembered)
            guess = match

        feedback = self._submit(game, question, guess)
        correct = self._correct_suggestion(question, guess, feedback)
        self.store.put(key, correct.value)
        if self.flush_each_question:
            self.store.save()

        self.question_index += 1
        result = QuestionResult(
            index=self.question_index,
            question_id=question.id,
            fingerprint=key,
            guessed=guess.value,
            correct=correct.value,
            cache_hit=remembered is not None,
            is_correct=feedback.is_correct,
            score=feedback.score,
        )
        logger.info(
            "question_answered",
            game_id=game.id,
            index=result.index,
            fingerprint=key,
            cache_hit=result.cache_hit,
            is_correct=result.is_correct,
            score=result.score,
        )
        if self.on_result is not None:
            self.on_result(result)
        return feedback.score

    def _submit(self, game: Game, question: Question, guess: Suggestion) -> GuessFeedback:
        response = self.client.request(
            "POST",
            f"{FACES_PATH}/games/{game.id}/questions/{question.id}/guess",
            json={"questionId": question.id, "suggestionId": guess.id},
        )
        return _parse(GuessFeedback, response)

    @staticmethod
    def _correct_suggestion(
        question: Question, guess: Suggestion, feedback: GuessFeedback
    ) -> Suggestion:
        if feedback.is_correct:
            return guess
        correct = question.suggestion_by_id(feedback.correct_suggestion_id)
        if correct is None:
            raise MalformedResponse(
                f"Correct suggestion {feedback.correct_suggestion_id} "
                f"is not part of question {question.id}"
            )
        return correct


__all__ = ["FACES_PATH", "GameSession", "GameState", "QuestionResult"]
