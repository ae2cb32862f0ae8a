# noqa: D104
"""Pytest fixtures: an in-memory faces portal served through httpx.MockTransport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import httpx
import pytest

from faces_player.client import SessionClient
from faces_player.store import AnswerStore

BASE_URL = "https://portal.test"
GAME_ID = "game-42"
TOKEN = "csrf-token-123"
SESSION_COOKIE = "portal-session"

LOGIN_PAGE = f"""
<html>
  <body>
    <form method="post" action="/identity/login">
      <input type="text" name="UserName" />
      <input type="password" name="Password" />
      <input name="__RequestVerificationToken" type="hidden" value="{TOKEN}" />
    </form>
  </body>
</html>
"""


@dataclass
class FakeQuestion:
    """A question the fake portal will serve, with its hidden answer."""

    id: int
    names: List[str]
    correct_index: int
    image: bytes

    def payload(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "imageUrl": f"/images/{self.id}.jpg",
            "suggestions": [
                {"id": self.id * 10 + index, "value": name}
                for index, name in enumerate(self.names)
            ],
        }

    @property
    def correct_id(self) -> int:
        return self.id * 10 + self.correct_index


def make_question(qid: int, names: List[str], correct_index: int) -> FakeQuestion:
    # Images longer than the fingerprint window; only the head differs
    image = f"JFIF-{qid}-".encode() + bytes(range(256)) * 8
    return FakeQuestion(id=qid, names=names, correct_index=correct_index, image=image)


@dataclass
class FakePortal:
    """Minimal stand-in for the portal and its faces API."""

    questions: List[FakeQuestion]
    login_page: str = LOGIN_PAGE
    login_status: int = 200
    game_status: int = 200
    nb_questions: Optional[int] = None
    requests: List[httpx.Request] = field(default_factory=list)
    guesses: List[Dict[str, int]] = field(default_factory=list)
    _cursor: int = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [
            request.url.path
            for request in self.requests
            if method is None or request.method == method
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/identity/login":
            if request.method == "GET":
                return httpx.Response(200, text=self.login_page)
            if self.login_status != 200:
                return httpx.Response(self.login_status, text="denied")
            return httpx.Response(
                200,
                text="welcome",
                headers={"Set-Cookie": f"session={SESSION_COOKIE}; Path=/"},
            )

        if f"session={SESSION_COOKIE}" not in request.headers.get("cookie", ""):
            return httpx.Response(401, json={"error": "not logged in"})

        if path in ("/faces/api/games", "/faces/api/games/training"):
            if self.game_status != 200:
                return httpx.Response(self.game_status, json={"error": "nope"})
            total = len(self.questions) if self.nb_questions is None else self.nb_questions
            return httpx.Response(200, json={"id": GAME_ID, "nbQuestions": total})

        if path == f"/faces/api/games/{GAME_ID}/questions/next":
            question = self.questions[self._cursor]
            self._cursor += 1
            return httpx.Response(200, json=question.payload())

        if path.startswith("/images/"):
            qid = int(path.rsplit("/", 1)[1].split(".")[0])
            image = self._question(qid).image
            if request.headers.get("range") == "bytes=0-1023":
                return httpx.Response(206, content=image[:1024])
            return httpx.Response(200, content=image)

        if path.endswith("/guess"):
            body = json.loads(request.content)
            self.guesses.append(body)
            question = self._question(body["questionId"])
            is_correct = body["suggestionId"] == question.correct_id
            return httpx.Response(
                200,
                json={
                    "score": 10 if is_correct else 0,
                    "isCorrect": is_correct,
                    "correctSuggestionId": question.correct_id,
                },
            )

        return httpx.Response(404)

    def _question(self, qid: int) -> FakeQuestion:
        for question in self.questions:
            if question.id == qid:
                return question
        raise KeyError(qid)


@pytest.fixture
def questions() -> List[FakeQuestion]:
    return [
        make_question(1, ["Ada Lovelace", "Alan Turing", "Grace Hopper", "Edsger Dijkstra"], 2),
        make_question(2, ["Linus Torvalds", "Guido van Rossum", "Ken Thompson", "Dennis Ritchie"], 1),
        make_question(3, ["Barbara Liskov", "Donald Knuth", "John McCarthy", "Frances Allen"], 0),
    ]


@pytest.fixture
def portal(questions: List[FakeQuestion]) -> FakePortal:
    return FakePortal(questions=questions)


@pytest.fixture
def client(portal: FakePortal):
    with SessionClient(BASE_URL, transport=portal.transport) as session_client:
        yield session_client


@pytest.fixture
def logged_in_client(client: SessionClient) -> SessionClient:
    client.authenticate("ada@example.com", "hunter2")
    return client


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def store(store_path: Path) -> AnswerStore:
    return AnswerStore.load(store_path)
