"""Command-line entry point for playing faces games."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console

from .client import SessionClient
from .config import Settings, StoreSettings, get_settings
from .errors import FacesPlayerError, StorageWriteError
from .game import GameSession, QuestionResult
from .logging import configure_logging, get_logger
from .store import AnswerStore

console = Console()
app = typer.Typer(help="Play the faces quiz and remember every answer.")
logger = get_logger(__name__)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        fields = ", ".join(
            "LUCCA_" + ".".join(str(part) for part in error["loc"]).upper() for error in exc.errors()
        )
        console.print(f"[red]Invalid configuration:[/] check {fields}")
        raise typer.Exit(1) from exc


def _print_result(result: QuestionResult) -> None:
    style = "green" if result.is_correct else "yellow"
    console.print(f"[{style}]Scored {result.score} at question {result.index}[/]")


@app.command()
def play(
    training: Optional[bool] = typer.Option(
        None,
        "--training/--no-training",
        help="Start a training game instead of a scored one (default: LUCCA_LEARNING).",
    ),
    store_path: Optional[Path] = typer.Option(
        None,
        "--store",
        "-s",
        help="Answer table location (default: LUCCA_STORE_PATH).",
    ),
    flush_each_question: Optional[bool] = typer.Option(
        None,
        "--flush-each-question/--flush-at-end",
        help="Write the answer table after every question.",
    ),
) -> None:
    """Log in, play one full game and save what was learned."""

    settings = _load_settings()
    configure_logging(settings.log_level)

    training = settings.learning if training is None else training
    if flush_each_question is None:
        flush_each_question = settings.flush_each_question
    if training:
        console.print("[cyan]Starting in learning mode")

    try:
        store = AnswerStore.load(store_path or settings.store_path)
        with SessionClient(settings.url, timeout=settings.timeout) as client:
            client.authenticate(settings.email, settings.password.get_secret_value())
            session = GameSession(
                client,
                store,
                training=training,
                flush_each_question=flush_each_question,
                on_result=_print_result,
            )
            session.start_game()
            scores = session.play_game()
    except (FacesPlayerError, httpx.RequestError) as exc:
        logger.error("run_aborted", error=str(exc), error_type=type(exc).__name__)
        console.print(f"{type(exc).__name__}: {exc}", style="red", markup=False)
        raise typer.Exit(1) from exc

    console.print(f"[bold]Total score: {sum(scores)}")

    if not store.dirty:
        return
    try:
        store.save()
    except StorageWriteError as exc:
        logger.error("answer_store_save_failed", error=str(exc))
        console.print(f"Scores stand, but answers were not saved: {exc}", style="red", markup=False)
        raise typer.Exit(1) from exc


@app.command()
def stats(
    store_path: Optional[Path] = typer.Option(
        None,
        "--store",
        "-s",
        help="Answer table location (default: LUCCA_STORE_PATH).",
    ),
) -> None:
    """Show how many answers have been learned so far."""

    try:
        path = store_path or StoreSettings().store_path
        store = AnswerStore.load(path)
    except ValidationError as exc:
        console.print(f"Invalid configuration: {exc}", style="red", markup=False)
        raise typer.Exit(1) from exc
    except FacesPlayerError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(1) from exc
    console.print(f"{len(store)} answers remembered in {path}")

