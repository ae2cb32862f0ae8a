# noqa: D401
"""Persistent fingerprint → answer table."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from .errors import StorageCorrupt, StorageWriteError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_STORE_PATH = Path("data")


def _parse_table(raw: str, path: Path) -> Dict[int, str]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageCorrupt(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise StorageCorrupt(f"{path} must hold a JSON object, got {type(payload).__name__}")

    table: Dict[int, str] = {}
    for key, value in payload.items():
        if not (key.isascii() and key.isdigit()) or not isinstance(value, str):
            raise StorageCorrupt(f"{path} has an invalid entry {key!r}: {value!r}")
        table[int(key)] = value
    return table


class AnswerStore:
    """In-memory answer table bound to a file on disk.

    The table is read once with :meth:`load`, mutated with :meth:`put` while a
    game runs and written back in full with :meth:`save`.
    """

    def __init__(
        self,
        path: Union[str, Path] = DEFAULT_STORE_PATH,
        answers: Optional[Dict[int, str]] = None,
    ) -> None:
        self.path = Path(path)
        self._answers: Dict[int, str] = dict(answers or {})
        self.dirty = False

    @classmethod
    def load(cls, path: Union[str, Path] = DEFAULT_STORE_PATH) -> "AnswerStore":
        """Read the table at ``path``; a missing file yields an empty store."""

        store = cls(path)
        store.reload()
        return store

    def reload(self) -> None:
        """Replace the in-memory table with the file contents."""

        if not self.path.exists():
            self._answers = {}
        else:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise StorageCorrupt(f"Cannot read {self.path}: {exc}") from exc
            self._answers = _parse_table(raw, self.path)
        self.dirty = False
        logger.debug("answer_store_loaded", path=str(self.path), entries=len(self._answers))

    def get(self, fingerprint: int) -> Optional[str]:
        return self._answers.get(fingerprint)

    def put(self, fingerprint: int, name: str) -> None:
        if self._answers.get(fingerprint) != name:
            self._answers[fingerprint] = name
            self.dirty = True

    def save(self) -> None:
        """Write the whole table, replacing the file atomically."""

        payload = {str(key): value for key, value in self._answers.items()}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageWriteError(f"Cannot write {self.path}: {exc}") from exc
        self.dirty = False
        logger.info("answer_store_saved", path=str(self.path), entries=len(self._answers))

    def items(self) -> Iterator[Tuple[int, str]]:
        return iter(self._answers.items())

    def __len__(self) -> int:
        return len(self._answers)

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._answers


__all__ = ["DEFAULT_STORE_PATH", "AnswerStore"]
