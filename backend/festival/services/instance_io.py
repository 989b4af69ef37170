from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from festival.core.exceptions import InstanceFormatError
from festival.schemas.instance import FestivalInstance
from festival.services.incumbent import Improvement
from festival.services.schedule import ScheduleSnapshot

logger = logging.getLogger(__name__)

UNASSIGNED_ROOM = "-"


class _Tokens:
    def __init__(self, text: str) -> None:
        self._iter: Iterator[str] = iter(text.split())
        self.consumed = 0

    def next(self, what: str) -> str:
        try:
            token = next(self._iter)
        except StopIteration:
            raise InstanceFormatError(
                f"Unexpected end of input while reading {what}",
                details={"token_index": self.consumed},
            ) from None
        self.consumed += 1
        return token

    def count(self, what: str) -> int:
        token = self.next(what)
        try:
            value = int(token)
        except ValueError:
            raise InstanceFormatError(
                f"Expected an integer for {what}, got '{token}'",
                details={"token_index": self.consumed - 1},
            ) from None
        if value < 0:
            raise InstanceFormatError(f"{what} must be non-negative, got {value}")
        return value

    def names(self, amount: int, what: str) -> list[str]:
        return [self.next(what) for _ in range(amount)]


def parse_instance(text: str) -> FestivalInstance:
    """Parse ``n films, m pairs, r rooms`` in whitespace-delimited form."""
    tokens = _Tokens(text)
    films = tokens.names(tokens.count("film count"), "film names")
    pair_count = tokens.count("incompatible pair count")
    pairs = [(tokens.next("incompatible pairs"), tokens.next("incompatible pairs")) for _ in range(pair_count)]
    rooms = tokens.names(tokens.count("room count"), "room names")
    try:
        return FestivalInstance(films=films, incompatibilities=pairs, rooms=rooms)
    except ValidationError as exc:
        raise InstanceFormatError(
            "Invalid festival instance",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc


def read_instance(path: str | os.PathLike[str]) -> FestivalInstance:
    with open(path, "r", encoding="utf-8") as f:
        instance = parse_instance(f.read())
    logger.info(
        "Loaded instance path=%s films=%s pairs=%s rooms=%s",
        path,
        instance.film_count,
        len(instance.incompatibilities),
        instance.room_count,
    )
    return instance


def iter_assignments(
    groups: ScheduleSnapshot, films: list[str] | tuple[str, ...], rooms: list[str]
) -> Iterator[tuple[str, int, str]]:
    for day, group in enumerate(groups, start=1):
        for slot, item in enumerate(group):
            room = rooms[slot] if slot < len(rooms) else UNASSIGNED_ROOM
            yield films[item], day, room


def format_schedule(
    groups: ScheduleSnapshot,
    films: list[str] | tuple[str, ...],
    rooms: list[str],
    elapsed_seconds: float,
) -> str:
    lines = [f"{elapsed_seconds:.1f}", str(len(groups))]
    lines.extend(f"{film} {day} {room}" for film, day, room in iter_assignments(groups, films, rooms))
    return "\n".join(lines) + "\n"


class ScheduleFileWriter:
    """Overwrites ``path`` with every improving schedule it receives."""

    def __init__(self, path: str | os.PathLike[str], instance: FestivalInstance) -> None:
        self.path = Path(path)
        self.instance = instance
        self.writes = 0

    def __call__(self, improvement: Improvement) -> None:
        content = format_schedule(
            improvement.groups,
            self.instance.films,
            self.instance.rooms,
            improvement.elapsed_seconds,
        )
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        self.writes += 1
        logger.debug("Wrote schedule path=%s days=%s", self.path, improvement.days)
