from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from festival.services.conflict_model import ConflictModel
from festival.services.incumbent import Incumbent
from festival.services.schedule import Schedule

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """One film awaiting a day; ``next_day == day_count`` means a new day is next."""

    position: int
    day_count: int
    next_day: int = 0
    placed: int | None = None


class ExhaustiveSearch:
    """Branch and bound over every feasible placement, films taken most constrained first.

    A branch is cut as soon as it uses as many days as the incumbent, since
    placing more films can never reduce the day count. Each existing day is
    tried in order before the film opens a day of its own. Pending films sit
    on an explicit stack, so the depth is bounded by memory, not recursion.
    """

    def __init__(self, model: ConflictModel, capacity: int, incumbent: Incumbent) -> None:
        self.model = model
        self.capacity = capacity
        self.incumbent = incumbent
        self.order = model.degree_order()
        self.nodes = 0
        film_count = len(model)
        if film_count == 0:
            self.lower_bound = 0
        elif capacity <= 0:
            self.lower_bound = film_count
        else:
            self.lower_bound = math.ceil(film_count / capacity)
        self.schedule = Schedule(capacity)
        self.frames: list[_Frame] = []

    def run(self) -> Schedule | None:
        try:
            self._search()
        finally:
            self._unwind()
        logger.info(
            "Exhaustive search finished films=%s nodes=%s best_days=%s",
            len(self.model),
            self.nodes,
            self.incumbent.best.days if self.incumbent.best else None,
        )
        best = self.incumbent.best
        if best is None:
            return None
        return Schedule(self.capacity, best.groups)

    def _finished(self) -> bool:
        return self.incumbent.best is not None and self.incumbent.bound <= self.lower_bound

    def _enter(self, position: int) -> None:
        self.nodes += 1
        if not self.incumbent.improves(self.schedule.day_count):
            return
        if position == len(self.order):
            self.incumbent.offer(self.schedule)
            return
        self.frames.append(_Frame(position, len(self.schedule)))

    def _undo(self, frame: _Frame) -> None:
        if frame.placed is None:
            return
        if frame.placed == frame.day_count:
            self.schedule.close_last_group()
        else:
            self.schedule.remove(frame.placed, self.order[frame.position])
        frame.placed = None

    def _unwind(self) -> None:
        while self.frames:
            self._undo(self.frames.pop())

    def _search(self) -> None:
        schedule = self.schedule
        self._enter(0)
        while self.frames:
            frame = self.frames[-1]
            self._undo(frame)
            if self._finished():
                self.frames.pop()
                continue

            item = self.order[frame.position]
            while frame.next_day < frame.day_count:
                day = frame.next_day
                frame.next_day += 1
                if schedule.has_room(day) and schedule.can_place(self.model, day, item):
                    schedule.place(day, item)
                    frame.placed = day
                    break
            else:
                if frame.next_day > frame.day_count:
                    self.frames.pop()
                    continue
                frame.next_day += 1
                frame.placed = schedule.open_group(item)

            self._enter(frame.position + 1)
