from __future__ import annotations

import logging
import math
import random
import threading
from dataclasses import dataclass
from time import perf_counter

from festival.schemas.schedule import SolverSettings
from festival.services.conflict_model import ConflictModel
from festival.services.greedy import build_greedy, random_order
from festival.services.incumbent import Incumbent
from festival.services.schedule import Schedule, ScheduleSnapshot

logger = logging.getLogger(__name__)


class SearchState:
    """A schedule that may temporarily hold incompatible films on the same day.

    ``group_conflicts[d]`` is the number of incompatible pairs on day ``d`` and
    ``total_conflicts`` their sum. Moves keep both up to date; ``swap`` leaves
    them to the caller, which applies the delta once the swap is kept.
    ``recount`` rebuilds them from scratch.
    """

    def __init__(self, model: ConflictModel, schedule: Schedule) -> None:
        self.model = model
        self.schedule = schedule
        self.group_conflicts, self.total_conflicts = self.recount()

    @property
    def groups(self) -> list[list[int]]:
        return self.schedule.groups

    @property
    def day_count(self) -> int:
        return self.schedule.day_count

    def recount(self) -> tuple[list[int], int]:
        counts: list[int] = []
        for group in self.groups:
            pairs = 0
            for position, item in enumerate(group):
                pairs += self.model.conflicts_with(item, group[position + 1:])
            counts.append(pairs)
        return counts, sum(counts)

    def conflicts_of(self, group_index: int, item: int) -> int:
        return self.model.conflicts_with(item, self.groups[group_index])

    def move_last_film(self, source: int, target: int) -> int:
        """Move the last film of ``source`` into ``target``; returns conflicts introduced."""
        item = self.groups[source][-1]
        lost = self.model.conflicts_with(item, self.groups[source][:-1])
        gained = self.conflicts_of(target, item)
        self.groups[source].pop()
        self.schedule.place(target, item)
        self.group_conflicts[source] -= lost
        self.group_conflicts[target] += gained
        self.total_conflicts += gained - lost
        return gained

    def drop_last_group_if_empty(self) -> bool:
        if self.groups and not self.groups[-1]:
            self.schedule.close_last_group()
            self.total_conflicts -= self.group_conflicts.pop()
            return True
        return False

    def swap(self, first_group: int, first_pos: int, second_group: int, second_pos: int) -> None:
        first = self.groups[first_group]
        second = self.groups[second_group]
        first[first_pos], second[second_pos] = second[second_pos], first[first_pos]

    def apply_delta(self, group_index: int, delta: int) -> None:
        self.group_conflicts[group_index] += delta
        self.total_conflicts += delta


@dataclass(frozen=True)
class LocalSearchResult:
    best: ScheduleSnapshot | None
    iterations: int
    elapsed_seconds: float


class LocalSearchEngine:
    """GRASP driver with day elimination and annealing-based conflict repair.

    Each iteration builds a first-fit schedule from a random film order, then
    keeps trying to empty the last day by pushing its films into earlier days,
    letting conflicts appear and repairing them with swap moves. Iterations
    continue until the budget in ``settings`` is spent or ``stop_event`` is set;
    with neither configured the engine runs until the process is interrupted.
    """

    def __init__(
        self,
        model: ConflictModel,
        capacity: int,
        incumbent: Incumbent,
        settings: SolverSettings,
        rng: random.Random,
        stop_event: threading.Event | None = None,
    ) -> None:
        self.model = model
        self.capacity = capacity
        self.incumbent = incumbent
        self.settings = settings
        self.random = rng
        self.stop_event = stop_event
        self.iterations = 0

    def _should_stop(self, started: float) -> bool:
        if self.stop_event is not None and self.stop_event.is_set():
            return True
        if self.settings.max_iterations is not None and self.iterations >= self.settings.max_iterations:
            return True
        if (
            self.settings.time_limit_seconds is not None
            and perf_counter() - started >= self.settings.time_limit_seconds
        ):
            return True
        return False

    def run(self) -> LocalSearchResult:
        started = perf_counter()
        logger.info(
            "Local search started films=%s rooms=%s max_iterations=%s time_limit=%s",
            len(self.model),
            self.capacity,
            self.settings.max_iterations,
            self.settings.time_limit_seconds,
        )
        while not self._should_stop(started):
            self.iterations += 1
            self.iterate()
        elapsed = perf_counter() - started
        best = self.incumbent.best
        logger.info(
            "Local search stopped iterations=%s best_days=%s elapsed=%.3fs",
            self.iterations,
            best.days if best else None,
            elapsed,
        )
        return LocalSearchResult(
            best=best.groups if best else None,
            iterations=self.iterations,
            elapsed_seconds=elapsed,
        )

    def iterate(self) -> SearchState:
        schedule = build_greedy(self.model, self.capacity, random_order(self.model, self.random))
        self.incumbent.offer(schedule)
        state = SearchState(self.model, schedule)
        logger.debug("Iteration %s constructed days=%s", self.iterations, state.day_count)
        while True:
            if not self.eliminate_last_group(state):
                break
            if not self.repair(state):
                break
        return state

    def eliminate_last_group(self, state: SearchState) -> bool:
        """Push films of the last day into earlier days with free rooms.

        Each film goes to the earlier day where it introduces the fewest
        conflicts. Returns False when no film could be moved at all.
        """
        if state.day_count == 0:
            return False
        source = state.day_count - 1
        moved = 0
        while state.groups[source]:
            item = state.groups[source][-1]
            target = None
            fewest = None
            for group_index in range(source):
                if not state.schedule.has_room(group_index):
                    continue
                introduced = state.conflicts_of(group_index, item)
                if fewest is None or introduced < fewest:
                    fewest = introduced
                    target = group_index
            if target is None:
                if state.total_conflicts == 0:
                    self.incumbent.offer(state.schedule)
                break
            state.move_last_film(source, target)
            moved += 1
        state.drop_last_group_if_empty()
        return moved > 0

    def repair(self, state: SearchState) -> bool:
        """Swap conflicting films with random films of other days until no conflict is left
        or the temperature reaches its floor. Returns True when the schedule is conflict free."""
        temperature = self.settings.initial_temperature
        while state.total_conflicts > 0 and temperature > self.settings.min_temperature:
            if state.day_count < 2:
                break
            day = next(index for index, count in enumerate(state.group_conflicts) if count > 0)
            for position in range(len(state.groups[day])):
                item = state.groups[day][position]
                old_first = state.conflicts_of(day, item)
                if old_first == 0:
                    continue
                other_day = self.random.randrange(state.day_count - 1)
                if other_day >= day:
                    other_day += 1
                other_position = self.random.randrange(len(state.groups[other_day]))
                other_item = state.groups[other_day][other_position]
                old_second = state.conflicts_of(other_day, other_item)

                state.swap(day, position, other_day, other_position)
                new_first = state.conflicts_of(day, other_item)
                new_second = state.conflicts_of(other_day, item)
                delta = (new_first + new_second) - (old_first + old_second)

                if delta < 0 or self.random.random() <= math.exp(-delta / temperature):
                    state.apply_delta(day, new_first - old_first)
                    state.apply_delta(other_day, new_second - old_second)
                else:
                    state.swap(day, position, other_day, other_position)
                temperature *= self.settings.cooling_rate

        if state.total_conflicts == 0:
            self.incumbent.offer(state.schedule)
            return True
        return False
