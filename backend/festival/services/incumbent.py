from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from time import perf_counter

from festival.services.schedule import Schedule, ScheduleSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Improvement:
    days: int
    elapsed_seconds: float
    groups: ScheduleSnapshot


ImprovementSink = Callable[[Improvement], None]


@dataclass
class Incumbent:
    """Best schedule found so far in a run.

    ``bound`` is the day count a new schedule has to beat. Every strictly
    better schedule is snapshotted, appended to ``history`` and handed to
    each sink (typically the output file writer).
    """

    bound: int
    sinks: list[ImprovementSink] = field(default_factory=list)
    history: list[Improvement] = field(default_factory=list)
    started_at: float = field(default_factory=perf_counter)

    @property
    def best(self) -> Improvement | None:
        return self.history[-1] if self.history else None

    def improves(self, days: int) -> bool:
        return days < self.bound

    def elapsed(self) -> float:
        return perf_counter() - self.started_at

    def offer(self, schedule: Schedule) -> bool:
        days = schedule.day_count
        if not self.improves(days):
            return False
        improvement = Improvement(days=days, elapsed_seconds=self.elapsed(), groups=schedule.snapshot())
        self.bound = days
        self.history.append(improvement)
        logger.info("New incumbent days=%s elapsed=%.3fs", days, improvement.elapsed_seconds)
        for sink in self.sinks:
            sink(improvement)
        return True
