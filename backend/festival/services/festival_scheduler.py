from __future__ import annotations

import logging
import random
import threading
from time import perf_counter

from festival.schemas.instance import FestivalInstance
from festival.schemas.schedule import (
    GenerateScheduleResponse,
    ImprovementOut,
    ScheduledFilm,
    SolverSettings,
)
from festival.services.conflict_model import ConflictModel
from festival.services.exhaustive import ExhaustiveSearch
from festival.services.greedy import run_greedy
from festival.services.incumbent import Incumbent, ImprovementSink
from festival.services.instance_io import iter_assignments
from festival.services.local_search import LocalSearchEngine

logger = logging.getLogger(__name__)

MAX_SEED = 2_000_000_000


class FestivalScheduler:
    def __init__(
        self,
        instance: FestivalInstance,
        settings: SolverSettings,
        *,
        sinks: list[ImprovementSink] | None = None,
        stop_event: threading.Event | None = None,
    ) -> None:
        self.instance = instance
        self.settings = settings
        self.model = ConflictModel.from_instance(instance)
        self.capacity = instance.room_count
        self.stop_event = stop_event
        # Worst case every film gets a day of its own, so n + 1 is never reached.
        self.incumbent = Incumbent(bound=len(self.model) + 1, sinks=list(sinks or []))
        self.seed = settings.random_seed
        if self.seed is None:
            self.seed = random.SystemRandom().randrange(MAX_SEED)
        self.random = random.Random(self.seed)

        if self.capacity == 0 and len(self.model) > 0:
            logger.warning("Instance declares no rooms; every film will get a day of its own")

    def run(self) -> GenerateScheduleResponse:
        strategy = self.settings.strategy
        logger.info(
            "Scheduler run strategy=%s films=%s pairs=%s rooms=%s seed=%s",
            strategy,
            len(self.model),
            self.model.pair_count,
            self.capacity,
            self.seed,
        )
        start = perf_counter()
        if strategy == "exhaustive":
            ExhaustiveSearch(self.model, self.capacity, self.incumbent).run()
        elif strategy == "greedy":
            run_greedy(self.model, self.capacity, self.incumbent)
        else:
            LocalSearchEngine(
                self.model,
                self.capacity,
                self.incumbent,
                self.settings,
                self.random,
                stop_event=self.stop_event,
            ).run()
        runtime_ms = int((perf_counter() - start) * 1000)
        return self.build_response(runtime_ms)

    def build_response(self, runtime_ms: int) -> GenerateScheduleResponse:
        best = self.incumbent.best
        groups = best.groups if best else ()
        return GenerateScheduleResponse(
            strategy=self.settings.strategy,
            days=len(groups),
            assignments=[
                ScheduledFilm(film=film, day=day, room=room)
                for film, day, room in iter_assignments(groups, self.instance.films, self.instance.rooms)
            ],
            improvements=[
                ImprovementOut(days=item.days, elapsed_seconds=item.elapsed_seconds)
                for item in self.incumbent.history
            ],
            random_seed=self.seed,
            runtime_ms=runtime_ms,
        )
