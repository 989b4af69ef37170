from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from festival.services.conflict_model import ConflictModel
from festival.services.incumbent import Incumbent
from festival.services.schedule import Schedule

logger = logging.getLogger(__name__)


def random_order(model: ConflictModel, rng: random.Random) -> list[int]:
    order = list(range(len(model)))
    rng.shuffle(order)
    return order


def build_greedy(model: ConflictModel, capacity: int, order: Sequence[int] | None = None) -> Schedule:
    """First-fit construction: each film goes to the earliest day that has a free
    room and no incompatible film, otherwise it opens a new day. Films are never
    moved once placed."""
    if order is None:
        order = model.degree_order()
    schedule = Schedule(capacity)
    for item in order:
        for group_index in range(len(schedule)):
            if schedule.has_room(group_index) and schedule.can_place(model, group_index, item):
                schedule.place(group_index, item)
                break
        else:
            schedule.open_group(item)
    return schedule


def run_greedy(model: ConflictModel, capacity: int, incumbent: Incumbent) -> Schedule:
    schedule = build_greedy(model, capacity)
    logger.info("Greedy schedule built films=%s days=%s", len(model), schedule.day_count)
    incumbent.offer(schedule)
    return schedule
