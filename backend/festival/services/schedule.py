from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from festival.core.exceptions import CapacityExceededError
from festival.services.conflict_model import ConflictModel

ScheduleSnapshot = tuple[tuple[int, ...], ...]


class Schedule:
    """Ordered days, each an ordered list of films; list position is the room slot."""

    def __init__(self, capacity: int, groups: Iterable[Iterable[int]] | None = None) -> None:
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.capacity = capacity
        self.groups: list[list[int]] = [list(group) for group in groups or []]

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self) -> Iterator[list[int]]:
        return iter(self.groups)

    def __getitem__(self, index: int) -> list[int]:
        return self.groups[index]

    @property
    def day_count(self) -> int:
        return len(self.groups)

    def has_room(self, group_index: int) -> bool:
        return len(self.groups[group_index]) < self.capacity

    def can_place(self, model: ConflictModel, group_index: int, item: int) -> bool:
        for other in self.groups[group_index]:
            if not model.is_compatible(other, item):
                return False
        return True

    def place(self, group_index: int, item: int) -> None:
        if not self.has_room(group_index):
            raise CapacityExceededError(group_index, self.capacity)
        self.groups[group_index].append(item)

    def remove(self, group_index: int, item: int) -> None:
        self.groups[group_index].remove(item)

    def open_group(self, item: int) -> int:
        # A new day always takes its first film, even when no rooms are declared.
        self.groups.append([item])
        return len(self.groups) - 1

    def close_last_group(self) -> list[int]:
        return self.groups.pop()

    def snapshot(self) -> ScheduleSnapshot:
        return tuple(tuple(group) for group in self.groups)


@dataclass
class ScheduleIssues:
    conflicting_pairs: list[tuple[int, int, int]] = field(default_factory=list)
    overfull_days: list[int] = field(default_factory=list)
    missing_films: list[int] = field(default_factory=list)
    repeated_films: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.conflicting_pairs or self.overfull_days or self.missing_films or self.repeated_films)


def validate(groups: ScheduleSnapshot | Schedule, model: ConflictModel, capacity: int) -> ScheduleIssues:
    """Check feasibility, capacity and that every film is scheduled exactly once."""
    issues = ScheduleIssues()
    seen: Counter[int] = Counter()
    for day, group in enumerate(groups):
        if len(group) > max(capacity, 1):
            issues.overfull_days.append(day)
        for position, first in enumerate(group):
            seen[first] += 1
            for second in group[position + 1:]:
                if not model.is_compatible(first, second):
                    issues.conflicting_pairs.append((day, first, second))
    issues.missing_films = [item for item in range(len(model)) if seen[item] == 0]
    issues.repeated_films = sorted(item for item, count in seen.items() if count > 1)
    return issues
