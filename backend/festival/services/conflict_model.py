from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from festival.core.exceptions import InstanceFormatError, UnknownItemError
from festival.schemas.instance import FestivalInstance

logger = logging.getLogger(__name__)


class ConflictModel:
    """Read-only incompatibility relation between films.

    Films are identified by their position in ``names``. The relation is kept
    as a symmetric boolean matrix plus, for every film, its conflict degree:
    the number of distinct films it may not share a day with.
    """

    def __init__(self, names: Sequence[str], pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._names: tuple[str, ...] = tuple(names)
        self._index: dict[str, int] = {}
        for position, name in enumerate(self._names):
            if name in self._index:
                raise InstanceFormatError(f"Film '{name}' is declared twice", details={"film": name})
            self._index[name] = position

        size = len(self._names)
        matrix = [[False] * size for _ in range(size)]
        for first, second in pairs:
            a = self.index_of(first)
            b = self.index_of(second)
            if a == b:
                raise InstanceFormatError(
                    f"Film '{first}' cannot be incompatible with itself",
                    details={"film": first},
                )
            matrix[a][b] = True
            matrix[b][a] = True

        self._matrix: tuple[tuple[bool, ...], ...] = tuple(tuple(row) for row in matrix)
        self._degrees: tuple[int, ...] = tuple(sum(row) for row in self._matrix)
        self._degree_order: tuple[int, ...] = tuple(
            sorted(range(size), key=lambda item: self._degrees[item], reverse=True)
        )
        logger.debug(
            "Conflict model built films=%s incompatible_pairs=%s",
            size,
            sum(self._degrees) // 2,
        )

    @classmethod
    def from_instance(cls, instance: FestivalInstance) -> "ConflictModel":
        return cls(instance.films, instance.incompatibilities)

    def __len__(self) -> int:
        return len(self._names)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def pair_count(self) -> int:
        return sum(self._degrees) // 2

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise UnknownItemError(name) from None

    def name_of(self, item: int) -> str:
        return self._names[item]

    def degree(self, item: int) -> int:
        return self._degrees[item]

    def degree_order(self) -> tuple[int, ...]:
        """Films ordered most constrained first; ties keep declaration order."""
        return self._degree_order

    def is_compatible(self, a: int, b: int) -> bool:
        return not self._matrix[a][b]

    def conflicts_with(self, item: int, others: Iterable[int]) -> int:
        row = self._matrix[item]
        return sum(1 for other in others if row[other])
