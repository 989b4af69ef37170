from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field, field_validator


class FestivalInstance(BaseModel):
    films: list[str] = Field(default_factory=list)
    incompatibilities: list[tuple[str, str]] = Field(default_factory=list)
    rooms: list[str] = Field(default_factory=list)

    @field_validator("films", "rooms")
    @classmethod
    def validate_unique_names(cls, value: list[str]) -> list[str]:
        cleaned = [name.strip() for name in value]
        if any(not name for name in cleaned):
            raise ValueError("names must be non-empty strings")
        duplicates = sorted(name for name, count in Counter(cleaned).items() if count > 1)
        if duplicates:
            raise ValueError(f"duplicate names: {', '.join(duplicates)}")
        return cleaned

    @field_validator("incompatibilities")
    @classmethod
    def validate_pairs(cls, value: list[tuple[str, str]]) -> list[tuple[str, str]]:
        pairs: list[tuple[str, str]] = []
        for first, second in value:
            first, second = first.strip(), second.strip()
            if first == second:
                raise ValueError(f"film '{first}' cannot be incompatible with itself")
            pairs.append((first, second))
        return pairs

    @property
    def film_count(self) -> int:
        return len(self.films)

    @property
    def room_count(self) -> int:
        return len(self.rooms)
