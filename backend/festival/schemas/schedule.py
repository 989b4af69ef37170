from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from festival.schemas.instance import FestivalInstance


SolverStrategy = Literal["exhaustive", "greedy", "grasp"]


class SolverSettings(BaseModel):
    strategy: SolverStrategy = "grasp"
    random_seed: int | None = Field(default=None, ge=0, le=2_000_000_000)
    max_iterations: int | None = Field(default=None, ge=1)
    time_limit_seconds: float | None = Field(default=None, gt=0.0)
    initial_temperature: float = Field(default=0.1, gt=0.0, le=1000.0)
    min_temperature: float = Field(default=5e-7, gt=0.0)
    cooling_rate: float = Field(default=0.999, ge=0.5, lt=1.0)

    @model_validator(mode="after")
    def validate_temperatures(self) -> "SolverSettings":
        if self.min_temperature >= self.initial_temperature:
            raise ValueError("min_temperature must be lower than initial_temperature")
        return self

    @property
    def is_bounded(self) -> bool:
        return self.max_iterations is not None or self.time_limit_seconds is not None


class GenerateScheduleRequest(BaseModel):
    instance: FestivalInstance
    settings: SolverSettings = Field(default_factory=SolverSettings)


class ScheduledFilm(BaseModel):
    film: str
    day: int = Field(ge=1)
    room: str


class ImprovementOut(BaseModel):
    days: int = Field(ge=0)
    elapsed_seconds: float = Field(ge=0.0)


class GenerateScheduleResponse(BaseModel):
    strategy: SolverStrategy
    days: int = Field(ge=0)
    assignments: list[ScheduledFilm] = Field(default_factory=list)
    improvements: list[ImprovementOut] = Field(default_factory=list)
    random_seed: int | None = None
    runtime_ms: int = Field(ge=0)
