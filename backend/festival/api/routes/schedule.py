import logging

from fastapi import APIRouter

from festival.core.config import get_settings
from festival.core.exceptions import InstanceTooLargeError
from festival.schemas.schedule import GenerateScheduleRequest, GenerateScheduleResponse
from festival.services.festival_scheduler import FestivalScheduler

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/schedule", response_model=GenerateScheduleResponse)
def generate_schedule(payload: GenerateScheduleRequest) -> GenerateScheduleResponse:
    settings = get_settings()
    solver_settings = payload.settings
    film_count = payload.instance.film_count
    if solver_settings.strategy == "exhaustive" and film_count > settings.api_max_exhaustive_films:
        raise InstanceTooLargeError("exhaustive", film_count, settings.api_max_exhaustive_films)
    if solver_settings.strategy == "grasp" and not solver_settings.is_bounded:
        solver_settings = solver_settings.model_copy(
            update={
                "max_iterations": settings.api_max_iterations,
                "time_limit_seconds": settings.api_time_limit_seconds,
            }
        )
    scheduler = FestivalScheduler(payload.instance, solver_settings)
    result = scheduler.run()
    logger.info(
        "Schedule generated strategy=%s films=%s days=%s runtime_ms=%s",
        result.strategy,
        film_count,
        result.days,
        result.runtime_ms,
    )
    return result
