from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from festival.core.config import get_settings
from festival.core.exceptions import AppError
from festival.schemas.schedule import SolverSettings
from festival.services.festival_scheduler import FestivalScheduler
from festival.services.instance_io import ScheduleFileWriter, read_instance

logger = logging.getLogger("festival.cli")

STRATEGIES = ("exhaustive", "greedy", "grasp")


def build_parser(strategy: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Schedule festival films on as few days as possible",
    )
    parser.add_argument("input", help="Instance file (films, incompatible pairs, rooms)")
    parser.add_argument("output", help="File overwritten with every improved schedule")
    if strategy is None:
        parser.add_argument("--strategy", choices=STRATEGIES, default=None)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the local search")
    parser.add_argument("--max-iterations", type=int, default=None)
    parser.add_argument("--time-limit", type=float, default=None, help="Seconds before the local search stops")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
    )
    return parser


def solver_settings_from_args(args: argparse.Namespace, strategy: str) -> SolverSettings:
    settings = get_settings()
    return SolverSettings(
        strategy=strategy,
        random_seed=args.seed if args.seed is not None else settings.random_seed,
        max_iterations=args.max_iterations,
        time_limit_seconds=args.time_limit,
        initial_temperature=settings.initial_temperature,
        min_temperature=settings.min_temperature,
        cooling_rate=settings.cooling_rate,
    )


def run(argv: Sequence[str] | None = None, *, strategy: str | None = None) -> int:
    parser = build_parser(strategy)
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level or logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = get_settings()
        if args.log_level is None:
            logging.getLogger().setLevel(settings.log_level)
        chosen = strategy or args.strategy or settings.default_strategy
        solver_settings = solver_settings_from_args(args, chosen)
        instance = read_instance(args.input)
        writer = ScheduleFileWriter(args.output, instance)
        scheduler = FestivalScheduler(instance, solver_settings, sinks=[writer])
    except ValidationError as exc:
        logger.error("Invalid solver settings: %s", exc)
        return 1
    except AppError as exc:
        logger.error("%s %s", exc.message, exc.details or "")
        return 1
    except OSError as exc:
        logger.error("Cannot read instance %s: %s", args.input, exc)
        return 1

    try:
        result = scheduler.run()
    except KeyboardInterrupt:
        best = scheduler.incumbent.best
        logger.info("Interrupted; last written schedule uses %s days", best.days if best else None)
        return 0
    except OSError as exc:
        logger.error("Cannot write schedule to %s: %s", args.output, exc)
        return 1
    logger.info("Finished strategy=%s days=%s runtime_ms=%s", chosen, result.days, result.runtime_ms)
    return 0


def main() -> None:
    sys.exit(run())


def main_exhaustive() -> None:
    sys.exit(run(strategy="exhaustive"))


def main_greedy() -> None:
    sys.exit(run(strategy="greedy"))


def main_metaheuristic() -> None:
    sys.exit(run(strategy="grasp"))


if __name__ == "__main__":
    main()
