import threading

from conftest import crown_films, crown_pairs

from festival.schemas.instance import FestivalInstance
from festival.schemas.schedule import SolverSettings
from festival.services.festival_scheduler import FestivalScheduler


def test_strategies_share_the_same_instance(crown_instance):
    results = {
        strategy: FestivalScheduler(
            crown_instance,
            SolverSettings(strategy=strategy, random_seed=2, max_iterations=100),
        ).run()
        for strategy in ("exhaustive", "greedy", "grasp")
    }
    assert results["exhaustive"].days == 2
    assert results["greedy"].days == 4
    assert results["grasp"].days >= results["exhaustive"].days
    for result in results.values():
        assert sorted(item.film for item in result.assignments) == sorted(crown_films(4))


def test_sinks_receive_every_improvement():
    instance = FestivalInstance(films=crown_films(3), incompatibilities=crown_pairs(3), rooms=["R1", "R2", "R3"])
    received = []
    scheduler = FestivalScheduler(instance, SolverSettings(strategy="exhaustive"), sinks=[received.append])
    result = scheduler.run()
    assert [item.days for item in received] == [item.days for item in result.improvements]
    assert received[-1].days == result.days == 2


def test_seed_is_drawn_when_not_given(small_instance):
    scheduler = FestivalScheduler(small_instance, SolverSettings(strategy="grasp", max_iterations=1))
    assert scheduler.seed is not None
    assert scheduler.run().random_seed == scheduler.seed


def test_stop_event_is_forwarded(small_instance):
    stop = threading.Event()
    stop.set()
    scheduler = FestivalScheduler(small_instance, SolverSettings(strategy="grasp"), stop_event=stop)
    result = scheduler.run()
    assert result.days == 0
    assert result.assignments == []


def test_zero_rooms_is_not_an_error():
    instance = FestivalInstance(films=["A", "B"], incompatibilities=[], rooms=[])
    result = FestivalScheduler(instance, SolverSettings(strategy="greedy")).run()
    assert result.days == 2
    assert {item.room for item in result.assignments} == {"-"}
