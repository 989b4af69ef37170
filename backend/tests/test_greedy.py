import random

from conftest import crown_films, crown_pairs

from festival.services.conflict_model import ConflictModel
from festival.services.greedy import build_greedy, random_order, run_greedy
from festival.services.incumbent import Incumbent
from festival.services.schedule import validate


def test_small_instance_uses_two_days_with_two_rooms(small_model):
    schedule = build_greedy(small_model, capacity=2)
    assert schedule.snapshot() == ((0, 2), (1,))


def test_single_room_gives_every_film_its_own_day(small_model):
    schedule = build_greedy(small_model, capacity=1)
    assert schedule.day_count == 3
    assert validate(schedule, small_model, 1).ok


def test_same_order_gives_identical_schedule():
    model = ConflictModel(crown_films(3), crown_pairs(3))
    order = random_order(model, random.Random(7))
    first = build_greedy(model, 3, order)
    second = build_greedy(model, 3, order)
    assert first.snapshot() == second.snapshot()


def test_first_fit_in_declaration_order_is_not_optimal_on_crown():
    model = ConflictModel(crown_films(4), crown_pairs(4))
    schedule = build_greedy(model, capacity=4)
    assert schedule.day_count == 4
    assert validate(schedule, model, 4).ok


def test_random_order_is_a_permutation():
    model = ConflictModel([f"F{i}" for i in range(20)])
    order = random_order(model, random.Random(3))
    assert sorted(order) == list(range(20))


def test_zero_rooms_opens_a_day_per_film(small_model):
    schedule = build_greedy(small_model, capacity=0)
    assert schedule.snapshot() == ((0,), (1,), (2,))


def test_run_greedy_records_the_schedule(small_model):
    seen = []
    incumbent = Incumbent(bound=len(small_model) + 1, sinks=[seen.append])
    run_greedy(small_model, 2, incumbent)
    assert [item.days for item in seen] == [2]
    assert incumbent.best.groups == ((0, 2), (1,))
