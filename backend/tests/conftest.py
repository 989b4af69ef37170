import pytest
from fastapi.testclient import TestClient #fake http client that calls the FastAPI routes without running a server.

from festival.core.config import get_settings
from festival.main import app
from festival.schemas.instance import FestivalInstance
from festival.services.conflict_model import ConflictModel


def crown_pairs(size: int) -> list[tuple[str, str]]:
    # A_i clashes with every B_j except B_i: two days suffice, first-fit in declaration order needs `size`.
    return [(f"A{i}", f"B{j}") for i in range(1, size + 1) for j in range(1, size + 1) if i != j]


def crown_films(size: int) -> list[str]:
    films: list[str] = []
    for i in range(1, size + 1):
        films.extend([f"A{i}", f"B{i}"])
    return films


@pytest.fixture()
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def small_instance() -> FestivalInstance:
    return FestivalInstance(films=["A", "B", "C"], incompatibilities=[("A", "B")], rooms=["R1", "R2"])


@pytest.fixture()
def small_model(small_instance) -> ConflictModel:
    return ConflictModel.from_instance(small_instance)


@pytest.fixture()
def crown_instance() -> FestivalInstance:
    return FestivalInstance(films=crown_films(4), incompatibilities=crown_pairs(4), rooms=["R1", "R2", "R3", "R4"])


@pytest.fixture()
def instance_text() -> str:
    return "3\nA B C\n1\nA B\n2\nR1 R2\n"
