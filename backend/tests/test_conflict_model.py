import pytest

from festival.core.exceptions import InstanceFormatError, UnknownItemError
from festival.services.conflict_model import ConflictModel


def test_relation_is_symmetric_and_irreflexive():
    model = ConflictModel(["A", "B", "C"], [("A", "B"), ("C", "B")])
    for a in range(3):
        assert model.is_compatible(a, a)
        for b in range(3):
            assert model.is_compatible(a, b) == model.is_compatible(b, a)
    assert not model.is_compatible(0, 1)
    assert not model.is_compatible(2, 1)
    assert model.is_compatible(0, 2)


def test_degree_counts_distinct_partners():
    model = ConflictModel(["A", "B", "C"], [("A", "B"), ("B", "A"), ("B", "C")])
    assert model.degree(model.index_of("A")) == 1
    assert model.degree(model.index_of("B")) == 2
    assert model.degree(model.index_of("C")) == 1
    assert model.pair_count == 2


def test_degree_order_puts_most_constrained_first_and_keeps_ties_stable():
    model = ConflictModel(["A", "B", "C", "D"], [("B", "C"), ("B", "D")])
    assert [model.name_of(item) for item in model.degree_order()] == ["B", "C", "D", "A"]


def test_conflicts_with_counts_incompatible_members():
    model = ConflictModel(["A", "B", "C", "D"], [("A", "B"), ("A", "C")])
    assert model.conflicts_with(0, [1, 2, 3]) == 2
    assert model.conflicts_with(3, [0, 1, 2]) == 0


def test_unknown_film_in_pair_is_rejected():
    with pytest.raises(UnknownItemError) as excinfo:
        ConflictModel(["A", "B"], [("A", "Z")])
    assert excinfo.value.name == "Z"
    assert excinfo.value.status_code == 400


def test_duplicate_and_self_pairs_are_rejected():
    with pytest.raises(InstanceFormatError):
        ConflictModel(["A", "A"])
    with pytest.raises(InstanceFormatError):
        ConflictModel(["A", "B"], [("A", "A")])


def test_from_instance(small_instance):
    model = ConflictModel.from_instance(small_instance)
    assert len(model) == 3
    assert model.names == ("A", "B", "C")
    assert not model.is_compatible(model.index_of("A"), model.index_of("B"))
