"""Tests for relation and model construction, decomposition and caching"""
from unittest.mock import patch

import pytest

from occam_vbm import Model, Relation


def test_relation_identity(neutral_manager):
    relation = neutral_manager.make_relation("CA")
    assert relation.name == "AC"
    assert relation.indices == (0, 2)
    assert neutral_manager.make_relation("AC") is relation
    assert neutral_manager.get_relation([2, 0]) is relation
    assert neutral_manager.relation_cache.find_relation("AC") is relation


def test_relation_projection(neutral_manager):
    relation = neutral_manager.make_relation("B")
    assert relation.table.get_value((1,)) == pytest.approx(32 / 55)
    unprojected = neutral_manager.make_relation("AB", make_project=False)
    assert unprojected.table is None


def test_relation_out_of_range(neutral_manager):
    with pytest.raises(ValueError):
        neutral_manager.get_relation([0, 3])
    with pytest.raises(ValueError):
        neutral_manager.get_relation([])


def test_all_child_relations(neutral_manager):
    top = neutral_manager.top_ref.get_relation(0)
    children = neutral_manager.make_all_child_relations(top)
    assert [r.name for r in children] == ["AB", "AC", "BC"]
    # Each child drops exactly one distinct variable
    assert len({r.name for r in children}) == top.get_variable_count()
    for child in children:
        assert child.get_variable_count() == 2
        assert child.is_subset(top)
    assert children[0] is neutral_manager.make_relation("AB")


def test_unary_relation_has_no_children(neutral_manager):
    with pytest.raises(ValueError):
        neutral_manager.make_all_child_relations(neutral_manager.make_relation("A"))


def test_child_model_cached(neutral_manager):
    top = neutral_manager.top_ref
    child, from_cache = neutral_manager.make_child_model(top, 0)
    assert child.get_name() == "AB:AC:BC"
    assert not from_cache

    again, from_cache = neutral_manager.make_child_model(top, 0)
    assert again is child
    assert from_cache
    assert neutral_manager.make_model("BC:AC:AB") is child


def test_child_model_reuses_relations(neutral_manager):
    model = neutral_manager.make_model("AB:AC:BC")
    child, _ = neutral_manager.make_child_model(model, 0)
    assert child.get_name() == "A:AC:B:BC"
    # Relations not decomposed are shared with the parent
    assert child.contains_relation(model.get_relation(1))
    assert any(r is model.get_relation(2) for r in child.relations)


@pytest.mark.parametrize("remove", [1, 5, -1])
def test_child_model_bad_index(neutral_manager, remove):
    with pytest.raises(IndexError):
        neutral_manager.make_child_model(neutral_manager.top_ref, remove)


def test_model_must_cover_variables(neutral_manager):
    with pytest.raises(ValueError, match="missing"):
        neutral_manager.make_model("AB")
    with pytest.raises(ValueError):
        neutral_manager.make_model("")


def test_model_name_is_canonical(neutral_manager):
    model = neutral_manager.make_model("C:BA")
    assert model.get_name() == "AB:C"
    assert str(model) == "Model(AB:C)"
    # Repeated relations are held once
    assert neutral_manager.make_model("AB:C:BA") is model
    assert model.get_relation_count() == 2


def test_iv_token(directed_manager):
    assert directed_manager.make_model("IV:C") is directed_manager.bottom_ref
    # The IV relation is added when no relation holds all IVs
    model = directed_manager.make_model("AC:BC")
    assert model.get_name() == "AB:AC:BC"


def test_has_loops(neutral_manager):
    looped = {"AB:AC:BC"}
    names = ["ABC", "AB:AC:BC", "AB:BC", "A:BC", "A:B:C", "A:AC:B:BC"]
    for name in names:
        assert neutral_manager.make_model(name).has_loops() == (name in looped)


def test_model_variable_indices(neutral_manager):
    model = neutral_manager.make_model("AB:BC")
    assert model.get_variable_indices() == {0, 1, 2}


def test_lattice_children_complete(neutral_manager):
    """Every decomposition step replaces one relation by all its children"""
    model = neutral_manager.make_model("AB:AC:BC")
    for i, relation in enumerate(model.relations):
        child, _ = neutral_manager.make_child_model(model, i)
        expected = {r.name for j, r in enumerate(model.relations) if j != i}
        # Abbreviations are single letters here
        expected.update(relation.name)
        assert {r.name for r in child.relations} == expected


def decompose(manager, model, name):
    """Decompose the relation called name"""
    index = [r.name for r in model.relations].index(name)
    child, _ = manager.make_child_model(model, index)
    return child


def test_paths_reach_same_model(neutral_manager):
    start = neutral_manager.make_model("AB:AC:BC")
    first = decompose(neutral_manager, decompose(neutral_manager, start, "AB"), "AC")
    neutral_manager.compute_l2_statistics(first)

    with patch.object(neutral_manager, "do_intersection_processing",
                      wraps=neutral_manager.do_intersection_processing) as processing:
        second = decompose(neutral_manager, decompose(neutral_manager, start, "AC"), "AB")
        assert second is first
        assert second.get_name() == "A:B:BC:C"
        neutral_manager.compute_l2_statistics(second)
        assert processing.call_count == 0


def test_model_cache_add_and_find(neutral_manager):
    cache = neutral_manager.model_cache
    original = neutral_manager.make_model("AB:C")
    size = len(cache)

    duplicate = Model()
    for relation in original.relations:
        duplicate.add_relation(relation)
    assert not cache.add_model(duplicate)
    assert cache.find_model("AB:C") is original

    assert cache.find_model("X") is None
    assert len(cache) == size

    fresh = Model()
    fresh.add_relation(neutral_manager.make_relation("AC"))
    fresh.add_relation(neutral_manager.make_relation("B"))
    assert cache.add_model(fresh)
    assert cache.find_model("AC:B") is fresh
    assert len(cache) == size + 1


def test_relation_cache_add_and_find(neutral_manager, neutral_varlist):
    cache = neutral_manager.relation_cache
    original = neutral_manager.make_relation("BC")
    size = len(cache)

    assert not cache.add_relation(Relation((2, 1), neutral_varlist))
    assert cache.find_relation("BC") is original
    assert cache.find_relation("Q") is None
    assert len(cache) == size
