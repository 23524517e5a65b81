"""Tests for the BP transmission approximation"""
import pytest

from occam_vbm.processors import BPIntersectProcessor, DFProcessor, HProcessor


def run_processor(manager, model):
    full_dimension = int(manager.top_ref.get_relation(0).compute_df()) + 1
    processor = BPIntersectProcessor(manager.input_data, full_dimension, manager.make_projection)
    manager.do_intersection_processing(model, processor)
    return processor


def test_origin_terms_corrected(neutral_manager):
    """Disjoint relations are never intersected; the surplus mass is removed"""
    processor = run_processor(neutral_manager, neutral_manager.bottom_ref)
    assert processor.origin_terms == 3
    assert processor.q.total() == pytest.approx(3.0)

    processor.correct_origin_terms()
    assert processor.q.total() == pytest.approx(1.0)
    # Only applied once
    processor.correct_origin_terms()
    assert processor.q.total() == pytest.approx(1.0)


def test_overlapping_relations(neutral_manager):
    processor = run_processor(neutral_manager, neutral_manager.make_model("AB:BC"))
    # AB and BC count once each, their intersection B is subtracted
    assert processor.origin_terms == 1
    processor.correct_origin_terms()
    assert processor.q.total() == pytest.approx(1.0)


def test_bp_values(neutral_manager):
    processor = run_processor(neutral_manager, neutral_manager.bottom_ref)
    processor.correct_origin_terms()
    data = neutral_manager.input_data
    p_a = data.project([0]).get_value((0,))
    p_b = data.project([1]).get_value((0,))
    p_c = data.project([2]).get_value((0,))
    assert processor.q.get_value((0, 0, 0)) == pytest.approx((p_a + p_b + p_c) / 4 - 2 / 8)


def test_top_bpt_is_zero(neutral_manager):
    assert neutral_manager.compute_bpt(neutral_manager.top_ref) == pytest.approx(0.0, abs=1e-12)


def test_bp_statistics(neutral_manager):
    top = neutral_manager.top_ref
    bottom = neutral_manager.bottom_ref
    neutral_manager.compute_bp_statistics(top)
    neutral_manager.compute_bp_statistics(bottom)

    assert neutral_manager.compute_bpt(bottom) > 0
    assert top.attributes.get_attribute("bp_h") == pytest.approx(neutral_manager.compute_h(top))
    assert top.attributes.get_attribute("bp_information") == pytest.approx(1.0)
    assert bottom.attributes.get_attribute("bp_unexplained") == pytest.approx(1.0)
    assert bottom.attributes.get_attribute("bp_information") == pytest.approx(0.0)
    # BP entropy of the bottom model reproduces its standard entropy
    assert bottom.attributes.get_attribute("bp_h") == pytest.approx(neutral_manager.compute_h(bottom))
    assert bottom.attributes.get_attribute("bp_lr") > 0
    assert 0 <= bottom.attributes.get_attribute("bp_alpha") <= 1


def test_bp_dependent_statistics(directed_manager):
    bottom = directed_manager.bottom_ref
    directed_manager.compute_bp_statistics(bottom)
    attrs = bottom.attributes
    h_iv = directed_manager.top_ref.get_relation(0).attributes.get_attribute("ind_h")
    assert attrs.get_attribute("bp_cond_h") == pytest.approx(attrs.get_attribute("bp_h") - h_iv)
    assert attrs.get_attribute("bp_cond_dh") == pytest.approx(0.0, abs=1e-9)


def test_df_and_h_processors(neutral_manager):
    model = neutral_manager.make_model("AB:BC")
    df = DFProcessor()
    neutral_manager.do_intersection_processing(model, df)
    assert df.df == 5
    h = HProcessor(neutral_manager.make_projection)
    neutral_manager.do_intersection_processing(model, h)
    assert h.h == pytest.approx(neutral_manager.compute_h(model))
