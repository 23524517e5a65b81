"""Tests for model filtering and ordering"""
import pytest

from occam_vbm import Model, RelOp, Report, SortDirection


def models_with(values, attr="df"):
    models = []
    for value in values:
        model = Model()
        model.attributes.set_attribute(attr, value)
        models.append(model)
    return models


def test_sort_models():
    models = models_with([4, 2, 6])
    ascending = Report.sort_models(models, "df", SortDirection.ASCENDING)
    descending = Report.sort_models(models, "df", SortDirection.DESCENDING)
    assert [m.attributes.get_attribute("df") for m in ascending] == [2, 4, 6]
    assert [m.attributes.get_attribute("df") for m in descending] == [6, 4, 2]
    # Input list is untouched
    assert [m.attributes.get_attribute("df") for m in models] == [4, 2, 6]


def test_sort_is_stable():
    first, second, third = models_with([1, 1, 0])
    models = [first, second, third]
    assert Report.sort_models(models, "df", SortDirection.ASCENDING) == [third, first, second]
    assert Report.sort_models(models, "df", SortDirection.DESCENDING) == [first, second, third]


def test_report_sort():
    report = Report()
    for model in models_with([0.2, 0.9, 0.5], attr="information"):
        report.add_model(model)
    report.sort("information")
    assert len(report) == 3
    assert [m.attributes.get_attribute("information") for m in report.models] == [0.9, 0.5, 0.2]


@pytest.fixture
def df_models(neutral_manager):
    return [neutral_manager.make_model(name) for name in ["A:B:C", "AB:C", "AB:AC:BC"]]


def test_no_filter_passes_all(neutral_manager, df_models):
    assert all(neutral_manager.apply_filter(m) for m in df_models)


@pytest.mark.parametrize("op, value, expected", [
    (RelOp.GREATERTHAN, 3, ["AB:C", "AB:AC:BC"]),
    (RelOp.EQUALS, 4, ["AB:C"]),
    (RelOp.LESSTHAN, 4, ["A:B:C"]),
    (">", 5.5, ["AB:AC:BC"]),
])
def test_filter_by_df(neutral_manager, df_models, op, value, expected):
    neutral_manager.set_filter("df", value, op)
    kept = [m.get_name() for m in df_models if neutral_manager.apply_filter(m)]
    assert kept == expected


def test_filter_computes_statistics(neutral_manager):
    model = neutral_manager.make_model("AB:BC")
    neutral_manager.set_filter("lr", 0, RelOp.GREATERTHAN)
    assert neutral_manager.apply_filter(model)
    assert model.attributes.has_attribute("max_rel_width")
    assert model.attributes.has_attribute("alpha")


def test_set_sort_attr(neutral_manager):
    neutral_manager.set_sort_attr("information")
    assert neutral_manager.sort_attr == "information"
    assert neutral_manager.sort_direction is SortDirection.DESCENDING
    neutral_manager.set_sort_attr("h", SortDirection.ASCENDING)
    assert neutral_manager.sort_direction is SortDirection.ASCENDING
