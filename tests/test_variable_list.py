"""Tests for variable definitions, relation names and configuration"""
import pytest

from occam_vbm import Options, VariableDefinition, VariableList, load_config


def test_from_dict_skips_ignored(config_dict):
    varlist = VariableList.from_dict(config_dict['variables'])
    assert varlist.get_active_abbrevs() == ['A', 'B', 'C']
    assert varlist.get_var_count() == 3
    assert varlist.get_variable(2).name == 'Gamma'
    assert varlist.index_of('B') == 1
    assert varlist.is_directed()
    assert varlist.get_iv_indices() == [0, 1]
    assert varlist.get_dv_indices() == [2]


def test_neutral_system(neutral_varlist):
    assert not neutral_varlist.is_directed()
    assert neutral_varlist.get_dv_indices() == []


def test_constructed_with_variables():
    varlist = VariableList({
        'Ap': VariableDefinition('APOE', 'Ap', 3, 1),
        'X': VariableDefinition('Unused', 'X', 2, 0),
        'Z': VariableDefinition('Outcome', 'Z', 2, 2),
    })
    assert varlist.get_active_abbrevs() == ['Ap', 'Z']
    assert varlist.get_cardinality(0) == 3


@pytest.mark.parametrize("abbrev", ["a", "AB", "A1", ""])
def test_bad_abbreviation(abbrev):
    with pytest.raises(ValueError):
        VariableDefinition('Var', abbrev, 2, 1)


def test_bad_type_and_cardinality():
    with pytest.raises(ValueError):
        VariableDefinition('Var', 'V', 2, 3)
    with pytest.raises(ValueError):
        VariableDefinition('Var', 'V', 0, 1)


def test_duplicate_abbreviation(neutral_varlist):
    with pytest.raises(ValueError, match="Duplicate"):
        neutral_varlist.add_variable(VariableDefinition('Other', 'A', 2, 1))


def test_parse_relation_name(neutral_varlist):
    assert neutral_varlist.parse_relation_name('CA') == [0, 2]
    assert neutral_varlist.parse_relation_name('B') == [1]


@pytest.mark.parametrize("name", ["", "ab", "AA", "AD", "A:B"])
def test_parse_bad_relation_name(neutral_varlist, name):
    with pytest.raises(ValueError):
        neutral_varlist.parse_relation_name(name)


def test_load_config(config_yaml):
    varlist, options = load_config(config_yaml)
    assert varlist.get_active_abbrevs() == ['A', 'B', 'C']
    assert options.get_option_float('palpha') == pytest.approx(0.05)
    assert options.get_option_float('ipf-maxit') == 100
    # Unset options fall back to built-in defaults
    assert options.get_option_float('ipf-maxdev') == pytest.approx(0.25)


def test_load_config_without_variables(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("options:\n  palpha: 0.1\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_option_must_be_numeric():
    options = Options()
    options.set_option('palpha', 'high')
    with pytest.raises(ValueError):
        options.get_option_float('palpha')
    assert options.get_option('missing', 'fallback') == 'fallback'


def test_option_default_precedence():
    options = Options({'ipf-maxit': 50})
    # A value set on the options wins over any default
    assert options.get_option_float('ipf-maxit', 10) == 50
    # A caller's default wins over the built-in one
    assert options.get_option_float('palpha', 0.1) == pytest.approx(0.1)
    assert options.get_option_float('palpha') == 0.0
    with pytest.raises(ValueError, match="not set"):
        options.get_option_float('unknown')
