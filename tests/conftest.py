"""Test configuration and fixtures"""
import numpy as np
import pandas as pd
import pytest
import yaml

from occam_vbm import VariableDefinition, VariableList, VBMManager

# Counts for every state of three binary variables, in (A, B, C) order
STATE_COUNTS = {
    (0, 0, 0): 10, (0, 0, 1): 5, (0, 1, 0): 3, (0, 1, 1): 8,
    (1, 0, 0): 6, (1, 0, 1): 2, (1, 1, 0): 9, (1, 1, 1): 12,
}


def entropy(counts):
    """Entropy in bits of a collection of counts"""
    values = np.array([c for c in counts if c > 0], dtype=float)
    probs = values / values.sum()
    return float(-np.sum(probs * np.log2(probs)))


def marginal(positions):
    """Counts of STATE_COUNTS summed onto the given positions"""
    result = {}
    for key, count in STATE_COUNTS.items():
        sub = tuple(key[i] for i in positions)
        result[sub] = result.get(sub, 0) + count
    return result


def make_varlist(types):
    varlist = VariableList()
    for (name, abbrev), t in zip([("Alpha", "A"), ("Beta", "B"), ("Gamma", "C")], types):
        varlist.add_variable(VariableDefinition(name, abbrev, 2, t))
    return varlist


def all_models(manager):
    """Every model reachable from top by repeated decomposition"""
    found = {}
    pending = [manager.top_ref]
    while pending:
        model = pending.pop()
        if model.get_name() in found:
            continue
        found[model.get_name()] = model
        for i, relation in enumerate(model.relations):
            if relation.get_variable_count() > 1:
                child, _ = manager.make_child_model(model, i)
                pending.append(child)
    return list(found.values())


@pytest.fixture
def counts_frame():
    """Observations as one row per state with a frequency column"""
    rows = [dict(A=a, B=b, C=c, freq=n) for (a, b, c), n in STATE_COUNTS.items()]
    return pd.DataFrame(rows)


@pytest.fixture
def raw_frame():
    """Observations as one row per case, using full column names"""
    rows = []
    for (a, b, c), n in STATE_COUNTS.items():
        rows.extend([dict(Alpha=f"a{a}", Beta=f"b{b}", Gamma=c)] * n)
    return pd.DataFrame(rows)


@pytest.fixture
def neutral_varlist():
    return make_varlist([1, 1, 1])


@pytest.fixture
def directed_varlist():
    return make_varlist([1, 1, 2])


@pytest.fixture
def neutral_manager(counts_frame, neutral_varlist):
    return VBMManager.from_dataframe(counts_frame, neutral_varlist, freq_column="freq")


@pytest.fixture
def directed_manager(counts_frame, directed_varlist):
    return VBMManager.from_dataframe(counts_frame, directed_varlist, freq_column="freq")


@pytest.fixture
def config_dict():
    return {
        'variables': {
            'Alpha': {'abbrev': 'A', 'cardinality': 2, 'type': 1},
            'Beta': {'abbrev': 'B', 'cardinality': 2, 'type': 1},
            'Gamma': {'abbrev': 'C', 'cardinality': 2, 'type': 2},
            'Notes': {'abbrev': 'N', 'cardinality': 5, 'type': 0},
        },
        'options': {'palpha': 0.05, 'ipf-maxit': 100},
    }


@pytest.fixture
def config_yaml(tmp_path, config_dict):
    """Write config to a YAML file"""
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump(config_dict))
    return path


@pytest.fixture
def data_tsv(tmp_path, raw_frame):
    """Write raw observations to a tab-separated file"""
    path = tmp_path / "data.tsv"
    frame = raw_frame.assign(Notes="x")
    frame.to_csv(path, sep="\t", index=False)
    return path

