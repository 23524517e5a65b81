"""
py-occam-vbm: variable-based reconstructability analysis in the style of OCCAM
"""

__version__ = "0.1.0"

# Importing the implementation modules attaches their methods to the dataclasses
from .attributes import AttributeList
from .definitions import (
    Model, ModelCache, Options, Relation, RelationCache, Table,
    VariableDefinition, VariableList, VBMManager,
)
from . import cache, model, relation, table, variable_list
from .config import load_config
from .fit import pearson_chi_squared, transmission
from .manager import RelOp
from .report import Report, SortDirection
from .search import Search

__all__ = [
    'AttributeList',
    'Model',
    'ModelCache',
    'Options',
    'Relation',
    'RelationCache',
    'Table',
    'VariableDefinition',
    'VariableList',
    'VBMManager',
    'RelOp',
    'Report',
    'SortDirection',
    'Search',
    'load_config',
    'pearson_chi_squared',
    'transmission',
]
