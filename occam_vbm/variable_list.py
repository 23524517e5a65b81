"""Implementation of VariableList class for OCCAM variable-based reconstructability analysis"""

import logging
from typing import Any, Dict, List

import yaml

from .definitions import ABBREV_PATTERN, VariableDefinition, VariableList

logger = logging.getLogger(__name__)

IGNORE, IV, DV = 0, 1, 2


class VariableListImplementation:
    """Implementation class for VariableList operations"""

    @staticmethod
    def from_dict(config: Dict[str, Any]) -> VariableList:
        """Create VariableList from the 'variables' section of a config"""
        varlist = VariableList()
        for name, info in config.items():
            vardef = VariableDefinition(
                name=name,
                abbrev=info['abbrev'],
                cardinality=info['cardinality'],
                type=info['type'],
                rebin=info.get('rebin')
            )
            varlist.add_variable(vardef)
        return varlist

    @staticmethod
    def from_yaml(yaml_path: str) -> VariableList:
        """Create VariableList from YAML variable definitions file"""
        with open(yaml_path) as f:
            config = yaml.safe_load(f)
        return VariableListImplementation.from_dict(config['variables'])

    @staticmethod
    def add_variable(varlist: VariableList, vardef: VariableDefinition) -> None:
        """Add a variable definition"""
        # Check for duplicate abbreviations
        if vardef.abbrev in varlist.variables:
            raise ValueError(f"Duplicate abbreviation {vardef.abbrev}")

        varlist.variables[vardef.abbrev] = vardef
        if vardef.type == IGNORE:
            logger.debug("Ignoring variable %s", vardef.name)
        else:
            varlist._active.append(vardef.abbrev)

    @staticmethod
    def get_variable(varlist: VariableList, index: int) -> VariableDefinition:
        """Get active variable by index"""
        return varlist.variables[varlist._active[index]]

    @staticmethod
    def index_of(varlist: VariableList, abbrev: str) -> int:
        """Get index of an active variable from its abbreviation"""
        try:
            return varlist._active.index(abbrev)
        except ValueError:
            raise ValueError(f"Unknown variable abbreviation {abbrev!r}") from None

    @staticmethod
    def is_directed(varlist: VariableList) -> bool:
        """A system is directed if any variable is dependent"""
        return any(varlist.variables[a].type == DV for a in varlist._active)

    @staticmethod
    def get_iv_indices(varlist: VariableList) -> List[int]:
        return [i for i, a in enumerate(varlist._active)
                if varlist.variables[a].type == IV]

    @staticmethod
    def get_dv_indices(varlist: VariableList) -> List[int]:
        return [i for i, a in enumerate(varlist._active)
                if varlist.variables[a].type == DV]

    @staticmethod
    def parse_relation_name(varlist: VariableList, name: str) -> List[int]:
        """Parse a relation name such as 'ApEdZ' into sorted variable indices"""
        abbrevs = ABBREV_PATTERN.findall(name)
        if ''.join(abbrevs) != name or not abbrevs:
            raise ValueError(f"Malformed relation name {name!r}")

        indices = sorted({varlist.index_of(a) for a in abbrevs})
        if len(indices) != len(abbrevs):
            raise ValueError(f"Repeated variable in relation name {name!r}")
        return indices


# Add implementation methods to VariableList class
def _varlist_add_variable(self, vardef):
    """Add a variable definition"""
    VariableListImplementation.add_variable(self, vardef)


def _varlist_get_active_abbrevs(self):
    """Get abbreviations of all active (non-ignored) variables"""
    return list(self._active)


def _varlist_get_var_count(self):
    """Get number of active variables"""
    return len(self._active)


def _varlist_get_variable(self, index):
    """Get variable by index"""
    return VariableListImplementation.get_variable(self, index)


def _varlist_get_cardinality(self, index):
    """Get cardinality of variable by index"""
    return VariableListImplementation.get_variable(self, index).cardinality


def _varlist_index_of(self, abbrev):
    """Get variable index"""
    return VariableListImplementation.index_of(self, abbrev)


def _varlist_is_directed(self):
    """Check for dependent variables"""
    return VariableListImplementation.is_directed(self)


def _varlist_get_iv_indices(self):
    """Get indices of independent variables"""
    return VariableListImplementation.get_iv_indices(self)


def _varlist_get_dv_indices(self):
    """Get indices of dependent variables"""
    return VariableListImplementation.get_dv_indices(self)


def _varlist_parse_relation_name(self, name):
    """Parse relation name"""
    return VariableListImplementation.parse_relation_name(self, name)


@classmethod
def _varlist_from_yaml(cls, yaml_path):
    """Create from YAML file"""
    return VariableListImplementation.from_yaml(yaml_path)


@classmethod
def _varlist_from_dict(cls, config):
    """Create from variables mapping"""
    return VariableListImplementation.from_dict(config)


VariableList.add_variable = _varlist_add_variable
VariableList.get_active_abbrevs = _varlist_get_active_abbrevs
VariableList.get_var_count = _varlist_get_var_count
VariableList.get_variable = _varlist_get_variable
VariableList.get_cardinality = _varlist_get_cardinality
VariableList.index_of = _varlist_index_of
VariableList.is_directed = _varlist_is_directed
VariableList.get_iv_indices = _varlist_get_iv_indices
VariableList.get_dv_indices = _varlist_get_dv_indices
VariableList.parse_relation_name = _varlist_parse_relation_name
VariableList.from_yaml = _varlist_from_yaml
VariableList.from_dict = _varlist_from_dict
