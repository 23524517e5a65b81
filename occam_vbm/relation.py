"""Implementation of Relation class for OCCAM variable-based reconstructability analysis"""

from typing import Tuple

from .attributes import ATTRIBUTE_DF, ATTRIBUTE_H
from .definitions import Key, Relation


class RelationImplementation:
    """Implementation class for Relation operations"""

    @staticmethod
    def compute_df(relation: Relation) -> float:
        """Degrees of freedom: number of cells in the relation minus one"""
        attrs = relation.attributes
        if not attrs.has_attribute(ATTRIBUTE_DF):
            df = 1
            for index in relation.indices:
                df *= relation.varlist.get_cardinality(index)
            attrs.set_attribute(ATTRIBUTE_DF, df - 1)
        return attrs.get_attribute(ATTRIBUTE_DF)

    @staticmethod
    def compute_entropy(relation: Relation) -> float:
        """Entropy of the projected table; the table must already be made"""
        attrs = relation.attributes
        if not attrs.has_attribute(ATTRIBUTE_H):
            if relation.table is None:
                raise ValueError(f"Relation {relation.name} has no projected table")
            attrs.set_attribute(ATTRIBUTE_H, relation.table.entropy())
        return attrs.get_attribute(ATTRIBUTE_H)

    @staticmethod
    def is_independent_only(relation: Relation) -> bool:
        """Check if relation only contains IVs"""
        return not any(relation.varlist.get_variable(i).type == 2
                       for i in relation.indices)

    @staticmethod
    def compare(relation: Relation, other: Relation) -> int:
        """
        Compare relations by their sorted variable indices.
        Returns:
            -1 if relation < other
             0 if relation == other
             1 if relation > other
        """
        if relation.indices < other.indices:
            return -1
        if relation.indices > other.indices:
            return 1
        return 0

    @staticmethod
    def intersect(relation: Relation, other: Relation) -> Tuple[int, ...]:
        """Variable indices shared with other"""
        shared = set(other.indices)
        return tuple(i for i in relation.indices if i in shared)


# Add implementation methods to Relation class
def _relation_compute_df(self):
    """Compute degrees of freedom"""
    return RelationImplementation.compute_df(self)


def _relation_compute_entropy(self):
    """Compute entropy"""
    return RelationImplementation.compute_entropy(self)


def _relation_get_variable_count(self):
    """Get number of variables in relation"""
    return len(self.indices)


def _relation_get_variable(self, index):
    """Get variable index by position"""
    return self.indices[index]


def _relation_has_variable(self, var):
    """Check for variable index"""
    return var in self.indices


def _relation_is_independent_only(self):
    """Check if IV-only"""
    return RelationImplementation.is_independent_only(self)


def _relation_get_print_name(self):
    """Get relation name"""
    return self.name


def _relation_project_key(self, key: Key) -> Key:
    """Project a full state key onto this relation's variables"""
    return tuple(key[i] for i in self.indices)


def _relation_is_subset(self, other):
    """Check if this relation is a subset of other"""
    return set(self.indices).issubset(other.indices)


def _relation_intersect(self, other):
    """Shared variable indices"""
    return RelationImplementation.intersect(self, other)


def _relation_compare(self, other):
    """Comparison implementation"""
    return RelationImplementation.compare(self, other)


def _relation_lt(self, other):
    """Less than comparison"""
    return self.compare(other) < 0


def _relation_eq(self, other):
    """Equality comparison"""
    if not isinstance(other, Relation):
        return NotImplemented
    return self.indices == other.indices


def _relation_hash(self):
    return hash(self.indices)


def _relation_str(self):
    """String representation"""
    return f"Relation({self.name})"


Relation.compute_df = _relation_compute_df
Relation.compute_entropy = _relation_compute_entropy
Relation.get_variable_count = _relation_get_variable_count
Relation.get_variable = _relation_get_variable
Relation.has_variable = _relation_has_variable
Relation.is_independent_only = _relation_is_independent_only
Relation.get_print_name = _relation_get_print_name
Relation.project_key = _relation_project_key
Relation.is_subset = _relation_is_subset
Relation.intersect = _relation_intersect
Relation.compare = _relation_compare
Relation.__lt__ = _relation_lt
Relation.__eq__ = _relation_eq
Relation.__hash__ = _relation_hash
Relation.__str__ = _relation_str
Relation.__repr__ = _relation_str
