"""Implementation of Model class for OCCAM variable-based reconstructability analysis"""

from collections import Counter
from typing import List, Set

from .definitions import Model, Relation


class ModelImplementation:
    """Implementation class for Model operations"""

    @staticmethod
    def add_relation(model: Model, relation: Relation) -> bool:
        """Append a relation unless the model already holds it"""
        if any(r is relation or r == relation for r in model.relations):
            return False
        model.relations.append(relation)
        return True

    @staticmethod
    def get_name(model: Model) -> str:
        """Canonical name: relation names in sorted order, colon separated"""
        return ":".join(r.get_print_name() for r in sorted(model.relations))

    @staticmethod
    def get_variable_indices(model: Model) -> Set[int]:
        """All variable indices referenced by the model's relations"""
        used = set()
        for relation in model.relations:
            used.update(relation.indices)
        return used

    @staticmethod
    def has_loops(model: Model) -> bool:
        """
        Check for loops by repeated reduction: drop variables that occur in
        only one relation and relations contained in another. The model is
        loopless iff nothing remains.
        """
        sets: List[Set[int]] = [set(r.indices) for r in model.relations]
        changed = True
        while sets and changed:
            changed = False

            # Remove variables unique to one relation
            counts = Counter(v for s in sets for v in s)
            for s in sets:
                unique = {v for v in s if counts[v] == 1}
                if unique:
                    s -= unique
                    changed = True

            # Remove empty and contained relations
            kept: List[Set[int]] = []
            for i, s in enumerate(sets):
                contained = any(
                    s < t or (s == t and j < i)
                    for j, t in enumerate(sets) if j != i
                )
                if s and not contained:
                    kept.append(s)
            if len(kept) != len(sets):
                changed = True
            sets = kept

        return bool(sets)


# Add implementation methods to Model class
def _model_add_relation(self, relation):
    """Add relation"""
    return ModelImplementation.add_relation(self, relation)


def _model_get_name(self):
    """Get model name"""
    return ModelImplementation.get_name(self)


def _model_get_relation(self, index):
    """Get relation by position"""
    return self.relations[index]


def _model_get_relation_count(self):
    """Get number of relations"""
    return len(self.relations)


def _model_contains_relation(self, relation):
    """Check if relation is part of model"""
    return any(r == relation for r in self.relations)


def _model_get_variable_indices(self):
    """Get covered variables"""
    return ModelImplementation.get_variable_indices(self)


def _model_has_loops(self):
    """Check for loops"""
    return ModelImplementation.has_loops(self)


def _model_get_attribute_list(self):
    """Get attribute list"""
    return self.attributes


def _model_str(self):
    """String representation"""
    return f"Model({self.get_name()})"


Model.add_relation = _model_add_relation
Model.get_name = _model_get_name
Model.get_relation = _model_get_relation
Model.get_relation_count = _model_get_relation_count
Model.contains_relation = _model_contains_relation
Model.get_variable_indices = _model_get_variable_indices
Model.has_loops = _model_has_loops
Model.get_attribute_list = _model_get_attribute_list
Model.__str__ = _model_str
Model.__repr__ = _model_str
