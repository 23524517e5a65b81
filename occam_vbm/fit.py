"""Projection, fitting and intersection services used by the statistics engine"""

import logging
import math
from typing import Dict, List, Protocol, Tuple

import numpy as np

from .definitions import Key, Model, Relation, Table, VBMManager

logger = logging.getLogger(__name__)


class IntersectProcessor(Protocol):
    """Anything that accumulates a quantity over inclusion-exclusion terms"""

    def process(self, sign: int, relation: Relation) -> None:
        ...


class FitImplementation:
    """Implementation class for projection and fitting operations"""

    @staticmethod
    def make_projection(manager: VBMManager, relation: Relation) -> Table:
        """Project the input data onto the relation; cached on the relation"""
        if relation.table is None:
            relation.table = manager.input_data.project(relation.indices)
        return relation.table

    @staticmethod
    def make_fit_table(manager: VBMManager, model: Model) -> Table:
        """
        Build the maximum-entropy table matching every relation's projection.

        The most recent fit is kept, so asking again for the same model
        returns immediately.
        """
        name = model.get_name()
        if manager._fit_name == name and manager._fit_table is not None:
            return manager._fit_table

        var_count = manager.varlist.get_var_count()
        if any(r.get_variable_count() == var_count for r in model.relations):
            # A saturated relation reproduces the data
            fit = manager.input_data.copy()
        else:
            fit = FitImplementation.ipf(manager, model)

        manager._fit_name = name
        manager._fit_table = fit
        return fit

    @staticmethod
    def ipf(manager: VBMManager, model: Model) -> Table:
        """Iterative proportional fitting over the dense state space"""
        varlist = manager.varlist
        shape = tuple(varlist.get_cardinality(i) for i in range(varlist.get_var_count()))

        # Dense observed probabilities
        p = np.zeros(shape)
        for key, value in manager.input_data.items():
            p[key] = value

        # Margins to match, one per relation
        margins = []
        for relation in model.relations:
            other = tuple(a for a in range(len(shape)) if a not in relation.indices)
            margins.append((other, p.sum(axis=other, keepdims=True)))

        # Start from the uniform distribution
        q = np.full(shape, 1.0 / p.size)
        max_iter = int(manager.options.get_option_float('ipf-maxit'))
        max_dev = manager.options.get_option_float('ipf-maxdev') / manager.sample_size

        for _ in range(max_iter):
            dev = 0.0
            for other, p_margin in margins:
                q_margin = q.sum(axis=other, keepdims=True)
                with np.errstate(divide='ignore', invalid='ignore'):
                    ratio = np.where(q_margin > 0, p_margin / q_margin, 0.0)
                updated = q * ratio
                dev = max(dev, float(np.abs(updated - q).max()))
                q = updated
            if dev <= max_dev:
                break
        else:
            logger.warning("IPF for %s did not converge in %d iterations",
                           model.get_name(), max_iter)

        fit = Table(len(shape))
        for key in zip(*np.nonzero(q)):
            key = tuple(int(k) for k in key)
            fit.set_value(key, float(q[key]))
        return fit

    @staticmethod
    def make_max_projection(fitted: Table, input_data: Table, relation: Relation) -> Table:
        """
        For each state of the relation's variables, find the full state with
        the largest fitted value and record the observed mass of that state.
        Ties go to the first state in key order.
        """
        best: Dict[Key, Tuple[float, Key]] = {}
        for key in fitted.keys():
            sub_key = relation.project_key(key)
            q = fitted.get_value(key)
            if sub_key not in best or q > best[sub_key][0]:
                best[sub_key] = (q, key)

        max_table = Table(relation.get_variable_count())
        for sub_key, (_, key) in best.items():
            max_table.set_value(sub_key, input_data.get_value(key))
        return max_table

    @staticmethod
    def do_intersection_processing(manager: VBMManager, model: Model,
                                   processor: IntersectProcessor) -> None:
        """
        Drive an inclusion-exclusion traversal over the model's relations.

        Each relation is visited with the current sign, followed by the
        maximal nonempty intersections with the relations before it,
        processed recursively with the opposite sign.
        """
        FitImplementation._process_relations(manager, list(model.relations), processor, 1)

    @staticmethod
    def _process_relations(manager: VBMManager, relations: List[Relation],
                           processor: IntersectProcessor, sign: int) -> None:
        for i, relation in enumerate(relations):
            processor.process(sign, relation)

            overlaps: List[Tuple[int, ...]] = []
            for other in relations[:i]:
                common = relation.intersect(other)
                if not common:
                    continue
                common_set = set(common)
                if any(common_set.issubset(o) for o in overlaps):
                    continue
                overlaps = [o for o in overlaps if not set(o).issubset(common_set)]
                overlaps.append(common)

            if overlaps:
                intersections = [manager.get_relation(o, make_project=False) for o in overlaps]
                FitImplementation._process_relations(manager, intersections, processor, -sign)


def pearson_chi_squared(input_data: Table, fit: Table, sample_size: float) -> float:
    """Pearson X2 = N * sum((p - q)^2 / q) over fitted states"""
    total = 0.0
    for key, q in fit.items():
        if q > 0:
            p = input_data.get_value(key)
            total += (p - q) ** 2 / q
    return sample_size * total


def transmission(input_data: Table, fit: Table) -> float:
    """Kullback-Leibler divergence in bits from the fitted to the observed table"""
    t = 0.0
    for key, p in input_data.items():
        q = fit.get_value(key)
        if p > 0 and q > 0:
            t += p * math.log(p / q)
    return t / math.log(2.0)


# Add implementation methods to VBMManager class
def _manager_make_projection(self, relation):
    """Make relation projection"""
    return FitImplementation.make_projection(self, relation)


def _manager_make_fit_table(self, model):
    """Make fitted table"""
    return FitImplementation.make_fit_table(self, model)


def _manager_make_max_projection(self, fitted, input_data, relation):
    """Make arg-max projection"""
    return FitImplementation.make_max_projection(fitted, input_data, relation)


def _manager_do_intersection_processing(self, model, processor):
    """Run inclusion-exclusion traversal"""
    FitImplementation.do_intersection_processing(self, model, processor)


VBMManager.make_projection = _manager_make_projection
VBMManager.make_fit_table = _manager_make_fit_table
VBMManager.make_max_projection = _manager_make_max_projection
VBMManager.do_intersection_processing = _manager_do_intersection_processing
