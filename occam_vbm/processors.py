"""Accumulators driven by the inclusion-exclusion traversal"""

import math
from typing import Callable

from .definitions import Relation, Table


class DFProcessor:
    """Signed sum of relation degrees of freedom"""

    def __init__(self):
        self.df = 0.0

    def process(self, sign: int, relation: Relation) -> None:
        self.df += sign * relation.compute_df()


class HProcessor:
    """Signed sum of relation entropies"""

    def __init__(self, project: Callable[[Relation], Table]):
        self.project = project
        self.h = 0.0

    def process(self, sign: int, relation: Relation) -> None:
        self.project(relation)
        self.h += sign * relation.compute_entropy()


class BPIntersectProcessor:
    """
    Approximate transmission by the Fourier BP method.

    Each q value is built from the projections containing its state,
    q(x) = sum(sign * R(x) / |R|) - (terms - 1) / |X|, where R(x) is the
    projected value, |R| the number of full states folded into one state
    of R, and |X| the size of the full state space. Only states observed
    in the input are kept, since transmission terms p log(p/q) vanish
    elsewhere.

    The origin-term correction is needed because disjoint relations are
    never intersected: for AB:CD, p(AB) + p(CD) sums to 2, not 1.
    """

    def __init__(self, input_data: Table, full_dimension: int,
                 project: Callable[[Relation], Table]):
        self.input_data = input_data
        self.full_dimension = full_dimension
        self.project = project
        # Seed with the observed states at zero
        self.q = Table(input_data.key_size, {key: 0.0 for key in input_data})
        self.origin_terms = 0
        self.corrected = False

    def process(self, sign: int, relation: Relation) -> None:
        """Add the scaled projection of relation to every q state"""
        table = self.project(relation)
        # Number of full states projected into one relation state
        rel_dimension = self.full_dimension // (int(relation.compute_df()) + 1)
        for key in self.q:
            value = table.get_value(relation.project_key(key), None)
            if value is not None:
                self.q.add_tuple(key, sign * (value / rel_dimension))
        self.origin_terms += sign

    def correct_origin_terms(self) -> None:
        """Deduct the surplus origin terms from every q state"""
        if self.corrected:
            return
        origin_term = (self.origin_terms - 1) / self.full_dimension
        for key in self.q:
            self.q.add_tuple(key, -origin_term)
        self.corrected = True

    def get_transmission(self) -> float:
        self.correct_origin_terms()
        t = 0.0
        for key, p in self.input_data.items():
            q = self.q.get_value(key)
            if p > 0 and q > 0:
                t += p * math.log(p / q)
        return t / math.log(2.0)
