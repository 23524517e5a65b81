"""Beam search down the model lattice"""

import logging
import time
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .attributes import ATTRIBUTE_EXPLAINED_I
from .definitions import Model, VBMManager
from .report import Report, SortDirection

logger = logging.getLogger(__name__)


@dataclass
class Search:
    """
    Search driver built on the manager's lattice primitives.

    Starting from the start model (top by default), each level decomposes
    the kept models one relation at a time, scores every new model, drops
    those rejected by the manager's filter and keeps the `width` best by
    `sort_by`.
    """
    manager: VBMManager
    width: int = 3
    levels: int = 7
    sort_by: str = ATTRIBUTE_EXPLAINED_I
    direction: SortDirection = SortDirection.DESCENDING
    start_model: Optional[str] = None

    def __post_init__(self):
        """Validate parameters"""
        if self.width < 1:
            raise ValueError("Search width must be >= 1")
        if self.levels < 1:
            raise ValueError("Search levels must be >= 1")

    def run(self) -> List[Model]:
        """Run search; returns every kept model, start model first"""
        start = self._get_start_model()
        start.level = 0
        start.id = 1
        self._compute_statistics(start)

        models = [start]      # Current level models
        all_models = [start]  # All models kept
        seen = {start.get_name()}
        start_time = time.time()
        last_time = start_time

        for level in range(1, self.levels + 1):
            candidates = []
            for model in models:
                for child in self._generate_models(model):
                    name = child.get_name()
                    if name in seen:
                        continue
                    seen.add(name)
                    if child.progenitor is None:
                        child.progenitor = model
                    self._compute_statistics(child)
                    if self.manager.apply_filter(child):
                        candidates.append(child)

            if not candidates:
                logger.info("Level %d: no more candidates", level)
                break

            # Sort and keep best candidates
            candidates = Report.sort_models(candidates, self.sort_by, self.direction)
            models = candidates[:self.width]
            for i, model in enumerate(models, start=len(all_models) + 1):
                model.level = level
                model.id = i
            all_models.extend(models)

            current_time = time.time()
            logger.info("Level %d: %d new models, %d kept; %d total kept; "
                        "%.1f seconds, %.1f total",
                        level, len(candidates), len(models), len(all_models),
                        current_time - last_time, current_time - start_time)
            last_time = current_time

        return all_models

    def _get_start_model(self) -> Model:
        if not self.start_model or self.start_model.lower() == 'top':
            return self.manager.top_ref
        if self.start_model.lower() == 'bottom':
            return self.manager.bottom_ref
        return self.manager.make_model(self.start_model)

    def _generate_models(self, model: Model) -> Iterator[Model]:
        """Child models from decomposing each relation of order two or more"""
        varlist = self.manager.varlist
        iv_indices = tuple(varlist.get_iv_indices()) if varlist.is_directed() else None

        for i, relation in enumerate(model.relations):
            if relation.get_variable_count() < 2:
                continue
            # The IV relation stays intact in directed systems
            if relation.indices == iv_indices:
                continue
            child, _ = self.manager.make_child_model(model, i)
            yield self._reduce(child)

    def _reduce(self, model: Model) -> Model:
        """Drop relations contained in another relation of the model"""
        kept = [r for r in model.relations
                if not any(r is not o and r.is_subset(o) for o in model.relations)]
        if len(kept) == len(model.relations):
            return model
        return self.manager.make_model(":".join(r.get_print_name() for r in kept))

    def _compute_statistics(self, model: Model):
        self.manager.compute_information_statistics(model)
        self.manager.compute_l2_statistics(model)
        self.manager.compute_dependent_statistics(model)
