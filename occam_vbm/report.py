"""Model lists ordered by attribute"""

import enum
from dataclasses import dataclass, field
from typing import List

from .definitions import Model


class SortDirection(enum.Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass
class Report:
    """Collects models for output and orders them by an attribute"""
    models: List[Model] = field(default_factory=list)

    def add_model(self, model: Model):
        self.models.append(model)

    def sort(self, attr: str, direction: SortDirection = SortDirection.DESCENDING):
        """Sort the collected models in place"""
        self.models = Report.sort_models(self.models, attr, direction)

    @staticmethod
    def sort_models(models: List[Model], attr: str,
                    direction: SortDirection = SortDirection.DESCENDING) -> List[Model]:
        """
        Return models sorted by attribute value. The sort is stable, so
        models with equal values keep their relative order in either
        direction. Models missing the attribute sort as UNSET.
        """
        return sorted(models, key=lambda m: m.attributes.get_attribute(attr),
                      reverse=direction is SortDirection.DESCENDING)

    def __len__(self) -> int:
        return len(self.models)
