"""Attribute lists and the names statistics are stored under"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Tuple

# Value read back for an attribute that was never set
UNSET = -1.0

ATTRIBUTE_LEVEL = "level"
ATTRIBUTE_H = "h"
ATTRIBUTE_T = "t"
ATTRIBUTE_DF = "df"
ATTRIBUTE_DDF = "ddf"
ATTRIBUTE_LR = "lr"
ATTRIBUTE_ALPHA = "alpha"
ATTRIBUTE_BETA = "beta"
ATTRIBUTE_P2 = "p2"
ATTRIBUTE_P2_ALPHA = "p2_alpha"
ATTRIBUTE_P2_BETA = "p2_beta"
ATTRIBUTE_EXPLAINED_I = "information"
ATTRIBUTE_UNEXPLAINED_I = "unexplained"
ATTRIBUTE_IND_H = "ind_h"
ATTRIBUTE_DEP_H = "dep_h"
ATTRIBUTE_COND_H = "cond_h"
ATTRIBUTE_COND_DH = "cond_dh"
ATTRIBUTE_COND_PCT_DH = "cond_pct_dh"
ATTRIBUTE_BP_T = "bp_t"
ATTRIBUTE_BP_H = "bp_h"
ATTRIBUTE_BP_LR = "bp_lr"
ATTRIBUTE_BP_ALPHA = "bp_alpha"
ATTRIBUTE_BP_BETA = "bp_beta"
ATTRIBUTE_BP_EXPLAINED_I = "bp_information"
ATTRIBUTE_BP_UNEXPLAINED_I = "bp_unexplained"
ATTRIBUTE_BP_COND_H = "bp_cond_h"
ATTRIBUTE_BP_COND_DH = "bp_cond_dh"
ATTRIBUTE_BP_COND_PCT_DH = "bp_cond_pct_dh"
ATTRIBUTE_PCT_CORRECT = "pct_correct_data"
ATTRIBUTE_MAX_REL_WIDTH = "max_rel_width"
ATTRIBUTE_MIN_REL_WIDTH = "min_rel_width"

# Statistics measured against the active reference model
REFERENCE_ATTRIBUTES = (
    ATTRIBUTE_DDF, ATTRIBUTE_LR, ATTRIBUTE_ALPHA, ATTRIBUTE_BETA,
    ATTRIBUTE_P2, ATTRIBUTE_P2_ALPHA, ATTRIBUTE_P2_BETA,
    ATTRIBUTE_BP_LR, ATTRIBUTE_BP_ALPHA, ATTRIBUTE_BP_BETA,
)


@dataclass
class AttributeList:
    """
    Sparse name -> value mapping holding the statistics of a relation or model.

    Reads of a missing name return UNSET. Whether a value was computed is
    answered by has_attribute(), never by comparing against UNSET, since
    some statistics may legitimately be negative.
    """
    values: Dict[str, float] = field(default_factory=dict)

    def get_attribute(self, name: str) -> float:
        """Get attribute value, or UNSET if it was never set"""
        return self.values.get(name, UNSET)

    def has_attribute(self, name: str) -> bool:
        return name in self.values

    def set_attribute(self, name: str, value: float):
        self.values[name] = float(value)

    def remove_attributes(self, names: Iterable[str]):
        """Drop the named attributes if present"""
        for name in names:
            self.values.pop(name, None)

    def reset(self):
        """Clear all attributes"""
        self.values.clear()

    def items(self) -> Iterator[Tuple[str, float]]:
        return iter(self.values.items())

    def __len__(self) -> int:
        return len(self.values)
