"""Core dataclass definitions for OCCAM variable-based reconstructability analysis"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .attributes import AttributeList

Key = Tuple[int, ...]

# Abbreviations are one capital letter followed by lowercase letters
ABBREV_PATTERN = re.compile(r"[A-Z][a-z]*")


@dataclass
class VariableDefinition:
    """Represents a single variable definition from YAML config"""
    name: str            # Full name (e.g., "APOE") - for display
    abbrev: str          # Abbreviation (e.g., "Ap") - used in model names
    cardinality: int     # Number of possible values
    type: int            # 0=ignore, 1=IV, 2=DV
    rebin: Optional[str] = None  # Optional rebinning specification

    def __post_init__(self):
        """Validate variable definition"""
        # Validate type
        if self.type not in [0, 1, 2]:
            raise ValueError(f"Invalid variable type {self.type}")

        # Validate cardinality
        if self.cardinality < 1:
            raise ValueError(f"Invalid cardinality {self.cardinality}")

        # Validate abbreviation format
        if not ABBREV_PATTERN.fullmatch(self.abbrev):
            raise ValueError(
                f"Abbreviation {self.abbrev!r} must be a capital letter "
                "followed by lowercase letters"
            )


@dataclass
class VariableList:
    """Ordered catalog of variable definitions"""
    variables: Dict[str, VariableDefinition] = field(default_factory=dict)
    _active: List[str] = field(init=False, default_factory=list)  # active abbrevs, index order

    def __post_init__(self):
        """Index active (non-ignored) variables in definition order"""
        self._active = [abbrev for abbrev, var in self.variables.items()
                        if var.type != 0]


@dataclass
class Options:
    """Option settings looked up by name"""
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Table:
    """Sparse contingency table mapping state keys to mass"""
    key_size: int
    data: Dict[Key, float] = field(default_factory=dict)


@dataclass(eq=False)
class Relation:
    """A set of variables treated jointly"""
    indices: Tuple[int, ...]   # Variable indices, sorted
    varlist: VariableList
    name: str = field(init=False, default="")
    table: Optional[Table] = None  # Projected input table
    attributes: AttributeList = field(default_factory=AttributeList)

    def __post_init__(self):
        """Sort indices and derive the canonical name"""
        self.indices = tuple(sorted(set(self.indices)))
        abbrevs = self.varlist.get_active_abbrevs()
        self.name = "".join(abbrevs[i] for i in self.indices)


@dataclass(eq=False)
class Model:
    """A cover of the variables by one or more relations"""
    relations: List[Relation] = field(default_factory=list)
    attributes: AttributeList = field(default_factory=AttributeList)
    id: Optional[int] = None  # Model ID in search
    level: Optional[int] = None  # Model level in search
    progenitor: Optional["Model"] = None  # Parent model in search


@dataclass
class RelationCache:
    """Canonical store of relations keyed by name"""
    relations: Dict[str, Relation] = field(default_factory=dict)


@dataclass
class ModelCache:
    """Canonical store of models keyed by name"""
    models: Dict[str, Model] = field(default_factory=dict)


@dataclass
class VBMManager:
    """Variable-based manager: lattice generation and model statistics"""
    varlist: VariableList
    input_data: Table          # Normalized input probabilities
    sample_size: float
    options: Options = field(default_factory=Options)
    relation_cache: RelationCache = field(default_factory=RelationCache)
    model_cache: ModelCache = field(default_factory=ModelCache)
    top_ref: Optional[Model] = field(init=False, default=None)
    bottom_ref: Optional[Model] = field(init=False, default=None)
    ref_model: Optional[Model] = field(init=False, default=None)
    filter_attr: Optional[str] = field(init=False, default=None)
    filter_op: Any = field(init=False, default=None)
    filter_value: float = field(init=False, default=0.0)
    sort_attr: Optional[str] = field(init=False, default=None)
    sort_direction: Any = field(init=False, default=None)
    _fit_name: Optional[str] = field(init=False, default=None)  # Model of the cached fit
    _fit_table: Optional[Table] = field(init=False, default=None)

    def __post_init__(self):
        """Bind the input data to the top relation and build reference models"""
        self.initialize()
