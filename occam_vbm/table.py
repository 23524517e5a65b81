"""Implementation of Table class for OCCAM variable-based reconstructability analysis"""

import logging
from collections import defaultdict
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .definitions import Table, VariableList

logger = logging.getLogger(__name__)


class TableImplementation:
    """Implementation class for Table operations"""

    @staticmethod
    def from_dataframe(data: pd.DataFrame, varlist: VariableList,
                       freq_column: Optional[str] = None) -> Tuple[Table, float]:
        """
        Build a normalized input table from raw observations.

        Columns are matched to variables by full name, then by abbreviation.
        Values are mapped to state indices in sorted order. Each row counts
        once, or by its value in freq_column if given.

        Returns:
            The normalized table and the sample size
        """
        abbrevs = varlist.get_active_abbrevs()
        columns = []
        for abbrev in abbrevs:
            vardef = varlist.variables[abbrev]
            if vardef.name in data.columns:
                columns.append(vardef.name)
            elif abbrev in data.columns:
                columns.append(abbrev)
            else:
                raise ValueError(f"No column for variable {vardef.name}")

        # Drop rows with missing values
        frame = data[columns + ([freq_column] if freq_column else [])]
        missing = frame[columns].isna().any(axis=1)
        if missing.any():
            logger.warning("Dropping %d rows with missing values", int(missing.sum()))
            frame = frame[~missing]
        if frame.empty:
            raise ValueError("No complete observations in data")

        # Map values to state indices
        coded = {}
        for abbrev, col in zip(abbrevs, columns):
            codes, uniques = pd.factorize(frame[col], sort=True)
            cardinality = varlist.variables[abbrev].cardinality
            if len(uniques) > cardinality:
                raise ValueError(
                    f"Variable {abbrev} has {len(uniques)} distinct values "
                    f"but cardinality {cardinality}"
                )
            coded[abbrev] = codes
        coded = pd.DataFrame(coded)
        if freq_column:
            coded['_weight'] = frame[freq_column].to_numpy(dtype=float)
        else:
            coded['_weight'] = 1.0

        # Accumulate frequencies per state
        grouped = coded.groupby(abbrevs, sort=True)['_weight'].sum()
        table = Table(len(abbrevs))
        for key, value in grouped.items():
            if value <= 0:
                continue
            key = key if isinstance(key, tuple) else (key,)
            table.add_tuple(tuple(int(k) for k in key), float(value))

        sample_size = table.total()
        if sample_size <= 0:
            raise ValueError("Data has no positive frequencies")
        table.normalize()
        return table, sample_size

    @staticmethod
    def project(table: Table, positions: Sequence[int]) -> Table:
        """Project table onto the given key positions, summing mass"""
        projected = defaultdict(float)
        for key, value in table.data.items():
            projected[tuple(key[i] for i in positions)] += value
        return Table(len(positions), dict(projected))

    @staticmethod
    def entropy(table: Table) -> float:
        """Compute entropy in bits of the normalized table mass"""
        values = np.fromiter(table.data.values(), dtype=float, count=len(table.data))
        total = values.sum()
        if total <= 0:
            return 0.0
        probs = values[values > 0] / total
        return float(-np.sum(probs * np.log2(probs)))


# Add implementation methods to Table class
def _table_tuple_count(self):
    """Number of stored tuples"""
    return len(self.data)


def _table_get_value(self, key, default=0.0):
    """Get value for key"""
    return self.data.get(key, default)


def _table_set_value(self, key, value):
    """Set value for key"""
    self.data[key] = value


def _table_add_tuple(self, key, value):
    """Add value to key, creating it if needed"""
    self.data[key] = self.data.get(key, 0.0) + value


def _table_has_key(self, key):
    """Check for key"""
    return key in self.data


def _table_copy(self):
    """Copy table"""
    return Table(self.key_size, dict(self.data))


def _table_keys(self):
    """Keys in sorted order"""
    return sorted(self.data)


def _table_items(self):
    """Key/value pairs"""
    return self.data.items()


def _table_total(self):
    """Total mass"""
    return float(sum(self.data.values()))


def _table_normalize(self):
    """Scale mass to sum to one"""
    total = self.total()
    if total > 0:
        for key in self.data:
            self.data[key] /= total


def _table_project(self, positions):
    """Project table"""
    return TableImplementation.project(self, positions)


def _table_entropy(self):
    """Entropy"""
    return TableImplementation.entropy(self)


def _table_len(self):
    return len(self.data)


def _table_iter(self):
    return iter(self.data)


@classmethod
def _table_from_dataframe(cls, data, varlist, freq_column=None):
    """Create from DataFrame"""
    return TableImplementation.from_dataframe(data, varlist, freq_column)


Table.tuple_count = property(_table_tuple_count)
Table.get_value = _table_get_value
Table.set_value = _table_set_value
Table.add_tuple = _table_add_tuple
Table.has_key = _table_has_key
Table.copy = _table_copy
Table.keys = _table_keys
Table.items = _table_items
Table.total = _table_total
Table.normalize = _table_normalize
Table.project = _table_project
Table.entropy = _table_entropy
Table.__len__ = _table_len
Table.__iter__ = _table_iter
Table.from_dataframe = _table_from_dataframe
