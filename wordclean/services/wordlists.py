"""
Wordlist bundles: validation and resolution.

A bundle of wordlists arrives in one of three shapes:

  SharedTable      one table applied to every text/categorical column
  GroupedTable     one table split into per-column tables by a group column
  TableCollection  a mapping of column name -> table, with an optional
                   ``.global`` entry applied to every eligible column

Validation happens once, before any column is touched, and raises
ConfigurationError. Resolution turns a validated bundle into one of two
execution modes: a single shared table, or a per-column map with an
optional global fallback table.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from wordclean.errors import ConfigurationError
from wordclean.services.spelling import DEFAULT_KEY, as_key, is_missing, table_keys, table_levels

logger = logging.getLogger(__name__)

GLOBAL_KEY = ".global"


# ─────────────────────────────────────────────────────────────────────────────
# Lookup tables
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LookupTable:
    """One wordlist: keys in column 1, canonical values in column 2."""
    name: str
    frame: pd.DataFrame

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def keys(self) -> List[str]:
        return [k for k in table_keys(self.frame) if k is not None]

    @property
    def levels(self) -> List[Any]:
        """Canonical values in row order; drives category order of factor columns."""
        return table_levels(self.frame)

    def sorted_by(self, sort_by: Optional[str]) -> "LookupTable":
        """Rows ordered by ``sort_by`` (stable, ascending); unchanged if the column is absent."""
        if sort_by is None or sort_by not in self.frame.columns:
            return self
        try:
            frame = self.frame.sort_values(sort_by, kind="stable", na_position="last")
        except TypeError as ex:
            raise ConfigurationError(
                f"wordlist {self.name!r} cannot be sorted by {sort_by!r}: {ex}"
            ) from ex
        return LookupTable(self.name, frame)

    def without_keys(self, keys: Sequence[str]) -> "LookupTable":
        """Rows whose key is not in ``keys``."""
        exclude = set(keys)
        mask = [k is not None and k not in exclude for k in table_keys(self.frame)]
        return LookupTable(self.name, self.frame.loc[mask])


def is_lookup_table(obj: Any) -> bool:
    return isinstance(obj, pd.DataFrame) and obj.shape[1] >= 2


# ─────────────────────────────────────────────────────────────────────────────
# Bundle shapes
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SharedTable:
    table: LookupTable


@dataclass(frozen=True)
class GroupedTable:
    table: LookupTable
    group_column: Any


@dataclass(frozen=True)
class TableCollection:
    tables: Dict[str, LookupTable]


DictionaryBundle = Union[SharedTable, GroupedTable, TableCollection]

GroupRef = Optional[Union[int, str]]


class ExecutionMode(str, Enum):
    SHARED = "shared"
    PER_COLUMN = "per_column"


@dataclass
class ResolvedBundle:
    mode: ExecutionMode
    columns: List[str]
    shared: Optional[LookupTable] = None
    tables: Dict[str, LookupTable] = field(default_factory=dict)
    global_table: Optional[LookupTable] = None

    def specific_table(self, column: str) -> Optional[LookupTable]:
        if self.mode is ExecutionMode.SHARED:
            return self.shared
        return self.tables.get(column)


# ─────────────────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────────────────

def validate_dataset(df: Any) -> None:
    if not isinstance(df, pd.DataFrame) or df.shape[1] == 0:
        raise ConfigurationError("x must be a data frame with at least one column")
    if not df.columns.is_unique:
        raise ConfigurationError("column names of x must be unique")


def resolve_group_column(frame: pd.DataFrame, group_ref: GroupRef) -> Any:
    """Column label of ``frame`` named by ``group_ref`` (name or 1-based position)."""
    if isinstance(group_ref, (bool, np.bool_)):
        pass
    elif isinstance(group_ref, (int, np.integer, float, np.floating)):
        if float(group_ref).is_integer() and 1 <= int(group_ref) <= frame.shape[1]:
            return frame.columns[int(group_ref) - 1]
    elif isinstance(group_ref, str) and group_ref in frame.columns:
        return group_ref

    raise ConfigurationError(
        "group_ref must be the name or position of a column in the wordlist"
    )


def build_bundle(wordlists: Any, group_ref: GroupRef = 3) -> DictionaryBundle:
    """Check the shape of ``wordlists`` and wrap it in its bundle type."""
    if isinstance(wordlists, pd.DataFrame):
        if not is_lookup_table(wordlists):
            raise ConfigurationError("wordlists must have at least two columns")
        table = LookupTable("wordlist", wordlists)
        if group_ref is None:
            return SharedTable(table)
        return GroupedTable(table, resolve_group_column(wordlists, group_ref))

    if isinstance(wordlists, Mapping):
        if len(wordlists) == 0:
            raise ConfigurationError("wordlists must be a data frame or a list of data frames")
        if not all(is_lookup_table(w) for w in wordlists.values()):
            raise ConfigurationError(
                "everything in wordlists must be a data frame with at least two columns"
            )
        if any(is_missing(name) for name in wordlists):
            raise ConfigurationError("all dictionaries must be named")
        return TableCollection({
            as_key(name): LookupTable(as_key(name), w) for name, w in wordlists.items()
        })

    if isinstance(wordlists, (list, tuple)) and len(wordlists) > 0:
        if not all(is_lookup_table(w) for w in wordlists):
            raise ConfigurationError(
                "everything in wordlists must be a data frame with at least two columns"
            )
        raise ConfigurationError("all dictionaries must be named")

    raise ConfigurationError("wordlists must be a data frame or a list of data frames")


def _column_lookup(eligible: Sequence[Any]) -> Dict[str, Any]:
    """Map the text form of each eligible column name to the column label."""
    return {as_key(col): col for col in eligible}


def _group_labels(table: GroupedTable) -> List[Optional[str]]:
    return [
        None if is_missing(g) else as_key(g)
        for g in table.table.frame[table.group_column]
    ]


def validate_bundle(bundle: DictionaryBundle, eligible: Sequence[str]) -> None:
    """Cross-check the bundle against the dataset and the reserved keywords."""
    if isinstance(bundle, TableCollection):
        lookup = _column_lookup(eligible)
        unknown = [n for n in bundle.tables if n != GLOBAL_KEY and n not in lookup]
        if unknown:
            raise ConfigurationError(
                "all dictionaries must match a text or categorical column in the data; "
                f"no match for: {', '.join(unknown)}"
            )
        global_table = bundle.tables.get(GLOBAL_KEY)
        global_keys = global_table.keys if global_table is not None else []

    elif isinstance(bundle, GroupedTable):
        groups = _group_labels(bundle)
        global_keys = [
            k for k, g in zip(table_keys(bundle.table.frame), groups)
            if g == GLOBAL_KEY and k is not None
        ]

    else:
        global_keys = bundle.table.keys

    if DEFAULT_KEY in global_keys:
        raise ConfigurationError(f"the {DEFAULT_KEY} keyword cannot be used with {GLOBAL_KEY}")


# ─────────────────────────────────────────────────────────────────────────────
# Resolution
# ─────────────────────────────────────────────────────────────────────────────

def split_table(bundle: GroupedTable, sort_by: Optional[str] = None) -> Dict[str, LookupTable]:
    """Split a grouped table into per-group tables, in order of first appearance."""
    table = bundle.table.sorted_by(sort_by)
    groups = _group_labels(GroupedTable(table, bundle.group_column))
    tables: Dict[str, LookupTable] = {}
    for name in dict.fromkeys(g for g in groups if g is not None):
        mask = [g == name for g in groups]
        tables[name] = LookupTable(name, table.frame.loc[mask])
    return tables


def resolve_bundle(
    bundle: DictionaryBundle,
    eligible: Sequence[str],
    sort_by: Optional[str] = None,
) -> ResolvedBundle:
    """Decide the execution mode and the ordered columns to process."""
    eligible = list(eligible)
    lookup = _column_lookup(eligible)

    if isinstance(bundle, SharedTable):
        logger.warning("Using wordlist globally across all text/categorical columns.")
        return ResolvedBundle(
            mode=ExecutionMode.SHARED,
            columns=eligible,
            shared=bundle.table.sorted_by(sort_by),
        )

    if isinstance(bundle, GroupedTable):
        tables = split_table(bundle, sort_by)
        global_table = tables.pop(GLOBAL_KEY, None)
        ignored = [name for name in tables if name not in lookup]
        if ignored:
            logger.debug("Wordlist groups with no text/categorical column: %s", ignored)
        return ResolvedBundle(
            mode=ExecutionMode.PER_COLUMN,
            columns=eligible,
            tables={lookup[n]: t for n, t in tables.items() if n in lookup},
            global_table=global_table,
        )

    tables = {name: t.sorted_by(sort_by) for name, t in bundle.tables.items()}
    global_table = tables.pop(GLOBAL_KEY, None)
    tables = {lookup[n]: t for n, t in tables.items() if n in lookup}
    columns = list(tables)
    if global_table is not None:
        columns = list(dict.fromkeys(columns + eligible))
    return ResolvedBundle(
        mode=ExecutionMode.PER_COLUMN,
        columns=columns,
        tables=tables,
        global_table=global_table,
    )
