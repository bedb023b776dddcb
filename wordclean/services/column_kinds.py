"""
Column Kind Detection

Classifies each column of a DataFrame as text, categorical or other.
Only text and categorical columns are eligible for wordlist cleaning;
numeric, date and mixed columns are protected from conversion.
"""

from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from wordclean.errors import ConfigurationError


class ColumnKind(str, Enum):
    TEXT = "text"
    CATEGORICAL = "categorical"
    OTHER = "other"


# Accepted spellings when kinds are supplied by the caller
KIND_ALIASES: Dict[str, ColumnKind] = {
    "text": ColumnKind.TEXT,
    "character": ColumnKind.TEXT,
    "string": ColumnKind.TEXT,
    "categorical": ColumnKind.CATEGORICAL,
    "category": ColumnKind.CATEGORICAL,
    "factor": ColumnKind.CATEGORICAL,
    "other": ColumnKind.OTHER,
}

ELIGIBLE_KINDS = {ColumnKind.TEXT, ColumnKind.CATEGORICAL}

KindsArg = Optional[Union[Mapping[str, Union[str, ColumnKind]], Sequence[Union[str, ColumnKind]]]]


def detect_column_kind(series: pd.Series) -> ColumnKind:
    """Classify a single column by its dtype and, for object columns, its values."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        return ColumnKind.CATEGORICAL

    if isinstance(series.dtype, pd.StringDtype):
        return ColumnKind.TEXT

    if series.dtype == object:
        inferred = pd.api.types.infer_dtype(series, skipna=True)
        if inferred in ("string", "empty"):
            return ColumnKind.TEXT

    return ColumnKind.OTHER


def classify_columns(df: pd.DataFrame) -> Dict[str, ColumnKind]:
    """Return ``{column: ColumnKind}`` for every column of ``df``."""
    return {col: detect_column_kind(df[col]) for col in df.columns}


def _coerce_kind(kind: Union[str, ColumnKind]) -> ColumnKind:
    if isinstance(kind, ColumnKind):
        return kind
    try:
        return KIND_ALIASES[str(kind).strip().lower()]
    except KeyError:
        raise ConfigurationError(f"unknown column kind: {kind!r}") from None


def resolve_kinds(df: pd.DataFrame, kinds: KindsArg = None) -> Dict[str, ColumnKind]:
    """Return the kind of every column, inferring them when ``kinds`` is None.

    ``kinds`` may be a mapping (columns absent from it count as ``other``) or
    a sequence aligned with ``df.columns``.
    """
    if kinds is None:
        return classify_columns(df)

    if isinstance(kinds, Mapping):
        return {
            col: _coerce_kind(kinds[col]) if col in kinds else ColumnKind.OTHER
            for col in df.columns
        }

    if isinstance(kinds, str) or len(kinds) != len(df.columns):
        raise ConfigurationError(
            "kinds must be a mapping or a sequence with one entry per column"
        )
    return {col: _coerce_kind(k) for col, k in zip(df.columns, kinds)}


def eligible_columns(kind_map: Mapping[str, ColumnKind]) -> List[str]:
    """Columns (in dataset order) that wordlists may rewrite."""
    return [col for col, kind in kind_map.items() if kind in ELIGIBLE_KINDS]
