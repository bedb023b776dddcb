"""
Single-column spelling cleaner.

Rewrites the values of one column using one wordlist: column 1 of the
wordlist holds the keys to look for, column 2 the canonical values that
replace them. Matching is by exact key. Two reserved keys are understood:

  .default   replaces every non-missing value that has no key of its own
             and is not already one of the canonical values
  .missing   replaces missing entries (None, NaN, NA, blank strings)

Nothing is raised for expected problems. Unmatched values come back as
warnings and a malformed wordlist comes back as an error, in which case no
values are returned and the column should be left as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from wordclean.services.diagnostics import ColumnError, ColumnWarning

DEFAULT_KEY = ".default"
MISSING_KEY = ".missing"

_NOTHING = object()


@dataclass
class SpellingResult:
    """Outcome of one substitution pass.

    ``values`` is None when no value changed (or the wordlist was rejected).
    ``levels`` lists the canonical values of the wordlist in row order.
    """
    values: Optional[pd.Series] = None
    warnings: List[ColumnWarning] = field(default_factory=list)
    errors: List[ColumnError] = field(default_factory=list)
    levels: List[Any] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.values is not None


# ─────────────────────────────────────────────────────────────────────────────
# Value helpers
# ─────────────────────────────────────────────────────────────────────────────

def is_missing(value: Any) -> bool:
    """True for None, NaN, NA and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def as_key(value: Any) -> str:
    """Text form used to compare data values with wordlist keys.

    Integral floats lose their trailing ``.0`` so that keys read as numbers
    still match text codes (``1.0`` matches ``"1"``).
    """
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value))
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


def same_value(a: Any, b: Any) -> bool:
    """Equality that treats two missing entries of the same kind as equal."""
    a_missing, b_missing = is_missing(a), is_missing(b)
    if a_missing or b_missing:
        return a_missing and b_missing and type(a) is type(b) and (
            not isinstance(a, str) or a == b
        )
    return a == b


def table_keys(table: pd.DataFrame) -> List[Optional[str]]:
    """Row-aligned keys of a wordlist; None where the key cell is missing."""
    return [None if is_missing(k) else as_key(k) for k in table.iloc[:, 0]]


def table_levels(table: pd.DataFrame) -> List[Any]:
    """Canonical values of a wordlist, de-duplicated, in row order."""
    return list(dict.fromkeys(v for v in table.iloc[:, 1] if not is_missing(v)))


def build_mapping(table: pd.DataFrame) -> Tuple[Dict[str, Any], List[ColumnError]]:
    """Build ``{key: canonical}`` from a wordlist.

    Repeated rows are fine; a key given two different canonical values is
    reported as an error.
    """
    mapping: Dict[str, Any] = {}
    conflicts: Dict[str, List[Any]] = {}

    for key, value in zip(table_keys(table), table.iloc[:, 1]):
        if key is None:
            continue
        if key not in mapping:
            mapping[key] = value
        elif not same_value(mapping[key], value):
            conflicts.setdefault(key, [mapping[key]])
            if not any(same_value(v, value) for v in conflicts[key]):
                conflicts[key].append(value)

    errors = [
        ColumnError(
            f"key {key!r} has conflicting values: "
            + ", ".join(repr(v) for v in values)
        )
        for key, values in conflicts.items()
    ]
    return mapping, errors


# ─────────────────────────────────────────────────────────────────────────────
# Substitution
# ─────────────────────────────────────────────────────────────────────────────

def clean_spelling(
    values: Union[pd.Series, Iterable[Any]],
    wordlist: pd.DataFrame,
    allow_default: bool = True,
) -> SpellingResult:
    """Replace the values of one column according to ``wordlist``.

    Args:
        values: Column values (Series of any dtype, or a plain sequence)
        wordlist: DataFrame with keys in column 1 and canonical values in column 2
        allow_default: Whether a ``.default`` key may be used

    Returns:
        SpellingResult with the new values (object dtype, same index) or None
    """
    if not isinstance(wordlist, pd.DataFrame) or wordlist.shape[1] < 2:
        return SpellingResult(errors=[
            ColumnError("wordlist must be a data frame with at least two columns")
        ])

    mapping, errors = build_mapping(wordlist)
    levels = table_levels(wordlist)
    if errors:
        return SpellingResult(errors=errors, levels=levels)

    if DEFAULT_KEY in mapping and not allow_default:
        return SpellingResult(
            errors=[ColumnError(f"the {DEFAULT_KEY} keyword is not allowed in this wordlist")],
            levels=levels,
        )

    series = values if isinstance(values, pd.Series) else pd.Series(list(values), dtype=object)
    default = mapping.get(DEFAULT_KEY, _NOTHING)
    missing_to = mapping.get(MISSING_KEY, _NOTHING)
    # Values already equal to a canonical value are never caught by .default
    canonical = {as_key(v) for v in levels}

    out: List[Any] = []
    unmatched: Dict[str, int] = {}
    changed = False

    for val in series.astype(object):
        if is_missing(val):
            new = val if missing_to is _NOTHING else missing_to
        else:
            key = as_key(val)
            if key in mapping:
                new = mapping[key]
            elif default is not _NOTHING:
                new = val if key in canonical else default
            else:
                unmatched[key] = unmatched.get(key, 0) + 1
                new = val

        if not same_value(new, val):
            changed = True
        out.append(new)

    warnings = [ColumnWarning(value=k, count=n) for k, n in unmatched.items()]
    new_values = pd.Series(out, index=series.index, dtype=object, name=series.name) if changed else None
    return SpellingResult(values=new_values, warnings=warnings, levels=levels)
