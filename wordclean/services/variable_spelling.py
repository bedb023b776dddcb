"""
VariableSpelling — multi-column wordlist cleaning.

Applies a bundle of wordlists to every text and categorical column of a
DataFrame. Numeric, date and other protected columns are never touched.

Order of work:
  1. Validate the dataset and the wordlists (ConfigurationError, no mutation)
  2. Resolve the bundle to a shared table or a per-column map + .global
  3. Plan and run the substitution passes column by column
  4. Collect warnings/errors per column into one diagnostic report

When a column has its own wordlist and a .global wordlist also exists, the
.global rows whose keys the column wordlist does not define run first, then
the column wordlist runs in full. Column definitions always win.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from wordclean.errors import WordlistWarning
from wordclean.services.column_kinds import ColumnKind, KindsArg, eligible_columns, resolve_kinds
from wordclean.services.diagnostics import (
    ColumnError,
    ColumnWarning,
    DiagnosticReport,
    DiagnosticsCollector,
)
from wordclean.services.spelling import SpellingResult, clean_spelling, is_missing, same_value
from wordclean.services.wordlists import (
    ExecutionMode,
    GroupRef,
    LookupTable,
    build_bundle,
    resolve_bundle,
    validate_bundle,
    validate_dataset,
)

logger = logging.getLogger(__name__)

# Roles a wordlist can play in a pass
ROLE_SHARED = "shared"
ROLE_GLOBAL = "global"
ROLE_GLOBAL_REMAINDER = "global_remainder"
ROLE_SPECIFIC = "specific"


@dataclass
class PassResult:
    """Result of applying one wordlist to one column."""
    column: str
    role: str
    changes_made: int = 0
    warnings: List[ColumnWarning] = field(default_factory=list)
    errors: List[ColumnError] = field(default_factory=list)


class VariableSpelling:
    """
    Cleans the spelling of many columns from one bundle of wordlists.

    Usage:
        vs = VariableSpelling(df, wordlists, group_ref="grp", sort_by="orders")
        summary = vs.run_all()
        cleaned_df = vs.df
        report = vs.report()       # per-column warnings and errors

    The constructor does all validation, so a bad bundle raises
    ConfigurationError before any column is read for cleaning.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        wordlists: Any,
        group_ref: GroupRef = 3,
        sort_by: Optional[str] = None,
        kinds: KindsArg = None,
    ):
        validate_dataset(df)
        self.kind_map: Dict[str, ColumnKind] = resolve_kinds(df, kinds)
        self.eligible: List[str] = eligible_columns(self.kind_map)

        bundle = build_bundle(wordlists, group_ref)
        validate_bundle(bundle, self.eligible)
        self.resolved = resolve_bundle(bundle, self.eligible, sort_by)
        logger.debug(
            "Resolved wordlists: mode=%s columns=%s global=%s",
            self.resolved.mode.value,
            self.resolved.columns,
            self.resolved.global_table is not None,
        )

        self.df = df.copy()
        self.results: List[PassResult] = []
        self.logs: List[Dict[str, Any]] = []
        self.diagnostics = DiagnosticsCollector(self.resolved.columns)

    # ─────────────────────────────────────────────────────────────────
    # Planning
    # ─────────────────────────────────────────────────────────────────

    def plan_column(self, col: str) -> List[Tuple[str, LookupTable]]:
        """Wordlists to apply to ``col``, in application order, with their role."""
        resolved = self.resolved

        if resolved.mode is ExecutionMode.SHARED:
            return [(ROLE_SHARED, resolved.shared)] if resolved.shared is not None else []

        specific = resolved.tables.get(col)
        global_table = resolved.global_table

        if specific is None:
            return [(ROLE_GLOBAL, global_table)] if global_table is not None else []

        if global_table is None:
            return [(ROLE_SPECIFIC, specific)]

        remainder = global_table.without_keys(specific.keys)
        if len(remainder) == 0:
            return [(ROLE_SPECIFIC, specific)]
        return [(ROLE_GLOBAL_REMAINDER, remainder), (ROLE_SPECIFIC, specific)]

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    def _categories(self, original: pd.Series, result: SpellingResult,
                    table: LookupTable, allow_default: bool) -> List[Any]:
        """Category order: wordlist levels first, then surviving original categories.

        An original category survives when some cleaned value still equals it,
        or when the wordlist would leave it as it is (unused categories with no
        key of their own and no ``.default`` to catch them).
        """
        present = list(dict.fromkeys(v for v in result.values if not pd.isna(v)))
        present_set = set(present)

        old_categories = list(original.cat.categories)
        renamed = clean_spelling(old_categories, table.frame, allow_default=allow_default).values
        if renamed is None:
            untouched = [True] * len(old_categories)
        else:
            untouched = [same_value(c, r) for c, r in zip(old_categories, renamed)]

        categories = [lv for lv in result.levels if lv in present_set]
        categories += [
            c for c, keep in zip(old_categories, untouched)
            if keep or c in present_set
        ]
        categories += present
        return list(dict.fromkeys(categories))

    def _write_column(self, col: str, result: SpellingResult, table: LookupTable,
                      allow_default: bool) -> None:
        original = self.df[col]
        new_values = result.values
        if isinstance(original.dtype, pd.CategoricalDtype):
            self.df[col] = pd.Categorical(
                new_values,
                categories=self._categories(original, result, table, allow_default),
                ordered=original.cat.ordered,
            )
        elif isinstance(original.dtype, pd.StringDtype):
            self.df[col] = new_values.astype(original.dtype)
        else:
            self.df[col] = new_values

    def apply_wordlist(self, col: str, role: str, table: LookupTable) -> PassResult:
        """Run one substitution pass on the current state of ``col``."""
        current = self.df[col]
        allow_default = role == ROLE_SPECIFIC
        result = clean_spelling(current, table.frame, allow_default=allow_default)

        pass_result = PassResult(
            column=col,
            role=role,
            warnings=list(result.warnings),
            errors=list(result.errors),
        )

        if result.values is not None:
            before = current.astype(object)
            pass_result.changes_made = sum(
                1 for old, new in zip(before, result.values)
                if not (is_missing(old) and is_missing(new)) and not same_value(old, new)
            )
            self._write_column(col, result, table, allow_default)
            self.logs.append({
                "action": "clean_spelling",
                "column_name": col,
                "wordlist": table.name,
                "role": role,
                "changes_made": pass_result.changes_made,
            })

        logger.debug(
            "Column %r: %s pass with %d rows, %d changes, %d warnings, %d errors",
            col, role, len(table), pass_result.changes_made,
            len(pass_result.warnings), len(pass_result.errors),
        )
        return pass_result

    def run_for_column(self, col: str) -> List[PassResult]:
        results = []
        for role, table in self.plan_column(col):
            pass_result = self.apply_wordlist(col, role, table)
            self.diagnostics.add(col, pass_result.warnings, pass_result.errors)
            results.append(pass_result)
        return results

    def run_all(self) -> Dict[str, Any]:
        """Clean every column in the resolved order. Returns a summary dict."""
        columns_changed = []

        for col in self.resolved.columns:
            results = self.run_for_column(col)
            self.results.extend(results)
            if any(r.changes_made > 0 for r in results):
                columns_changed.append(col)

        report = self.diagnostics.report()
        summary = {
            "mode": self.resolved.mode.value,
            "columns_processed": len(self.resolved.columns),
            "columns_changed": columns_changed,
            "total_changes": sum(r.changes_made for r in self.results),
            "warnings": report.n_warnings,
            "errors": report.n_errors,
        }
        logger.info(
            "Wordlist cleaning: %d columns processed, %d changed, %d values rewritten",
            summary["columns_processed"], len(columns_changed), summary["total_changes"],
        )
        return summary

    def report(self) -> DiagnosticReport:
        return self.diagnostics.report()


def normalize(
    df: pd.DataFrame,
    wordlists: Any,
    group_ref: GroupRef = 3,
    sort_by: Optional[str] = None,
    kinds: KindsArg = None,
    report_diagnostics: bool = False,
) -> pd.DataFrame:
    """Clean the spelling of text and categorical columns with wordlists.

    Args:
        df: Dataset to clean; it is not modified
        wordlists: One DataFrame, or a mapping of column name -> DataFrame
            (``.global`` names a wordlist applied to every eligible column)
        group_ref: Name or 1-based position of the wordlist column that says
            which dataset column each row belongs to; None applies a single
            wordlist to every eligible column
        sort_by: Wordlist column that orders the canonical values
            (and therefore the categories of categorical columns)
        kinds: Column kinds, as a mapping or a sequence aligned with the
            columns; inferred from the dtypes when None
        report_diagnostics: Emit one WordlistWarning summarizing every
            unmatched value and wordlist error once all columns are done

    Returns:
        A cleaned copy of ``df``

    Raises:
        ConfigurationError: before any column is cleaned, if the inputs
            cannot be used
    """
    engine = VariableSpelling(df, wordlists, group_ref=group_ref, sort_by=sort_by, kinds=kinds)
    engine.run_all()

    if report_diagnostics:
        report = engine.report()
        if not report.is_empty:
            warnings.warn(WordlistWarning(report.render(), report), stacklevel=2)

    return engine.df
