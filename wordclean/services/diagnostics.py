"""
Diagnostics for wordlist cleaning runs.

Every substitution pass returns warning and error records. The collector
files them per column (in iteration order) and builds a single report that
can be raised as one consolidated warning at the end of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional


# ─────────────────────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ColumnWarning:
    """A value with no matching key (and no .default) that was left as is."""
    value: str
    count: int = 1
    column: Optional[str] = None

    @property
    def message(self) -> str:
        return f"{self.value!r} not found in wordlist ({self.count} row{'s' if self.count != 1 else ''})"


@dataclass(frozen=True)
class ColumnError:
    """A malformed wordlist detected while cleaning one column."""
    message: str
    column: Optional[str] = None


def format_labels(columns: Iterable[str]) -> dict[str, str]:
    """Display labels for columns: padded to one width, then spaces become underscores."""
    names = [str(c) for c in columns]
    width = max((len(n) for n in names), default=0)
    return {col: name.ljust(width).replace(" ", "_") for col, name in zip(columns, names)}


# ─────────────────────────────────────────────────────────────────────────────
# Report
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class DiagnosticReport:
    labels: dict[str, str] = field(default_factory=dict)
    warnings: dict[str, list[ColumnWarning]] = field(default_factory=dict)
    errors: dict[str, list[ColumnError]] = field(default_factory=dict)

    @property
    def n_warnings(self) -> int:
        return sum(len(v) for v in self.warnings.values())

    @property
    def n_errors(self) -> int:
        return sum(len(v) for v in self.errors.values())

    @property
    def is_empty(self) -> bool:
        return self.n_warnings == 0 and self.n_errors == 0

    def render(self) -> str:
        """Text of the consolidated warning."""
        lines = ["Some values could not be cleaned with the supplied wordlists."]

        if self.warnings:
            lines.append("")
            lines.append("Values not found in the wordlists:")
            for col, records in self.warnings.items():
                found = ", ".join(f"{r.value!r} ({r.count})" for r in records)
                lines.append(f"  {self.labels.get(col, col)} : {found}")

        if self.errors:
            lines.append("")
            lines.append("Wordlist errors:")
            for col, records in self.errors.items():
                for r in records:
                    lines.append(f"  {self.labels.get(col, col)} : {r.message}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "warnings": {
                col: [{"value": r.value, "count": r.count} for r in records]
                for col, records in self.warnings.items()
            },
            "errors": {
                col: [r.message for r in records]
                for col, records in self.errors.items()
            },
            "n_warnings": self.n_warnings,
            "n_errors": self.n_errors,
        }


class DiagnosticsCollector:
    """Collects per-column records in the order columns are processed."""

    def __init__(self, columns: Iterable[str]):
        self.columns = list(columns)
        self.labels = format_labels(self.columns)
        self._warnings: dict[str, list[ColumnWarning]] = {}
        self._errors: dict[str, list[ColumnError]] = {}

    def add(self, column: str, warnings: Iterable[ColumnWarning],
            errors: Iterable[ColumnError]) -> None:
        for w in warnings:
            self._warnings.setdefault(column, []).append(replace(w, column=column))
        for e in errors:
            self._errors.setdefault(column, []).append(replace(e, column=column))

    def report(self) -> DiagnosticReport:
        # Column order follows iteration order, not the order records arrived in
        order = {col: i for i, col in enumerate(self.columns)}
        return DiagnosticReport(
            labels=dict(self.labels),
            warnings={c: list(self._warnings[c]) for c in sorted(self._warnings, key=order.get)},
            errors={c: list(self._errors[c]) for c in sorted(self._errors, key=order.get)},
        )
