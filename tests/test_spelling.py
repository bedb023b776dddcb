"""
Tests for the single-column spelling cleaner.

Covers key matching, the .default and .missing keywords, conflicting
wordlists and the warnings returned for unmatched values.
"""

import numpy as np
import pandas as pd
import pytest

from wordclean.services.spelling import (
    DEFAULT_KEY,
    MISSING_KEY,
    as_key,
    build_mapping,
    clean_spelling,
    is_missing,
    table_keys,
    table_levels,
)


def wordlist(keys, values):
    return pd.DataFrame({"options": keys, "values": values})


YESNO = wordlist(["y", "n", "u"], ["yes", "no", "unknown"])


# ============================================================================
# VALUE HELPERS
# ============================================================================

class TestIsMissing:
    def test_none_and_nan(self):
        assert is_missing(None)
        assert is_missing(np.nan)
        assert is_missing(pd.NA)

    def test_blank_strings(self):
        assert is_missing("")
        assert is_missing("   ")

    def test_real_values(self):
        assert not is_missing("x")
        assert not is_missing(0)
        assert not is_missing(False)


class TestAsKey:
    def test_integral_float_drops_decimal(self):
        assert as_key(1.0) == "1"
        assert as_key(np.float64(3.0)) == "3"

    def test_int_and_text_agree(self):
        assert as_key(1) == as_key("1")
        assert as_key(np.int64(7)) == "7"

    def test_non_integral_float_kept(self):
        assert as_key(1.5) == "1.5"

    def test_text_not_stripped(self):
        assert as_key(" y") == " y"


class TestTableHelpers:
    def test_keys_row_aligned(self):
        wl = wordlist(["a", None, 2.0], ["A", "B", "C"])
        assert table_keys(wl) == ["a", None, "2"]

    def test_levels_unique_in_row_order(self):
        wl = wordlist(["y", "yes", "n", "u"], ["Yes", "Yes", "No", np.nan])
        assert table_levels(wl) == ["Yes", "No"]

    def test_repeated_identical_rows_ok(self):
        mapping, errors = build_mapping(wordlist(["y", "y"], ["yes", "yes"]))
        assert mapping == {"y": "yes"}
        assert errors == []

    def test_conflicting_values_reported(self):
        mapping, errors = build_mapping(wordlist(["y", "y", "y"], ["yes", "no", "yes"]))
        assert len(errors) == 1
        assert "'y'" in errors[0].message
        assert "'yes'" in errors[0].message and "'no'" in errors[0].message


# ============================================================================
# SUBSTITUTION
# ============================================================================

class TestCleanSpelling:
    def test_exact_matches_replaced(self):
        res = clean_spelling(pd.Series(["y", "n", "u"]), YESNO)
        assert list(res.values) == ["yes", "no", "unknown"]
        assert res.warnings == []
        assert res.errors == []

    def test_unmatched_values_warned_once_per_value(self):
        res = clean_spelling(pd.Series(["y", "xx", "xx", "zz"]), YESNO)
        assert list(res.values) == ["yes", "xx", "xx", "zz"]
        assert [(w.value, w.count) for w in res.warnings] == [("xx", 2), ("zz", 1)]

    def test_no_change_returns_none(self):
        res = clean_spelling(pd.Series(["yes", "no"]), YESNO)
        assert res.values is None
        assert not res.changed
        assert len(res.warnings) == 2

    def test_missing_values_never_warned(self):
        res = clean_spelling(pd.Series(["y", None, np.nan, ""]), YESNO)
        assert res.values.iloc[0] == "yes"
        assert res.values.iloc[1] is None
        assert pd.isna(res.values.iloc[2])
        assert res.values.iloc[3] == ""
        assert res.warnings == []

    def test_default_catches_unmatched(self):
        wl = wordlist([1, DEFAULT_KEY], ["Yes", "Unknown"])
        res = clean_spelling(pd.Series(["1", "2", "3"]), wl)
        assert list(res.values) == ["Yes", "Unknown", "Unknown"]
        assert res.warnings == []

    def test_default_skips_canonical_values(self):
        wl = wordlist(["1", DEFAULT_KEY], ["Facility 1", "Unknown"])
        res = clean_spelling(pd.Series(["1", "Facility 1", "Unknown", "C"]), wl)
        assert list(res.values) == ["Facility 1", "Facility 1", "Unknown", "Unknown"]
        assert res.warnings == []

    def test_default_does_not_touch_missing(self):
        wl = wordlist(["a", DEFAULT_KEY], ["A", "Other"])
        res = clean_spelling(pd.Series(["a", None, "b"]), wl)
        assert list(res.values) == ["A", None, "Other"]

    def test_default_refused_when_not_allowed(self):
        wl = wordlist(["a", DEFAULT_KEY], ["A", "Other"])
        res = clean_spelling(pd.Series(["a", "b"]), wl, allow_default=False)
        assert res.values is None
        assert len(res.errors) == 1
        assert DEFAULT_KEY in res.errors[0].message

    def test_missing_keyword_fills_missing(self):
        wl = wordlist(["y", MISSING_KEY], ["yes", "missing"])
        res = clean_spelling(pd.Series(["y", None, "", np.nan]), wl)
        assert list(res.values) == ["yes", "missing", "missing", "missing"]

    def test_conflicting_wordlist_returns_error_and_no_values(self):
        wl = wordlist(["y", "y"], ["yes", "no"])
        res = clean_spelling(pd.Series(["y"]), wl)
        assert res.values is None
        assert len(res.errors) == 1

    def test_malformed_wordlist(self):
        res = clean_spelling(pd.Series(["y"]), pd.DataFrame({"options": ["y"]}))
        assert res.values is None
        assert len(res.errors) == 1

    def test_numeric_keys_match_text_codes(self):
        wl = wordlist([0.0, 1.0], ["No", "Yes"])
        res = clean_spelling(pd.Series(["0", "1"]), wl)
        assert list(res.values) == ["No", "Yes"]

    def test_plain_sequence_input(self):
        res = clean_spelling(["n", "y"], YESNO)
        assert list(res.values) == ["no", "yes"]

    def test_index_preserved(self):
        s = pd.Series(["y", "n"], index=[10, 20])
        res = clean_spelling(s, YESNO)
        assert list(res.values.index) == [10, 20]

    def test_categorical_input(self):
        s = pd.Series(pd.Categorical(["y", "n", "y"]))
        res = clean_spelling(s, YESNO)
        assert list(res.values) == ["yes", "no", "yes"]

    def test_levels_reported(self):
        res = clean_spelling(pd.Series(["y"]), YESNO)
        assert res.levels == ["yes", "no", "unknown"]

    def test_chained_values_not_reapplied_within_pass(self):
        wl = wordlist(["a", "b"], ["b", "c"])
        res = clean_spelling(pd.Series(["a", "b"]), wl)
        assert list(res.values) == ["b", "c"]
