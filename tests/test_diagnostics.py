from wordclean.services.diagnostics import (
    ColumnError,
    ColumnWarning,
    DiagnosticReport,
    DiagnosticsCollector,
    format_labels,
)


class TestFormatLabels:
    def test_padding_and_spaces_become_underscores(self):
        labels = format_labels(["age group", "sex"])
        assert labels == {"age group": "age_group", "sex": "sex______"}

    def test_empty(self):
        assert format_labels([]) == {}


class TestColumnWarning:
    def test_message_pluralised(self):
        assert ColumnWarning("xx").message == "'xx' not found in wordlist (1 row)"
        assert ColumnWarning("xx", count=3).message == "'xx' not found in wordlist (3 rows)"


class TestDiagnosticsCollector:
    def test_records_tagged_with_column(self):
        dc = DiagnosticsCollector(["a"])
        dc.add("a", [ColumnWarning("xx")], [ColumnError("bad")])
        report = dc.report()
        assert report.warnings["a"][0].column == "a"
        assert report.errors["a"][0].column == "a"

    def test_report_follows_column_order(self):
        dc = DiagnosticsCollector(["b", "a"])
        dc.add("a", [ColumnWarning("x")], [])
        dc.add("b", [ColumnWarning("y")], [])
        assert list(dc.report().warnings) == ["b", "a"]

    def test_columns_without_records_absent(self):
        dc = DiagnosticsCollector(["a", "b"])
        dc.add("a", [], [])
        report = dc.report()
        assert report.is_empty
        assert report.warnings == {}


class TestDiagnosticReport:
    def make_report(self):
        dc = DiagnosticsCollector(["sym", "grp col"])
        dc.add("sym", [ColumnWarning("xx", 2), ColumnWarning("zz")], [])
        dc.add("grp col", [], [ColumnError("key 'y' has conflicting values: 'yes', 'no'")])
        return dc.report()

    def test_counts(self):
        report = self.make_report()
        assert report.n_warnings == 2
        assert report.n_errors == 1
        assert not report.is_empty

    def test_render(self):
        text = self.make_report().render()
        assert "sym____ : 'xx' (2), 'zz' (1)" in text
        assert "grp_col : key 'y' has conflicting values: 'yes', 'no'" in text
        assert text.index("Values not found") < text.index("Wordlist errors")

    def test_to_dict(self):
        d = self.make_report().to_dict()
        assert d["warnings"]["sym"] == [{"value": "xx", "count": 2}, {"value": "zz", "count": 1}]
        assert d["errors"] == {"grp col": ["key 'y' has conflicting values: 'yes', 'no'"]}
        assert d["n_warnings"] == 2

    def test_empty_report(self):
        assert DiagnosticReport().is_empty
