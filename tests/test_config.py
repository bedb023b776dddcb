"""
Tests for Settings — environment-driven defaults.
"""

from wordclean.config import Settings


class TestDefaultGroupRef:
    def test_default_is_third_column(self):
        assert Settings().DEFAULT_GROUP_REF == 3

    def test_column_name_accepted(self, monkeypatch):
        monkeypatch.setenv("WORDCLEAN_DEFAULT_GROUP_REF", "grp")
        assert Settings().DEFAULT_GROUP_REF == "grp"

    def test_digits_read_as_position(self, monkeypatch):
        monkeypatch.setenv("WORDCLEAN_DEFAULT_GROUP_REF", "2")
        assert Settings().DEFAULT_GROUP_REF == 2
