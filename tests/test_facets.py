import pandas as pd
import pytest

from chipqc_report.core.errors import InvalidPalette
from chipqc_report.core.facets import (
    QUALITATIVE_PALETTES,
    facet_columns,
    use_color,
    validate_palette,
)


class TestValidatePalette:
    def test_accepts_set1(self):
        assert validate_palette("Set1") == "Set1"

    @pytest.mark.parametrize("name", QUALITATIVE_PALETTES)
    def test_accepts_all_qualitative(self, name):
        assert validate_palette(name) == name

    def test_eight_palettes(self):
        assert len(set(QUALITATIVE_PALETTES)) == 8

    @pytest.mark.parametrize("name", ["Rainbow", "set1", "viridis", ""])
    def test_rejects_other_names(self, name):
        with pytest.raises(InvalidPalette):
            validate_palette(name)


class TestUseColor:
    def test_single_value(self):
        meta = pd.DataFrame({"Sample": ["a", "b"], "Condition": ["WT", "WT"]})
        assert use_color(meta, "Condition") is False

    def test_two_values(self):
        meta = pd.DataFrame({"Sample": ["a", "b"], "Condition": ["WT", "KO"]})
        assert use_color(meta, "Condition") is True

    def test_missing_column(self):
        meta = pd.DataFrame({"Sample": ["a", "b"]})
        assert use_color(meta, "Condition") is False


def test_facet_columns_keeps_present_in_order():
    meta = pd.DataFrame({"Sample": ["a"], "Factor": ["x"], "Tissue": ["y"]})
    assert facet_columns(meta, "Tissue", "Missing", None, "Factor") == [
        "Tissue",
        "Factor",
    ]
