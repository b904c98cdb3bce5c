"""
Markup Parser Tests - Unit Tests for Vendor Page Extraction

This module contains unit tests for parse_markup: price field extraction,
change indicator extraction and the down-direction detection rules.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- goldrate.adapters.crawlers.markup_parser (parse_markup)
- goldrate.domain.models (ChangeIndicator)
"""
import pytest  # Testing framework for writing and running tests

from goldrate.adapters.crawlers.markup_parser import ParsedMarkup, parse_markup  # Parser under test
from goldrate.domain.models import ChangeIndicator  # Expected change values


QATAR_PAGE = """
<html><body>
  <table>
    <tr class="row red-font">
      <td>24K</td>
      <td><span data-price="GXAUUSD_QAR">
        300.00
      </span></td>
      <td><span id="GXAUUSD_QAR_CHANGE"> -2.50 </span></td>
    </tr>
    <tr class="row green-font">
      <td>22K</td>
      <td><span data-price="22GXAUUSD_QAR">275.00</span></td>
      <td><span id="22GXAUUSD_QAR_CHANGE">1.10</span></td>
    </tr>
  </table>
  <div class="spot"><b data-price="XAUUSD_QAR">9,300.00</b></div>
  <div><b data-price="GXAUUSD_AED">290.00</b><span id="GXAUUSD_AED_CHANGE">0.40</span></div>
  <div><b data-price="EMPTY_QAR">   </b></div>
</body></html>
"""


class TestPriceFields:
    def test_extracts_data_price_elements(self):
        fields, _ = parse_markup(QATAR_PAGE)

        assert fields["GXAUUSD_QAR"] == "300.00"
        assert fields["22GXAUUSD_QAR"] == "275.00"
        assert fields["GXAUUSD_AED"] == "290.00"

    def test_keeps_thousands_separators(self):
        fields, _ = parse_markup(QATAR_PAGE)
        assert fields["XAUUSD_QAR"] == "9,300.00"

    def test_removes_inner_whitespace(self):
        fields, _ = parse_markup('<span data-price="XAUUSD_QAR"> 9 300 .00\n</span>')
        assert fields["XAUUSD_QAR"] == "9300.00"

    def test_skips_empty_values(self):
        fields, _ = parse_markup(QATAR_PAGE)
        assert "EMPTY_QAR" not in fields

    def test_currency_prefix_filters_other_currencies(self):
        fields, changes = parse_markup(QATAR_PAGE, "QAR")

        assert "GXAUUSD_AED" not in fields
        assert "GXAUUSD_AED_CHANGE" not in changes
        assert fields["GXAUUSD_QAR"] == "300.00"
        assert "GXAUUSD_QAR_CHANGE" in changes

    def test_no_matches_gives_empty_maps(self):
        result = parse_markup("<html><body><p>Maintenance</p></body></html>")

        assert result == ParsedMarkup(fields={}, changes={})

    def test_empty_document(self):
        fields, changes = parse_markup("")
        assert fields == {}
        assert changes == {}


class TestChangeIndicators:
    def test_change_values_are_stripped(self):
        _, changes = parse_markup(QATAR_PAGE)
        assert changes["GXAUUSD_QAR_CHANGE"].value == "-2.50"

    def test_down_class_and_minus(self):
        _, changes = parse_markup(QATAR_PAGE)
        assert changes["GXAUUSD_QAR_CHANGE"] == ChangeIndicator(value="-2.50", is_down=True)

    def test_up_class(self):
        _, changes = parse_markup(QATAR_PAGE)
        assert changes["22GXAUUSD_QAR_CHANGE"] == ChangeIndicator(value="1.10", is_down=False)

    def test_leading_minus_without_class_is_down(self):
        _, changes = parse_markup('<span id="XAUUSD_QAR_CHANGE">-1.25</span>')
        assert changes["XAUUSD_QAR_CHANGE"].is_down is True

    def test_down_class_without_minus_is_down(self):
        html = '<div class="red-font"><span id="XAUUSD_QAR_CHANGE">1.25</span></div>'
        _, changes = parse_markup(html)
        assert changes["XAUUSD_QAR_CHANGE"] == ChangeIndicator(value="1.25", is_down=True)

    def test_class_on_the_element_itself(self):
        _, changes = parse_markup('<span class="red-font" id="XAGUSD_QAR_CHANGE">0.15</span>')
        assert changes["XAGUSD_QAR_CHANGE"].is_down is True

    def test_nearest_trend_wrapper_wins(self):
        html = (
            '<div class="red-font">'
            '<p class="green-font"><span id="XAUUSD_QAR_CHANGE">3.00</span></p>'
            '</div>'
        )
        _, changes = parse_markup(html)
        assert changes["XAUUSD_QAR_CHANGE"].is_down is False

    def test_no_class_positive_is_up(self):
        _, changes = parse_markup('<span id="XAUUSD_QAR_CHANGE">0.80</span>')
        assert changes["XAUUSD_QAR_CHANGE"].is_down is False

    def test_empty_change_defaults_to_zero(self):
        _, changes = parse_markup('<span id="XAUUSD_QAR_CHANGE">  </span>')
        assert changes["XAUUSD_QAR_CHANGE"] == ChangeIndicator(value="0", is_down=False)

    def test_ids_without_suffix_are_ignored(self):
        _, changes = parse_markup('<span id="XAUUSD_QAR">1</span><span id="CHANGE_LOG">x</span>')
        assert changes == {}


class TestPurity:
    def test_parse_is_idempotent(self):
        assert parse_markup(QATAR_PAGE, "QAR") == parse_markup(QATAR_PAGE, "QAR")

    @pytest.mark.parametrize("prefix", ["", "QAR", "AED"])
    def test_input_is_not_modified(self, prefix):
        original = str(QATAR_PAGE)
        parse_markup(QATAR_PAGE, prefix)
        assert QATAR_PAGE == original
