import pytest

from kattlog.core.config import MatchPolicy
from kattlog.extractors.price_extractor import PriceExtractor, parse_price


class TestExtractPrice:
    def setup_method(self):
        self.extractor = PriceExtractor()

    def test_space_grouped_amount_with_trailing_symbol(self):
        assert self.extractor.extract_price("1 229,80 €") == "1 229,80 €"

    def test_leading_symbol(self):
        assert self.extractor.extract_price("Now only $299.99") == "$299.99"

    def test_bare_amount_without_currency(self):
        assert self.extractor.extract_price("Precio 1.234,56") == "1.234,56"

    def test_last_match_wins_by_default(self):
        assert self.extractor.extract_price("29,95 € 19,95 €") == "19,95 €"

    def test_first_match_policy(self):
        extractor = PriceExtractor(MatchPolicy.FIRST)
        assert extractor.extract_price("29,95 € 19,95 €") == "29,95 €"

    def test_no_price(self):
        assert self.extractor.extract_price("Sin precio") is None
        assert self.extractor.extract_price("") is None

    def test_extract_all_prices(self):
        assert self.extractor.extract_all_prices("Antes 89,00 € ahora 69,00 €") == ["89,00 €", "69,00 €"]

    def test_has_price(self):
        assert self.extractor.has_price("Desde 45 €")
        assert not self.extractor.has_price("Desde 45")


class TestExtractCardPrice:
    def setup_method(self):
        self.extractor = PriceExtractor()

    def test_was_now_lines_keep_last_numeric_line(self):
        price = self.extractor.extract_card_price("Antes 29,95 €\nAhora 19,95 €", "")
        assert price == "19,95 €"

    def test_missing_price_element_falls_back_to_card_text(self):
        assert self.extractor.extract_card_price(None, "Mesa Roble 120 €") == "120 €"

    def test_oversized_price_text_falls_back_to_card_text(self):
        noisy = "Envío gratis en pedidos superiores a cincuenta"
        assert self.extractor.extract_card_price(noisy, "Lámpara 45,00 €") == "45,00 €"

    def test_short_price_text_without_currency_keeps_amount(self):
        assert self.extractor.extract_card_price("Desde 45", "Desde 45 unidades") == "45"

    def test_nothing_price_shaped(self):
        assert self.extractor.extract_card_price(None, "Consultar") is None


class TestParsePrice:
    @pytest.mark.parametrize("raw, expected", [
        ("1.200,50", 1200.5),
        ("1,200.50", 1200.5),
        ("1200,50", 1200.5),
        ("1 229,80 €", 1229.8),
        ("$299.99", 299.99),
        ("1.234.567", 1234567.0),
    ])
    def test_formats(self, raw, expected):
        assert parse_price(raw) == pytest.approx(expected)

    def test_empty_or_non_numeric(self):
        assert parse_price(None) == 0.0
        assert parse_price("") == 0.0
        assert parse_price("gratis") == 0.0
