"""Tests for the extraction pipelines."""

from decimal import Decimal

import pytest

from src.price_engine.document import DocumentTree
from src.price_engine.extractor import (
    ManualParams,
    PriceExtractor,
    extract_auto,
    extract_manual,
)
from src.price_engine.models import FailureReason, PriceSourceType, ResultStatus
from src.price_engine.page_loader import PageLoadResult


class TestAutoExtraction:
    def test_trusted_metadata(self, load_fixture):
        result = extract_auto(load_fixture("og_product.html"))

        assert result.is_success
        assert result.name == "Wireless Mouse"
        assert result.title == "Wireless Mouse - Acme Store"
        assert result.locale.identifier == "en-US"
        assert result.price_info.price.decimal == Decimal("19.99")
        assert result.price_info.source is PriceSourceType.ATTRIBUTE
        assert result.price_info.attribute_name == "content"

    def test_ambiguous_prices_ranked_by_proximity(self, load_fixture):
        result = extract_auto(load_fixture("proximity_product.html"))

        assert result.is_ambiguous
        assert result.name == "Wireless Mouse"
        assert result.locale.identifier == "en-US"
        assert [g.price for g in result.groups] == [Decimal("24.50"), Decimal("99.00")]
        assert [g.score for g in result.groups] == [21, -25]
        assert result.price_info is None
        assert len(result.candidate_prices) == 3

    def test_script_attribute_and_text_agree(self, load_fixture):
        result = extract_auto(load_fixture("script_product.html"))

        assert result.is_ambiguous
        assert result.name == "Schreibtischlampe LED"
        assert result.locale.identifier == "de-DE"
        best, shipping = result.groups
        assert best.price == Decimal("45.90")
        assert (best.attr_count, best.js_count, best.text_count) == (1, 1, 1)
        assert best.score == 32
        assert shipping.price == Decimal("4.99")
        assert shipping.score == -25

    def test_single_displayed_price(self, make_tree):
        tree = make_tree(
            "<div><h1>Mouse</h1><span>$5.00</span></div>",
            head="<title>Mouse - Shop</title>",
        )
        result = extract_auto(tree)

        assert result.is_success
        assert result.name == "Mouse"
        assert result.price_info.price.decimal == Decimal("5.00")
        assert result.price_info.price.currency_symbol == "$"
        assert result.price_info.source is PriceSourceType.TEXT

    def test_quoted_script_price_with_grouping(self, make_tree):
        tree = make_tree(
            '<script>dataLayer = {"price": "1,299.00", "currency": "USD"};</script>'
            "<div><h1>Mouse</h1><span>$1,299.00</span></div>",
            head="<title>Mouse</title>",
        )
        result = extract_auto(tree)

        assert result.is_success
        assert result.price_info.price.decimal == Decimal("1299.00")

    def test_length_units_are_not_prices(self, make_tree):
        tree = make_tree(
            "<h1>Desk Lamp</h1>"
            "<table><tr><td>Height</td><td>6 ft</td></tr></table>"
            "<span>$9.99</span>",
            head="<title>Desk Lamp</title>",
            html_attrs='lang="en"',
        )
        result = extract_auto(tree)

        assert result.is_success
        assert result.locale.identifier == "en-US"
        assert result.price_info.price.decimal == Decimal("9.99")

    def test_euro_page_in_french(self, make_tree):
        tree = make_tree(
            "<div><h1>Chaise</h1><span>1&nbsp;299,00&nbsp;€</span></div>",
            head="<title>Chaise - Boutique</title>",
            html_attrs='lang="fr"',
        )
        result = extract_auto(tree)

        assert result.is_success
        assert result.locale.identifier == "fr-FR"
        assert result.price_info.price.decimal == Decimal("1299.00")

    def test_equal_scores_are_ambiguous(self, make_tree):
        tree = make_tree(
            "<div><h1>Mouse</h1><span>$1.00</span><span>$2.00</span></div>",
            head="<title>Mouse</title>",
        )
        result = extract_auto(tree)

        assert result.is_ambiguous
        assert [g.price for g in result.groups] == [Decimal("1.00"), Decimal("2.00")]
        assert result.groups[0].score == result.groups[1].score

    def test_unknown_culture(self, load_fixture):
        result = extract_auto(load_fixture("no_culture.html"))
        assert result.status is ResultStatus.FAILED
        assert result.reason is FailureReason.UNKNOWN_CULTURE

    def test_unknown_name(self, make_tree):
        result = extract_auto(make_tree("<p>$5.00</p>", html_attrs='lang="en"'))
        assert result.reason is FailureReason.UNKNOWN_NAME

    def test_unknown_price(self, make_tree):
        tree = make_tree("<h1>Mouse</h1>", head="<title>Mouse</title>", html_attrs='lang="en"')
        assert extract_auto(tree).reason is FailureReason.UNKNOWN_PRICE

    def test_empty_document(self):
        assert extract_auto(DocumentTree("")).reason is FailureReason.NO_PRODUCT_DETECTED

    def test_rejects_raw_markup(self):
        with pytest.raises(TypeError):
            extract_auto("<html></html>")

    def test_repeated_passes_are_identical(self, load_fixture):
        tree = load_fixture("proximity_product.html")
        extractor = PriceExtractor()
        assert extractor.extract_auto(tree).to_dict() == extractor.extract_auto(tree).to_dict()


class TestManualExtraction:
    def test_reads_text(self, make_tree, de_de):
        tree = make_tree(
            '<span class="price">1.299,00 €</span>',
            head="<title>Sofa Berlin | Möbelhaus</title>",
        )
        result = extract_manual(tree, "Sofa Berlin", de_de, "span.price")

        assert result.is_success
        assert result.name == "Sofa Berlin"
        assert result.locale is de_de
        assert result.title == "Sofa Berlin | Möbelhaus"
        assert result.price_info.price.decimal == Decimal("1299.00")
        assert result.price_info.source is PriceSourceType.TEXT

    def test_reads_meta_content(self, make_tree, en_us):
        tree = make_tree("<p>Mouse</p>", head='<meta itemprop="price" content="12.50">')
        result = extract_manual(tree, "Mouse", en_us, "meta[itemprop=price]")

        assert result.price_info.price.decimal == Decimal("12.50")
        assert result.price_info.source is PriceSourceType.ATTRIBUTE
        assert result.price_info.attribute_name == "content"
        assert result.title is None

    @pytest.mark.parametrize(
        ("name", "with_locale", "selector"),
        [(None, True, ".price"), ("", True, ".price"), ("Mouse", False, ".price"), ("Mouse", True, None)],
    )
    def test_missing_parameter(self, make_tree, en_us, name, with_locale, selector):
        tree = make_tree('<span class="price">$5.00</span>')
        result = extract_manual(tree, name, en_us if with_locale else None, selector)
        assert result.reason is FailureReason.MISSING_MANUAL_PARAM

    @pytest.mark.parametrize("selector", ["div[", ".missing"])
    def test_unusable_selector(self, make_tree, en_us, selector):
        tree = make_tree('<span class="price">$5.00</span>')
        result = extract_manual(tree, "Mouse", en_us, selector)
        assert result.reason is FailureReason.INVALID_MANUAL_PRICE

    def test_unparseable_price(self, make_tree, en_us):
        tree = make_tree('<span class="price">Call us</span>')
        result = extract_manual(tree, "Mouse", en_us, ".price")
        assert result.reason is FailureReason.INVALID_MANUAL_PRICE


class TestExtractFromPage:
    def test_loader_failure_becomes_result(self):
        page = PageLoadResult(url="https://shop.example.com/p/1", error=FailureReason.NO_RESPONSE)
        result = PriceExtractor().extract(page)
        assert result.reason is FailureReason.NO_RESPONSE

    def test_manual_params(self, make_tree, en_us):
        page = PageLoadResult(url="", tree=make_tree('<b id="p">$7.00</b>'), status_code=200)
        result = PriceExtractor().extract(page, ManualParams("Mouse", en_us, "#p"))
        assert result.price_info.price.decimal == Decimal("7.00")

    def test_serialization(self, load_fixture):
        page = PageLoadResult(url="", tree=load_fixture("og_product.html"), status_code=200)
        data = PriceExtractor().extract(page).to_dict()

        assert data["status"] == "success"
        assert data["name"] == "Wireless Mouse"
        assert data["locale"]["identifier"] == "en-US"
        assert data["price"] == {
            "price": "19.99",
            "currency_symbol": None,
            "source": "attribute",
            "attribute_name": "content",
        }

    def test_ambiguous_serialization_lists_candidates(self, load_fixture):
        page = PageLoadResult(url="", tree=load_fixture("proximity_product.html"), status_code=200)
        data = PriceExtractor().extract(page).to_dict()

        assert data["status"] == "ambiguous"
        best, other = data["groups"]
        assert best["price"] == "24.50"
        assert [p["source"] for p in best["prices"]] == ["text", "text"]
        assert best["prices"][0]["currency_symbol"] == "$"
        assert other["prices"] == [{
            "price": "99.00",
            "currency_symbol": None,
            "source": "attribute",
            "attribute_name": "data-price",
        }]
