"""
Tests for feed parsing and catalog loading.
"""
import pytest

from sipbuddy.data_access.loader import (
    FeedFormat,
    clean_image_url,
    load_catalog,
    load_with_fallback,
    parse_price,
    split_line,
)
from sipbuddy.models.product import PLACEHOLDER_IMAGE
from sipbuddy.utils.exceptions import DataLoadError


class TestSplitLine:
    """Delimiter splitting with quote support."""

    def test_plain_fields(self):
        assert split_line("a,b,c", ",") == ["a", "b", "c"]

    def test_delimiter_inside_quotes(self):
        assert split_line('1,"Corona Extra, 12pk",17.99', ",") == ["1", "Corona Extra, 12pk", "17.99"]

    def test_single_quotes(self):
        assert split_line("1\t'Red, white'\t9", "\t") == ["1", "Red, white", "9"]

    def test_apostrophe_mid_field_is_literal(self):
        assert split_line("S1,Tito's Vodka,19.99", ",") == ["S1", "Tito's Vodka", "19.99"]

    def test_empty_trailing_fields(self):
        assert split_line("a,b,,", ",") == ["a", "b", "", ""]


class TestParsePrice:

    def test_plain_number(self):
        assert parse_price("17.99") == 17.99

    def test_currency_noise(self):
        assert parse_price("$14.99 USD") == 14.99
        assert parse_price("12.50 EUR") == 12.5

    def test_thousands_separator(self):
        assert parse_price("1,299.00") == 1299.0

    def test_negative_price_is_not_orderable(self):
        assert parse_price("-5.00") == 0.0
        assert parse_price("$-12.99") == 0.0

    def test_unparsable_defaults_to_zero(self):
        assert parse_price("N/A") == 0.0
        assert parse_price("") == 0.0
        assert parse_price(None) == 0.0


class TestImageUrl:

    def test_absolute_urls_kept(self):
        assert clean_image_url("https://img.test/a.jpg") == "https://img.test/a.jpg"
        assert clean_image_url("http://img.test/a.jpg") == "http://img.test/a.jpg"

    def test_relative_or_missing_replaced(self):
        assert clean_image_url("/img/a.jpg") == PLACEHOLDER_IMAGE
        assert clean_image_url("") == PLACEHOLDER_IMAGE


class TestShopFeed:

    def test_loads_every_row(self, shop_feed):
        products = load_catalog(shop_feed, FeedFormat.SHOP)
        assert len(products) == 12
        first = products[0]
        assert first.id == "B1"
        assert first.title == "Corona Extra Lager, 12pk"
        assert first.brand == "Corona"
        assert first.price == 17.99
        assert first.category_raw == "beer > lager"
        assert first.size == "12-pack"
        assert first.link == "https://shop.test/B1"

    def test_na_price_becomes_zero(self, shop_feed):
        by_id = {p.id: p for p in load_catalog(shop_feed, FeedFormat.SHOP)}
        assert by_id["W4"].price == 0.0
        assert not by_id["W4"].orderable

    def test_bad_images_use_placeholder(self, shop_feed):
        by_id = {p.id: p for p in load_catalog(shop_feed, FeedFormat.SHOP)}
        assert by_id["B3"].image_url == PLACEHOLDER_IMAGE
        assert by_id["W3"].image_url == PLACEHOLDER_IMAGE

    def test_short_rows_are_padded(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("id,title,price,category,size\nX1,Lone Lager,5.99\n\n", encoding="utf-8")
        [product] = load_catalog(str(path), FeedFormat.SHOP)
        assert product.size == ""
        assert product.category_raw == ""

    def test_tab_delimited_with_aliases(self, tmp_path):
        path = tmp_path / "feed.tsv"
        path.write_text("SKU\tName\tVendor\tPrice\tProduct_Type\nT1\tMerlot\tBogle\t9.99\twine > red\n", encoding="utf-8")
        [product] = load_catalog(str(path), FeedFormat.SHOP)
        assert (product.id, product.title, product.brand, product.price) == ("T1", "Merlot", "Bogle", 9.99)

    def test_header_without_price_is_rejected(self, tmp_path):
        path = tmp_path / "broken.csv"
        path.write_text("foo,bar\n1,2\n", encoding="utf-8")
        with pytest.raises(DataLoadError):
            load_catalog(str(path), FeedFormat.SHOP)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError):
            load_catalog(str(tmp_path / "nope.csv"), FeedFormat.SHOP)

    def test_missing_id_does_not_clash_with_sku(self, tmp_path):
        path = tmp_path / "ids.csv"
        path.write_text(
            "id,title,price,category,size\n"
            "2,Corona Extra 12pk,17.99,beer > lager,12-pack\n"
            ",Apothic Red 6 bottle case,59.99,wine > red,case\n",
            encoding="utf-8",
        )
        products = load_catalog(str(path), FeedFormat.SHOP)
        assert [p.id for p in products] == ["2", "row-2"]

    def test_duplicate_ids_keep_first_row(self, tmp_path):
        path = tmp_path / "dupes.csv"
        path.write_text(
            "id,title,price,category,size\n"
            "X1,Corona Extra 12pk,17.99,beer > lager,12-pack\n"
            "X1,Apothic Red,12.99,wine > red,750ml\n"
            "X2,Guinness 6pk,11.99,beer > stout,6-pack\n",
            encoding="utf-8",
        )
        products = load_catalog(str(path), FeedFormat.SHOP)
        assert [(p.id, p.title) for p in products] == [("X1", "Corona Extra 12pk"), ("X2", "Guinness 6pk")]


class TestDepartmentFeed:

    def test_fixed_columns(self, department_feed):
        products = load_catalog(department_feed, FeedFormat.DEPARTMENT)
        assert [p.id for p in products] == ["B001", "W001", "W002", "R001", "S001"]
        corona = products[0]
        assert corona.brand == "Corona Extra"
        assert corona.display_name == "Corona Extra"
        assert corona.category_raw == "BE"
        assert corona.image_url == "https://img.test/corona.jpg"

    def test_price_and_image_cleanup(self, department_feed):
        by_id = {p.id: p for p in load_catalog(department_feed, FeedFormat.DEPARTMENT)}
        assert by_id["W001"].price == 14.99
        assert by_id["W002"].image_url == PLACEHOLDER_IMAGE
        assert by_id["R001"].link == ""


class TestFallback:

    def test_primary_wins_when_readable(self, shop_feed, department_feed):
        products, fmt, source = load_with_fallback([
            (shop_feed, FeedFormat.SHOP),
            (department_feed, FeedFormat.DEPARTMENT),
        ])
        assert fmt == FeedFormat.SHOP
        assert source == shop_feed
        assert len(products) == 12

    def test_falls_back_to_second_format(self, tmp_path, department_feed):
        products, fmt, source = load_with_fallback([
            (str(tmp_path / "missing.csv"), FeedFormat.SHOP),
            (department_feed, FeedFormat.DEPARTMENT),
        ])
        assert fmt == FeedFormat.DEPARTMENT
        assert source == department_feed
        assert len(products) == 5

    def test_everything_missing_gives_empty_catalog(self, tmp_path):
        products, fmt, source = load_with_fallback([
            (str(tmp_path / "missing.csv"), FeedFormat.SHOP),
            (None, FeedFormat.DEPARTMENT),
        ])
        assert products == []
        assert source == "empty"

    def test_unknown_format_name(self):
        with pytest.raises(DataLoadError):
            FeedFormat.parse("xml")
