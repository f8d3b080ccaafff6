from sipbuddy.core.tags import extract_tags, product_tags, product_text
from sipbuddy.models.product import Product, BEER, WINE, RTD


class TestWineTags:

    def test_varietals(self):
        assert extract_tags("Kendall-Jackson Chardonnay", WINE) == ["Chardonnay"]
        assert extract_tags("caymus cab sav", WINE) == ["Cabernet Sauvignon"]
        assert extract_tags("santa margherita pinot gris", WINE) == ["Pinot Grigio"]

    def test_multiple_tags(self):
        assert extract_tags("prosecco and champagne gift set", WINE) == ["Champagne", "Prosecco"]

    def test_red_blend_excludes_chardonnay(self):
        assert extract_tags("apothic red", WINE) == ["Red Blend"]
        assert "Red Blend" not in extract_tags("red label chardonnay", WINE)

    def test_white_blend_excludes_claw(self):
        assert extract_tags("conundrum white", WINE) == ["White Blend"]
        assert extract_tags("white claw", WINE) == []


class TestBeerTags:

    def test_brand_keywords(self):
        assert extract_tags("corona extra", BEER) == ["Lager"]
        assert extract_tags("guinness draught", BEER) == ["Stout"]
        assert extract_tags("blue moon belgian white", BEER) == ["Wheat Beer"]
        assert extract_tags("heineken", BEER) == ["Pilsner"]

    def test_light_and_ipa(self):
        assert extract_tags("bud light lager", BEER) == ["Lager", "Light Beer"]
        assert extract_tags("sierra nevada pale ale", BEER) == ["IPA"]


class TestRtdTags:

    def test_rtd_vocabulary(self):
        assert extract_tags("white claw black cherry", RTD) == ["Hard Seltzer"]
        assert extract_tags("high noon vodka soda", RTD) == ["Vodka Mix"]
        assert extract_tags("smirnoff ice", RTD) == ["Flavored Malt"]
        assert extract_tags("twisted tea hard iced tea", RTD) == ["Iced Tea"]
        assert extract_tags("mike's hard lemonade", RTD) == ["Lemonade"]


def test_unknown_category_has_no_tags():
    assert extract_tags("chardonnay", "Spirits") == []


def test_product_text_skips_duplicate_description():
    p = Product(id="1", title="Apothic Red", brand="Apothic", price=9.99, category_raw="", description="Apothic Red")
    assert product_text(p) == "apothic apothic red"
    assert product_tags(p, WINE) == ["Red Blend"]
