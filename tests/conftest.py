import random

import pytest

from sipbuddy.api.server import create_app
from sipbuddy.config.settings import Settings
from sipbuddy.pipelines.app_service import AppService

SHOP_FEED = """sku,title,brand,description,price,category,size,image_url,link
B1,"Corona Extra Lager, 12pk",Corona,Mexican lager,17.99,beer > lager,12-pack,https://img.test/corona.jpg,https://shop.test/B1
B2,Lagunitas IPA 6pk,Lagunitas,West coast IPA,10.99,beer > ipa,6-pack,https://img.test/lagunitas.jpg,https://shop.test/B2
B3,Sierra Nevada Pale Ale Single Bottle,Sierra Nevada,Single bottle pale ale,2.99,beer > ale,bottle,,
B4,Guinness Draught Stout Case,Guinness,Irish dry stout,39.99,beer > stout,case,https://img.test/guinness.jpg,https://shop.test/B4
W1,Kendall-Jackson Chardonnay,Kendall-Jackson,Buttery chardonnay,14.99,wine > white > chardonnay,750ml,https://img.test/kj.jpg,https://shop.test/W1
W2,Caymus Cabernet,Caymus,Napa cabernet,89.99,wine > red,750ml,https://img.test/caymus.jpg,https://shop.test/W2
W3,Apothic Red,Apothic,Red blend,11.99,wine > red > blend,750ml,/img/apothic.jpg,https://shop.test/W3
W4,Veuve Clicquot Champagne,Veuve Clicquot,Brut champagne,N/A,wine > sparkling,750ml,https://img.test/veuve.jpg,https://shop.test/W4
R1,White Claw Hard Seltzer Variety Pack,White Claw,Mango and lime,17.99,malt beverages > seltzer,12-pack,https://img.test/claw.jpg,https://shop.test/R1
R2,Cutwater Lime Margarita,Cutwater,Canned tequila margarita,12.99,spirits > canned cocktails,4-pack,https://img.test/cutwater.jpg,https://shop.test/R2
R3,Smirnoff Ice Original,Smirnoff,Flavored malt beverage,13.99,malt beverages,6-pack,https://img.test/smirnoff.jpg,https://shop.test/R3
M1,Tropicana Orange Juice,Tropicana,Orange juice for cocktails,4.99,mixers > juice,52oz,https://img.test/trop.jpg,https://shop.test/M1
"""

DEPARTMENT_FEED = (
    "B001\tCorona Extra\tCorona Extra Lager 12pk\tBE\t17.99\t12-pack\thttps://img.test/corona.jpg\n"
    "W001\tKendall-Jackson\tKendall-Jackson Chardonnay\tWI\t$14.99 USD\t750ml\n"
    "W002\tApothic\tApothic Red Blend\tWI\t11.99\t750ml\tnot-a-url\n"
    "R001\tWhite Claw\tWhite Claw Hard Seltzer Variety\tRT\t17.99\t12-pack\n"
    "S001\tTito's\tTito's Handmade Vodka\tLI\t19.99\t750ml\n"
    "\n"
)


@pytest.fixture
def shop_feed(tmp_path):
    path = tmp_path / "products.csv"
    path.write_text(SHOP_FEED, encoding="utf-8")
    return str(path)


@pytest.fixture
def department_feed(tmp_path):
    path = tmp_path / "department.txt"
    path.write_text(DEPARTMENT_FEED, encoding="utf-8")
    return str(path)


@pytest.fixture
def settings(tmp_path, shop_feed):
    return Settings(
        feed_path=shop_feed,
        feed_format="shop",
        fallback_feed_path=None,
        db_path=str(tmp_path / "sipbuddy.db"),
        cors_origin="http://localhost:3000",
    )


@pytest.fixture
def service(settings):
    return AppService(settings, rng=random.Random(7))


@pytest.fixture
def client(service):
    app = create_app(service)
    app.config["TESTING"] = True
    return app.test_client()
