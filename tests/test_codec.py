import pytest

from inventory_codec import (
    MalformedLineError,
    decode_product,
    encode_product,
    parse_product,
    unsafe_fields,
)
from inventory_models import Product, ProductType


class TestEncode:
    """Line layout written for each product type."""

    def test_physical_line(self, widget):
        assert encode_product(widget) == "Physical,P100,Widget,19.990000,5,Tools,2.500000,Acme"

    def test_digital_line(self, ebook):
        assert encode_product(ebook) == (
            "Digital,D200,Python Handbook,29.000000,100,Books,"
            "https://example.com/handbook,12.500000,Multi-user"
        )

    def test_numbers_are_not_scientific(self):
        product = Product.physical("P1", "Tiny", 0.00001, 1, weight=1e7)
        line = encode_product(product)
        assert "e" not in line.split(",")[3]
        assert line.split(",")[6] == "10000000.000000"


class TestDecode:
    """Reading lines back into products."""

    def test_round_trip_physical(self, widget):
        product = decode_product(encode_product(widget))
        assert product.product_type == ProductType.PHYSICAL
        assert (product.sku, product.name, product.category) == ("P100", "Widget", "Tools")
        assert product.price == pytest.approx(19.99)
        assert product.quantity == 5
        assert product.details.weight == pytest.approx(2.5)
        assert product.details.supplier == "Acme"

    def test_round_trip_digital(self, ebook):
        product = decode_product(encode_product(ebook))
        assert product.product_type == ProductType.DIGITAL
        assert product.details.download_link == "https://example.com/handbook"
        assert product.details.file_size_mb == pytest.approx(12.5)
        assert product.details.license_type == "Multi-user"

    def test_trailing_field_keeps_rest_of_line(self):
        product = decode_product("Physical,P1,Widget,1.5,2,Tools,3,Acme, Inc.\r\n")
        assert product.details.supplier == "Acme, Inc."

    def test_numbers_may_be_padded(self):
        product = decode_product("Physical,P1,Widget, 3.5 , 2 ,Tools,1,Acme")
        assert product.price == pytest.approx(3.5)
        assert product.quantity == 2

    def test_negative_numbers_are_clamped(self):
        product = decode_product("Physical,P1,Widget,-5,-2,Tools,-1,Acme")
        assert (product.price, product.quantity, product.details.weight) == (0, 0, 0)

    def test_empty_trailing_field_is_allowed(self):
        assert decode_product("Digital,D1,Song,1,1,Music,,0,").details.license_type == ""

    def test_comma_in_name_shifts_fields(self):
        line = encode_product(Product.physical("P1", "Nuts, Bolts", 2.0, 3, "Tools"))
        assert decode_product(line) is None

    @pytest.mark.parametrize("line", [
        "Gadget,G1,Thing,1,1,Misc,1,Acme",
        "physical,P1,Widget,1,1,Tools,1,Acme",
        "Physical,P1,Widget,abc,1,Tools,1,Acme",
        "Physical,P1,Widget,1,1.5,Tools,1,Acme",
        "Physical,P1,Widget,1,1,Tools,heavy,Acme",
        "Physical,P1,Widget,1.0",
        "Physical,P1,Widget,1,1,Tools,1",
        "Digital,D1,Song,1,1,Music,link",
        "Physical,,Widget,1,1,Tools,1,Acme",
        "Physical",
        "",
    ])
    def test_malformed_lines_yield_nothing(self, line):
        assert decode_product(line) is None

    def test_parse_product_raises(self):
        with pytest.raises(MalformedLineError):
            parse_product("Digital,D1,Song,x,1,Music,link,1,Single")


class TestUnsafeFields:
    """Fields that cannot survive the unescaped format."""

    def test_clean_product(self, widget, ebook):
        assert unsafe_fields(widget) == []
        assert unsafe_fields(ebook) == []

    def test_comma_in_delimited_fields(self):
        product = Product.digital("D1", "Song, Live", 1, 1, "Music, Pop", "a,b", 1, "Single, Personal")
        assert unsafe_fields(product) == ["name", "category", "download_link"]

    def test_line_break_in_trailing_field(self):
        product = Product.physical("P1", "Widget", 1, 1, supplier="Acme\nCorp")
        assert unsafe_fields(product) == ["supplier"]
