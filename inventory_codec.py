"""One-line-per-record CSV encoding for inventory products.

Fields are written without quoting or escaping, so a comma inside a text
field cannot survive a save/load cycle. `unsafe_fields` reports such fields
so callers can warn before writing.
"""

import re
from typing import List, Optional

from inventory_models import DigitalDetails, PhysicalDetails, Product, ProductType

FIELD_SEPARATOR = ","

_FLOAT_TOKEN = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*")
_INT_TOKEN = re.compile(r"\s*([+-]?\d+)\s*")


class MalformedLineError(ValueError):
    pass


def _format_number(value: float) -> str:
    return f"{value:f}"


def encode_product(product: Product) -> str:
    fields = [
        product.product_type.value,
        product.sku,
        product.name,
        _format_number(product.price),
        str(product.quantity),
        product.category,
    ]
    details = product.details
    if isinstance(details, PhysicalDetails):
        fields += [_format_number(details.weight), details.supplier]
    elif isinstance(details, DigitalDetails):
        fields += [details.download_link, _format_number(details.file_size_mb), details.license_type]
    return FIELD_SEPARATOR.join(fields)


class _LineReader:
    """Cursor over a single record line"""
    def __init__(self, line: str):
        self._line = line
        self._pos = 0

    def read_field(self) -> str:
        end = self._line.find(FIELD_SEPARATOR, self._pos)
        if end < 0:
            raise MalformedLineError(f"missing field after column {self._pos}")
        value = self._line[self._pos:end]
        self._pos = end + 1
        return value

    def _read_token(self, pattern: re.Pattern) -> str:
        match = pattern.match(self._line, self._pos)
        if match is None:
            raise MalformedLineError(f"expected a number at column {self._pos}")
        self._pos = match.end()
        if self._line[self._pos:self._pos + 1] != FIELD_SEPARATOR:
            raise MalformedLineError(f"expected '{FIELD_SEPARATOR}' at column {self._pos}")
        self._pos += 1
        return match.group(1)

    def read_float(self) -> float:
        return float(self._read_token(_FLOAT_TOKEN))

    def read_int(self) -> int:
        return int(self._read_token(_INT_TOKEN))

    def read_rest(self) -> str:
        value = self._line[self._pos:]
        self._pos = len(self._line)
        return value


def _decode_physical(reader: _LineReader, sku: str, name: str, price: float,
                     quantity: int, category: str) -> Product:
    weight = reader.read_float()
    supplier = reader.read_rest()
    return Product.physical(sku, name, price, quantity, category, weight, supplier)


def _decode_digital(reader: _LineReader, sku: str, name: str, price: float,
                    quantity: int, category: str) -> Product:
    download_link = reader.read_field()
    file_size_mb = reader.read_float()
    license_type = reader.read_rest()
    return Product.digital(sku, name, price, quantity, category,
                           download_link, file_size_mb, license_type)


_DECODERS = {
    ProductType.PHYSICAL.value: _decode_physical,
    ProductType.DIGITAL.value: _decode_digital,
}


def parse_product(line: str) -> Product:
    """Decode one line, raising MalformedLineError when it is not a valid record."""
    line = line.rstrip("\r\n")
    reader = _LineReader(line)
    tag = line.split(FIELD_SEPARATOR, 1)[0]
    decoder = _DECODERS.get(tag)
    if decoder is None:
        raise MalformedLineError(f"unknown product type {tag!r}")
    reader.read_field()
    sku = reader.read_field()
    name = reader.read_field()
    price = reader.read_float()
    quantity = reader.read_int()
    category = reader.read_field()
    try:
        return decoder(reader, sku, name, price, quantity, category)
    except MalformedLineError:
        raise
    except ValueError as e:
        # empty sku
        raise MalformedLineError(str(e)) from e


def decode_product(line: str) -> Optional[Product]:
    """Decode one line, or return None when it does not hold a valid record."""
    try:
        return parse_product(line)
    except MalformedLineError:
        return None


def unsafe_fields(product: Product) -> List[str]:
    """Names of text fields that would corrupt the encoded line.

    The trailing field (supplier or license type) takes the rest of the line,
    so only a line break can break it.
    """
    delimited = {
        "sku": product.sku,
        "name": product.name,
        "category": product.category,
    }
    trailing = {}
    details = product.details
    if isinstance(details, PhysicalDetails):
        trailing["supplier"] = details.supplier
    elif isinstance(details, DigitalDetails):
        delimited["download_link"] = details.download_link
        trailing["license_type"] = details.license_type

    unsafe = [field for field, value in delimited.items()
              if FIELD_SEPARATOR in value or _has_line_break(value)]
    unsafe += [field for field, value in trailing.items() if _has_line_break(value)]
    return unsafe


def _has_line_break(value: str) -> bool:
    return "\n" in value or "\r" in value
