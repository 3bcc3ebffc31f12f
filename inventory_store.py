import logging
import os
from typing import Callable, Dict, List, NamedTuple, Optional

from inventory_codec import decode_product, encode_product, unsafe_fields
from inventory_models import Product, ProductType, ProductView

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = "inventory.csv"
FILE_HEADER = (
    "# SmallBiz Inventory Data File\n"
    "# Format: Type,SKU,Name,Price,Quantity,Category,[Type-specific fields]\n"
)
COMMENT_PREFIX = "#"
FILE_ENCODING = "utf-8"
FALLBACK_ENCODING = "latin-1"


class TypeTotals(NamedTuple):
    count: int
    value: float


class InventorySummary(NamedTuple):
    total_count: int
    total_value: float
    by_type: Dict[ProductType, TypeTotals]


class Inventory:
    """Owns every product record, keyed by SKU and kept in display order"""

    def __init__(self, data_file_path: str = DEFAULT_DATA_FILE):
        self._products: List[Product] = []
        self._index: Dict[str, int] = {}  # sku -> position in self._products
        self._data_file_path = data_file_path

    @property
    def data_file_path(self) -> str:
        return self._data_file_path

    @data_file_path.setter
    def data_file_path(self, path: str):
        self._data_file_path = path

    def _rebuild_index(self):
        self._index = {product.sku: pos for pos, product in enumerate(self._products)}

    def _find(self, sku: str) -> Optional[Product]:
        pos = self._index.get(sku)
        if pos is None:
            return None
        return self._products[pos]

    # CRUD

    def add(self, product: Optional[Product]) -> bool:
        """Take ownership of a product unless its SKU is already present"""
        if product is None:
            return False
        if product.sku in self._index:
            return False
        self._index[product.sku] = len(self._products)
        self._products.append(product)
        return True

    def remove(self, sku: str) -> bool:
        pos = self._index.get(sku)
        if pos is None:
            return False
        del self._products[pos]
        self._rebuild_index()
        return True

    def update(self, sku: str, name: Optional[str] = None, price: Optional[float] = None,
               quantity: Optional[int] = None) -> bool:
        """Apply the given fields to a product; None or an empty name keeps the current value.

        A negative price or quantity is refused by the product and that field
        stays as it was. Returns False only when the SKU is unknown.
        """
        product = self._find(sku)
        if product is None:
            return False
        if name:
            product.set_name(name)
        if price is not None and not product.set_price(price):
            logger.debug("Ignoring invalid price %s for %s", price, sku)
        if quantity is not None and not product.set_quantity(quantity):
            logger.debug("Ignoring negative quantity %s for %s", quantity, sku)
        return True

    def get(self, sku: str) -> Optional[ProductView]:
        product = self._find(sku)
        if product is None:
            return None
        return ProductView(product)

    def products(self) -> List[ProductView]:
        return [ProductView(product) for product in self._products]

    # Search

    def _select(self, predicate: Callable[[Product], bool]) -> List[ProductView]:
        return [ProductView(product) for product in self._products if predicate(product)]

    def search_by_name(self, term: str) -> List[ProductView]:
        term = term.lower()
        return self._select(lambda p: term in p.name.lower())

    def search_by_category(self, term: str) -> List[ProductView]:
        term = term.lower()
        return self._select(lambda p: term in p.category.lower())

    def search_by_type(self, type_name: str) -> List[ProductView]:
        type_name = type_name.lower()
        return self._select(lambda p: p.product_type.value.lower() == type_name)

    def low_stock(self, threshold: int) -> List[ProductView]:
        """Products with fewer than `threshold` units on hand"""
        return self._select(lambda p: p.quantity < threshold)

    # Sorting; list.sort is stable so ties keep their current order

    def _sort(self, key: Callable[[Product], object], reverse: bool = False):
        self._products.sort(key=key, reverse=reverse)
        self._rebuild_index()

    def sort_by_sku(self):
        self._sort(lambda p: p.sku)

    def sort_by_name(self):
        self._sort(lambda p: p.name)

    def sort_by_price(self):
        self._sort(lambda p: p.price)

    def sort_by_quantity(self):
        self._sort(lambda p: p.quantity)

    def sort_by_value(self):
        self._sort(lambda p: p.calculate_value(), reverse=True)

    # Queries

    def total_value(self) -> float:
        return sum(product.calculate_value() for product in self._products)

    def summary(self) -> InventorySummary:
        by_type = {}
        for product_type in ProductType:
            members = [p for p in self._products if p.product_type == product_type]
            by_type[product_type] = TypeTotals(
                len(members), sum(p.calculate_value() for p in members))
        return InventorySummary(len(self._products), self.total_value(), by_type)

    def count(self) -> int:
        return len(self._products)

    def is_empty(self) -> bool:
        return not self._products

    def exists(self, sku: str) -> bool:
        return sku in self._index

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, sku: str) -> bool:
        return self.exists(sku)

    def clear(self):
        self._products = []
        self._index = {}

    # Persistence

    def load_from_file(self, path: Optional[str] = None) -> bool:
        """Replace the contents with the records stored at `path`.

        Returns False and keeps the current contents when the file cannot be
        opened, including when it does not exist yet. Lines that are not
        valid UTF-8 are read as Latin-1 rather than failing the whole file.
        """
        path = path or self._data_file_path
        try:
            with open(path, 'rb') as f:
                raw_lines = f.read().splitlines()
        except FileNotFoundError:
            logger.info("No inventory file at %s", path)
            return False
        except OSError as e:
            logger.error("Could not read inventory file %s: %s", path, e)
            return False

        self.clear()
        skipped = 0
        for line_no, raw in enumerate(raw_lines, start=1):
            line = _decode_line(raw, path, line_no)
            if not line.strip() or line.startswith(COMMENT_PREFIX):
                continue
            product = decode_product(line)
            if product is None:
                logger.debug("%s:%d: unreadable record skipped", path, line_no)
                skipped += 1
                continue
            if not self.add(product):
                logger.debug("%s:%d: duplicate SKU %s skipped", path, line_no, product.sku)
                skipped += 1

        if skipped:
            logger.warning("Skipped %d line(s) while loading %s", skipped, path)
        logger.info("Loaded %d product(s) from %s", self.count(), path)
        return True

    def save_to_file(self, path: Optional[str] = None) -> bool:
        """Overwrite `path` with the header and one line per product in current order"""
        path = path or self._data_file_path
        for product in self._products:
            fields = unsafe_fields(product)
            if fields:
                logger.warning("SKU %s has separators in %s and will not reload intact",
                               product.sku, ", ".join(fields))
        try:
            dir_path = os.path.dirname(path)
            if dir_path and not os.path.exists(dir_path):
                os.makedirs(dir_path)
            with open(path, 'w', encoding=FILE_ENCODING, newline='') as f:
                f.write(FILE_HEADER)
                for product in self._products:
                    f.write(encode_product(product) + "\n")
        except OSError as e:
            logger.error("Could not open %s for writing: %s", path, e)
            return False
        logger.info("Saved %d product(s) to %s", self.count(), path)
        return True


def _decode_line(raw: bytes, path: str, line_no: int) -> str:
    try:
        return raw.decode(FILE_ENCODING)
    except UnicodeDecodeError:
        logger.warning("%s:%d: not valid %s, read as %s", path, line_no,
                       FILE_ENCODING, FALLBACK_ENCODING)
        return raw.decode(FALLBACK_ENCODING)
