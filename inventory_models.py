import math
from enum import Enum
from typing import Optional, Union


# Enum for product types
class ProductType(Enum):
    PHYSICAL = "Physical"
    DIGITAL = "Digital"


# Custom exception for inventory management
class InventoryError(Exception):
    pass


SHIPPING_BASE_RATE = 5.99
SHIPPING_PER_POUND_RATE = 0.75
DIGITAL_DISCOUNT_BONUS = 5.0
DIGITAL_DISCOUNT_CAP = 50.0


def _valid_amount(value: float) -> bool:
    return math.isfinite(value) and value >= 0


class PhysicalDetails:
    """Fields only physical goods carry"""
    def __init__(self, weight: float = 0.0, supplier: str = "Unknown"):
        self._weight = weight if _valid_amount(weight) else 0.0  # in pounds
        self._supplier = supplier

    @property
    def weight(self) -> float:
        return self._weight

    @property
    def supplier(self) -> str:
        return self._supplier

    def set_weight(self, weight: float) -> bool:
        if not _valid_amount(weight):
            return False
        self._weight = weight
        return True

    def set_supplier(self, supplier: str):
        self._supplier = supplier

    @property
    def shipping_cost(self) -> float:
        if self._weight <= 0:
            return SHIPPING_BASE_RATE
        return SHIPPING_BASE_RATE + self._weight * SHIPPING_PER_POUND_RATE


class DigitalDetails:
    """Fields only digital goods carry"""
    def __init__(self, download_link: str = "", file_size_mb: float = 0.0,
                 license_type: str = "Single"):
        self._download_link = download_link
        self._file_size_mb = file_size_mb if _valid_amount(file_size_mb) else 0.0
        self._license_type = license_type

    @property
    def download_link(self) -> str:
        return self._download_link

    @property
    def file_size_mb(self) -> float:
        return self._file_size_mb

    @property
    def license_type(self) -> str:
        return self._license_type

    def set_download_link(self, link: str):
        self._download_link = link

    def set_file_size_mb(self, size: float) -> bool:
        if not _valid_amount(size):
            return False
        self._file_size_mb = size
        return True

    def set_license_type(self, license_type: str):
        self._license_type = license_type


ProductDetails = Union[PhysicalDetails, DigitalDetails]


class Product:
    """A catalog entry; the variant payload is fixed when the product is created"""
    def __init__(self, sku: str, name: str, price: float, quantity: int,
                 category: str = "General", details: Optional[ProductDetails] = None):
        if not sku or not sku.strip():
            raise ValueError("SKU cannot be empty")
        if details is None:
            details = PhysicalDetails()
        if not isinstance(details, (PhysicalDetails, DigitalDetails)):
            raise InventoryError(f"Unsupported product details: {type(details).__name__}")
        self._sku = sku
        self._name = name
        self._price = price if _valid_amount(price) else 0.0
        self._quantity = max(0, quantity)
        self._category = category
        self._details = details

    @classmethod
    def physical(cls, sku: str, name: str, price: float, quantity: int,
                 category: str = "General", weight: float = 0.0,
                 supplier: str = "Unknown") -> 'Product':
        return cls(sku, name, price, quantity, category, PhysicalDetails(weight, supplier))

    @classmethod
    def digital(cls, sku: str, name: str, price: float, quantity: int,
                category: str = "General", download_link: str = "",
                file_size_mb: float = 0.0, license_type: str = "Single") -> 'Product':
        return cls(sku, name, price, quantity, category,
                   DigitalDetails(download_link, file_size_mb, license_type))

    @property
    def sku(self) -> str:
        return self._sku

    @property
    def name(self) -> str:
        return self._name

    @property
    def price(self) -> float:
        return self._price

    @property
    def quantity(self) -> int:
        return self._quantity

    @property
    def category(self) -> str:
        return self._category

    @property
    def details(self) -> ProductDetails:
        return self._details

    @property
    def product_type(self) -> ProductType:
        if isinstance(self._details, PhysicalDetails):
            return ProductType.PHYSICAL
        elif isinstance(self._details, DigitalDetails):
            return ProductType.DIGITAL
        raise InventoryError(f"Unsupported product details: {type(self._details).__name__}")

    def set_sku(self, sku: str):
        self._sku = sku

    def set_name(self, name: str):
        self._name = name

    def set_category(self, category: str):
        self._category = category

    def set_price(self, price: float) -> bool:
        if not _valid_amount(price):
            return False
        self._price = price
        return True

    def set_quantity(self, quantity: int) -> bool:
        if quantity < 0:
            return False
        self._quantity = quantity
        return True

    def calculate_value(self) -> float:
        return self._price * self._quantity

    def apply_discount(self, percentage: float) -> float:
        """Discounted unit price; out-of-range percentages leave the price as is"""
        if math.isnan(percentage) or percentage < 0 or percentage > 100:
            return self._price
        if self.product_type == ProductType.DIGITAL:
            percentage = min(percentage + DIGITAL_DISCOUNT_BONUS, DIGITAL_DISCOUNT_CAP)
        return self._price * (1 - percentage / 100.0)

    def calculate_shipping_cost(self) -> Optional[float]:
        if isinstance(self._details, PhysicalDetails):
            return self._details.shipping_cost
        return None

    def __repr__(self) -> str:
        return (f"Product(type={self.product_type.value!r}, sku={self._sku!r}, "
                f"name={self._name!r}, price={self._price}, quantity={self._quantity})")


class ProductView:
    """Read-only window onto a product owned by an Inventory"""

    _PHYSICAL_FIELDS = ("weight", "supplier")
    _DIGITAL_FIELDS = ("download_link", "file_size_mb", "license_type")

    __slots__ = ("_product",)

    def __init__(self, product: Product):
        self._product = product

    @property
    def sku(self) -> str:
        return self._product.sku

    @property
    def name(self) -> str:
        return self._product.name

    @property
    def price(self) -> float:
        return self._product.price

    @property
    def quantity(self) -> int:
        return self._product.quantity

    @property
    def category(self) -> str:
        return self._product.category

    @property
    def product_type(self) -> ProductType:
        return self._product.product_type

    def __getattr__(self, attr: str):
        # variant fields, only for the variant that has them
        if attr.startswith("_"):
            raise AttributeError(attr)
        details = self._product.details
        if attr in self._PHYSICAL_FIELDS and isinstance(details, PhysicalDetails):
            return getattr(details, attr)
        if attr in self._DIGITAL_FIELDS and isinstance(details, DigitalDetails):
            return getattr(details, attr)
        raise AttributeError(f"{self.product_type.value} product has no attribute {attr!r}")

    def calculate_value(self) -> float:
        return self._product.calculate_value()

    def apply_discount(self, percentage: float) -> float:
        return self._product.apply_discount(percentage)

    def calculate_shipping_cost(self) -> Optional[float]:
        return self._product.calculate_shipping_cost()

    def __eq__(self, other) -> bool:
        if isinstance(other, ProductView):
            return self._product is other._product
        return NotImplemented

    def __hash__(self) -> int:
        return id(self._product)

    def __repr__(self) -> str:
        return f"ProductView({self._product!r})"
