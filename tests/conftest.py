import pytest

from inventory_models import Product
from inventory_store import Inventory


@pytest.fixture
def widget():
    return Product.physical("P100", "Widget", 19.99, 5, "Tools", 2.5, "Acme")


@pytest.fixture
def ebook():
    return Product.digital("D200", "Python Handbook", 29.0, 100, "Books",
                           "https://example.com/handbook", 12.5, "Multi-user")


@pytest.fixture
def inventory(tmp_path, widget, ebook):
    inv = Inventory(str(tmp_path / "inventory.csv"))
    inv.add(widget)
    inv.add(ebook)
    inv.add(Product.physical("P300", "Desk Lamp", 45.0, 3, "Home", 4.0, "Lumen Co"))
    return inv
