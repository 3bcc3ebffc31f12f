import logging
import math
import os
import sys
from typing import Callable, Dict, List, Optional

from inventory_models import InventoryError, Product, ProductType, ProductView
from inventory_settings import Settings, get_settings
from inventory_store import Inventory, InventorySummary

TABLE_WIDTH = 100


# Formatting

def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def format_header() -> str:
    header = (f"{'SKU':<12}{'Name':<25}{'Price':<12}{'Qty':<10}"
              f"{'Category':<15}{'Type':<12}{'Total Value':<15}")
    return header + "\n" + "-" * TABLE_WIDTH


def format_product_row(product: ProductView) -> str:
    """Table row plus an indented line with the variant fields"""
    row = (f"{product.sku:<12}"
           f"{_truncate(product.name, 22):<25}"
           f"${product.price:<11.2f}"
           f"{product.quantity:<10}"
           f"{_truncate(product.category, 12):<15}"
           f"{product.product_type.value:<12}"
           f"${product.calculate_value():<14.2f}")
    if product.product_type == ProductType.PHYSICAL:
        extra = f"    -> Weight: {product.weight:g} lbs | Supplier: {product.supplier}"
    else:
        extra = (f"    -> Size: {product.file_size_mb:g} MB | License: {product.license_type}"
                 f" | Link: {_truncate(product.download_link, 30)}")
    return f"{row}\n{extra}"


def format_table(products: List[ProductView]) -> str:
    lines = [format_header()]
    lines.extend(format_product_row(p) for p in products)
    return "\n".join(lines)


def format_inventory(inventory: Inventory) -> str:
    if inventory.is_empty():
        return "[!] Inventory is empty."
    return (format_table(inventory.products()) + "\n" + "-" * TABLE_WIDTH + "\n"
            f"Total Products: {inventory.count()} | Total Value: ${inventory.total_value():,.2f}")


def format_summary(summary: InventorySummary) -> str:
    physical = summary.by_type[ProductType.PHYSICAL]
    digital = summary.by_type[ProductType.DIGITAL]
    return "\n".join([
        "========== INVENTORY SUMMARY ==========",
        f"Total Products: {summary.total_count}",
        f"  - Physical: {physical.count} (${physical.value:,.2f})",
        f"  - Digital:  {digital.count} (${digital.value:,.2f})",
        f"Total Inventory Value: ${summary.total_value:,.2f}",
        "=" * 40,
    ])


def format_low_stock(products: List[ProductView], threshold: int) -> str:
    lines = [f"===== LOW STOCK ALERT (Below {threshold} units) ====="]
    if products:
        lines.append(format_table(products))
    else:
        lines.append("[OK] No products are below the stock threshold.")
    lines.append("=" * 50)
    return "\n".join(lines)


# Input helpers

def get_string_input(prompt: str, allow_empty: bool = False) -> str:
    while True:
        value = input(f"{prompt}: ").strip()
        if value or allow_empty:
            return value
        print("Input cannot be empty. Please try again.")


def get_int_input(prompt: str, minimum: Optional[int] = None, maximum: Optional[int] = None,
                  default: Optional[int] = None) -> int:
    while True:
        raw = input(f"{prompt}: ").strip()
        if not raw and default is not None:
            return default
        try:
            value = int(raw)
        except ValueError:
            print("Invalid input. Please enter a whole number.")
            continue
        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            print(f"Please enter a value between {minimum} and {maximum}.")
            continue
        return value


def get_float_input(prompt: str, minimum: Optional[float] = 0.0) -> float:
    """Finite number, at least `minimum` unless that is None"""
    while True:
        try:
            value = float(input(f"{prompt}: ").strip())
        except ValueError:
            print("Invalid input. Please enter a number.")
            continue
        if not math.isfinite(value):
            print("Invalid input. Please enter a finite number.")
            continue
        if minimum is not None and value < minimum:
            print(f"Value must be at least {minimum}.")
            continue
        return value


def get_optional_number(prompt: str, convert: Callable[[str], float], minimum: float = 0):
    """Blank input means 'keep the current value'"""
    while True:
        raw = input(f"{prompt}: ").strip()
        if not raw:
            return None
        try:
            value = convert(raw)
        except ValueError:
            print("Invalid input. Please enter a number or leave blank.")
            continue
        if not math.isfinite(value) or value < minimum:
            print(f"Value must be a number of at least {minimum}.")
            continue
        return value


# Menu handlers

def add_product(inventory: Inventory):
    print("\n========== ADD NEW PRODUCT ==========")
    print("Product Type:\n  1. Physical Product\n  2. Digital Product")
    kind = get_int_input("Select type", 1, 2)

    sku = get_string_input("Enter SKU (unique identifier)")
    if inventory.exists(sku):
        print(f"❌ SKU '{sku}' already exists!")
        return

    name = get_string_input("Enter product name")
    price = get_float_input("Enter price ($)")
    quantity = get_int_input("Enter quantity", 0)
    category = get_string_input("Enter category")

    if kind == 1:
        weight = get_float_input("Enter weight (lbs)")
        supplier = get_string_input("Enter supplier name")
        product = Product.physical(sku, name, price, quantity, category, weight, supplier)
    else:
        link = get_string_input("Enter download link/URL")
        size = get_float_input("Enter file size (MB)")
        license_type = get_string_input("Enter license type (Single/Multi-user/Enterprise)")
        product = Product.digital(sku, name, price, quantity, category, link, size, license_type)

    if inventory.add(product):
        print(f"✅ Product '{name}' added successfully!")
    else:
        print("❌ Failed to add product.")


def view_products(inventory: Inventory):
    print("\n========== INVENTORY LIST ==========")
    print(format_inventory(inventory))


def edit_product(inventory: Inventory):
    print("\n========== EDIT PRODUCT ==========")
    if inventory.is_empty():
        print("[!] Inventory is empty. Nothing to edit.")
        return

    sku = get_string_input("Enter SKU of product to edit")
    product = inventory.get(sku)
    if product is None:
        print(f"❌ Product with SKU '{sku}' not found!")
        return

    print("\nCurrent product details:")
    print(format_table([product]))
    print("\nLeave blank to keep the current value.")
    name = get_string_input("New name", allow_empty=True)
    price = get_optional_number("New price", float)
    quantity = get_optional_number("New quantity", int)

    if inventory.update(sku, name or None, price, quantity):
        print("✅ Product updated successfully!")
        print(format_table([product]))
    else:
        print("❌ Failed to update product.")


def remove_product(inventory: Inventory):
    print("\n========== REMOVE PRODUCT ==========")
    if inventory.is_empty():
        print("[!] Inventory is empty. Nothing to remove.")
        return

    sku = get_string_input("Enter SKU of product to remove")
    product = inventory.get(sku)
    if product is None:
        print(f"❌ Product with SKU '{sku}' not found!")
        return

    print(format_table([product]))
    confirm = get_string_input("Are you sure you want to remove this product? (y/n)")
    if confirm.lower() != 'y':
        print("[!] Removal cancelled.")
        return
    if inventory.remove(sku):
        print("✅ Product removed successfully!")
    else:
        print("❌ Failed to remove product.")


def search_products(inventory: Inventory):
    if inventory.is_empty():
        print("[!] Inventory is empty. Nothing to search.")
        return

    print("\n--- SEARCH OPTIONS ---")
    print("1. Search by SKU\n2. Search by Name\n3. Search by Category\n"
          "4. Search by Type (Physical/Digital)\n0. Back to Main Menu")
    choice = get_int_input("Select search option", 0, 4)
    if choice == 0:
        return

    if choice == 1:
        found = inventory.get(get_string_input("Enter SKU to search"))
        results = [found] if found is not None else []
    elif choice == 2:
        results = inventory.search_by_name(get_string_input("Enter name to search (partial match)"))
    elif choice == 3:
        results = inventory.search_by_category(get_string_input("Enter category to search"))
    else:
        results = inventory.search_by_type(get_string_input("Enter type (Physical/Digital)"))

    print("\n========== SEARCH RESULTS ==========")
    print(f"Found {len(results)} product(s).")
    if results:
        print(format_table(results))


SORTERS: Dict[int, Callable[[Inventory], None]] = {
    1: Inventory.sort_by_sku,
    2: Inventory.sort_by_name,
    3: Inventory.sort_by_price,
    4: Inventory.sort_by_quantity,
    5: Inventory.sort_by_value,
}


def sort_products(inventory: Inventory):
    if inventory.is_empty():
        print("[!] Inventory is empty. Nothing to sort.")
        return

    print("\n--- SORT OPTIONS ---")
    print("1. Sort by SKU\n2. Sort by Name\n3. Sort by Price\n4. Sort by Quantity\n"
          "5. Sort by Total Value\n0. Back to Main Menu")
    choice = get_int_input("Select sort option", 0, 5)
    if choice == 0:
        return
    SORTERS[choice](inventory)
    print("✅ Inventory sorted.")
    print(format_inventory(inventory))


def show_discount(inventory: Inventory):
    sku = get_string_input("Enter SKU")
    product = inventory.get(sku)
    if product is None:
        print(f"❌ Product with SKU '{sku}' not found!")
        return
    percentage = get_float_input("Enter discount percentage (0-100)", minimum=None)
    print(f"Original price:   ${product.price:,.2f}")
    print(f"Discounted price: ${product.apply_discount(percentage):,.2f}")
    shipping = product.calculate_shipping_cost()
    if shipping is not None:
        print(f"Shipping cost:    ${shipping:,.2f}")


def show_high_value(inventory: Inventory):
    print("\n===== TOP VALUE ITEMS =====")
    inventory.sort_by_value()
    print(format_inventory(inventory))


def display_reports(inventory: Inventory, low_stock_threshold: int):
    print("\n========== INVENTORY REPORTS ==========")
    print("1. Inventory Summary\n2. Low Stock Alert\n3. High Value Items\n"
          "4. Discount & Shipping Calculator\n0. Back to Main Menu")
    choice = get_int_input("Select report", 0, 4)
    if choice == 1:
        print(format_summary(inventory.summary()))
    elif choice == 2:
        threshold = get_int_input(f"Enter low stock threshold [{low_stock_threshold}]",
                                  1, 1000, default=low_stock_threshold)
        print(format_low_stock(inventory.low_stock(threshold), threshold))
    elif choice == 3:
        show_high_value(inventory)
    elif choice == 4:
        show_discount(inventory)


# Console Interface
def display_menu():
    print("\n📦 SMALLBIZ INVENTORY")
    print("1. Add Product")
    print("2. View All Products")
    print("3. Edit Product")
    print("4. Remove Product")
    print("5. Search Products")
    print("6. Sort Inventory")
    print("7. View Reports")
    print("8. Save to File")
    print("9. Reload from File")
    print("0. Exit")


def reload_products(inventory: Inventory) -> bool:
    """Reload from the data file; returns whether the file was read"""
    if inventory.load_from_file():
        print(f"✅ Reloaded {inventory.count()} product(s) from file.")
        return True
    if not os.path.exists(inventory.data_file_path):
        print(f"[!] No file at {inventory.data_file_path}. Nothing was reloaded.")
    else:
        print(f"❌ Could not read {inventory.data_file_path}. Nothing was reloaded.")
    return False


def save_before_exit(inventory: Inventory, file_readable: bool):
    if not file_readable:
        print(f"[!] {inventory.data_file_path} could not be read at start-up.")
        answer = get_string_input("Overwrite it with the current inventory? (y/n)")
        if answer.lower() != 'y':
            print("Exiting without saving.")
            return
    print("Saving inventory before exit...")
    if inventory.save_to_file():
        print("✅ Inventory saved.")
    else:
        print("❌ Failed to save inventory!")


def run(inventory: Inventory, settings: Settings, file_readable: bool = True):
    """Menu loop; `file_readable` False means the data file exists but failed to load"""
    while True:
        display_menu()
        choice = input("\nEnter your choice: ").strip()

        try:
            if choice == '1':
                add_product(inventory)
            elif choice == '2':
                view_products(inventory)
            elif choice == '3':
                edit_product(inventory)
            elif choice == '4':
                remove_product(inventory)
            elif choice == '5':
                search_products(inventory)
            elif choice == '6':
                sort_products(inventory)
            elif choice == '7':
                display_reports(inventory, settings.low_stock_threshold)
            elif choice == '8':
                if inventory.save_to_file():
                    print(f"✅ Inventory saved to {inventory.data_file_path}")
                    file_readable = True
                else:
                    print("❌ Failed to save inventory!")
            elif choice == '9':
                if reload_products(inventory):
                    file_readable = True
            elif choice == '0':
                save_before_exit(inventory, file_readable)
                print("Thank you for using SmallBiz Inventory. Goodbye!")
                break
            else:
                print("Invalid choice. Please try again.")

        except ValueError as e:
            print(f"Invalid input: {e}")
        except InventoryError as e:
            print(f"⚠️ Inventory Error: {e}")


def main(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(levelname)s %(name)s: %(message)s")

    data_file = argv[0] if argv else settings.data_file
    inventory = Inventory(data_file)
    file_readable = True
    if inventory.load_from_file():
        print(f"✅ Loaded {inventory.count()} product(s) from {data_file}")
    elif not os.path.exists(data_file):
        print(f"No existing inventory file at {data_file}. Starting fresh.")
    else:
        file_readable = False
        print(f"❌ Could not read {data_file}. Starting with an empty inventory.")

    try:
        run(inventory, settings, file_readable)
    except (KeyboardInterrupt, EOFError):
        print("\nExiting without saving.")


if __name__ == "__main__":
    main()
