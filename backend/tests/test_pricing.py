"""
Tests for base package price and quotation package totals.
"""

import pytest

from app.core.exceptions import ValidationError
from app.models.menu import MenuItem, MenuPackage
from app.schemas.quotation import PackageCustomization
from app.services.pricing_service import calculate_package_price, compute_quotation_package_total


@pytest.fixture
def package() -> MenuPackage:
    return MenuPackage(id=7, name="Classic Veg", type="veg", price=1000.0)


@pytest.fixture
def items() -> list[MenuItem]:
    return [
        MenuItem(id=1, package_id=7, category="Starters", name="Paneer Tikka", price=300.0, additional_price=120.0, quantity=1),
        MenuItem(id=2, package_id=7, category="Main Course", name="Dal Makhani", price=450.0, additional_price=150.0, quantity=1),
        MenuItem(id=3, package_id=7, category="Desserts", name="Gulab Jamun", price=250.0, additional_price=80.0, quantity=1),
    ]


def _selected(*items, **overrides):
    return [
        {"id": item.id, "name": item.name, "price": item.price, "is_package_item": True, **overrides}
        for item in items
    ]


def test_package_price_is_sum_of_item_prices(items):
    assert calculate_package_price(items) == 1000.0
    assert calculate_package_price([]) == 0.0


def test_package_price_ignores_additional_price(items):
    items[0].additional_price = 9999.0
    assert calculate_package_price(items) == 1000.0


def test_uncustomized_package_charges_base_price(package, items):
    result = compute_quotation_package_total(PackageCustomization(package_id=7), package, items)

    assert result.total_price == 1000.0
    assert result.total_deduction == 0.0
    assert result.excluded_item_count == 0
    assert result.total_package_items == 3


def test_excluded_item_reported_but_not_deducted_by_default(package, items):
    customization = PackageCustomization(
        package_id=7,
        selected_items=_selected(items[0], items[2]),
    )

    result = compute_quotation_package_total(customization, package, items, deduct_excluded=False)

    assert result.excluded_item_count == 1
    assert result.total_deduction == 450.0
    assert result.excluded_items == ["Dal Makhani"]
    assert result.total_price == 1000.0
    assert result.deductions_applied is False


def test_excluded_item_deducted_when_enabled(package, items):
    customization = PackageCustomization(package_id=7, selected_items=_selected(items[0], items[2]))

    result = compute_quotation_package_total(customization, package, items, deduct_excluded=True)

    assert result.total_price == 550.0
    assert result.deductions_applied is True


def test_deduction_uses_stored_price_not_client_price(package, items):
    selected = _selected(items[0], items[2])
    selected[0]["price"] = 1.0

    result = compute_quotation_package_total(
        PackageCustomization(package_id=7, selected_items=selected), package, items, deduct_excluded=False,
    )

    assert result.total_deduction == 450.0


def test_selection_matches_by_name_without_id(package, items):
    selected = [{"name": item.name, "is_package_item": True} for item in items]

    result = compute_quotation_package_total(
        PackageCustomization(package_id=7, selected_items=selected), package, items, deduct_excluded=False,
    )

    assert result.excluded_item_count == 0


def test_additional_items_add_price_times_quantity(package, items):
    selected = _selected(*items) + [
        {"name": "Extra Biryani", "additional_price": 200.0, "quantity": 2, "is_package_item": False},
    ]

    result = compute_quotation_package_total(
        PackageCustomization(package_id=7, selected_items=selected), package, items, deduct_excluded=False,
    )

    assert result.additional_items_total == 400.0
    assert result.total_price == 1400.0


def test_custom_package_price_overrides_base(package, items):
    customization = PackageCustomization(package_id=7, custom_package_price=850.0)

    result = compute_quotation_package_total(customization, package, items, deduct_excluded=False)

    assert result.custom_package_price == 850.0
    assert result.total_price == 850.0


def test_deduction_never_goes_below_zero(package, items):
    customization = PackageCustomization(package_id=7, selected_items=[], custom_package_price=100.0)

    result = compute_quotation_package_total(customization, package, items, deduct_excluded=True)

    assert result.excluded_item_count == 3
    assert result.total_deduction == 1000.0
    assert result.total_price == 0.0


def test_mismatched_package_rejected(package, items):
    with pytest.raises(ValidationError):
        compute_quotation_package_total(PackageCustomization(package_id=99), package, items)
