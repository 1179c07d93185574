"""
Menu package pricing.

Two prices exist for a package:

  - the base price, persisted on MenuPackage.price: the sum of its items'
    `price` (never `additional_price`). The menu service recomputes it after
    every item mutation.
  - the quotation price, computed here per quotation and never stored:

        custom_package_price = explicit override, else base price
        additional_items     = sum(additional_price * quantity) over
                               selected items that are not package items
        total_price          = custom_package_price + additional_items

The deduction for excluded package items is always reported. It only lowers
total_price when DEDUCT_EXCLUDED_ITEMS is enabled; by default it is shown to
the user without reducing the charged amount.
"""

from typing import Iterable, Optional, Sequence

from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.models.menu import MenuItem, MenuPackage
from app.schemas.quotation import PackageCustomization, PackageTotal, SelectedMenuItem


def _money(value: float) -> float:
    return round(float(value), 2)


def calculate_package_price(items: Iterable[MenuItem]) -> float:
    """Base package price: sum of item prices."""
    return _money(sum(item.price or 0 for item in items))


def _is_selected(item: MenuItem, selected: Sequence[SelectedMenuItem]) -> bool:
    for choice in selected:
        if choice.id is not None:
            if choice.id == item.id:
                return True
        elif choice.name == item.name:
            return True
    return False


def compute_quotation_package_total(
    customization: PackageCustomization,
    package: MenuPackage,
    items: Sequence[MenuItem],
    deduct_excluded: Optional[bool] = None,
) -> PackageTotal:
    """Customized price of one package inside one quotation."""
    if customization.package_id != package.id:
        raise ValidationError(
            "Customization does not belong to this package",
            field="package_id",
            value=customization.package_id,
        )
    if deduct_excluded is None:
        deduct_excluded = get_settings().DEDUCT_EXCLUDED_ITEMS

    if customization.selected_items is None:
        excluded: list[MenuItem] = []
        additional: list[SelectedMenuItem] = []
    else:
        package_choices = [s for s in customization.selected_items if s.is_package_item]
        additional = [s for s in customization.selected_items if not s.is_package_item]
        excluded = [item for item in items if not _is_selected(item, package_choices)]

    # Authoritative prices from the stored items, never the client's copy
    total_deduction = _money(sum(item.price or 0 for item in excluded))
    additional_total = _money(sum(s.additional_price * s.quantity for s in additional))

    if customization.custom_package_price is not None:
        package_price = _money(customization.custom_package_price)
    else:
        package_price = _money(package.price or 0)

    total_price = package_price + additional_total
    if deduct_excluded:
        total_price = max(total_price - total_deduction, 0.0)

    return PackageTotal(
        package_id=package.id,
        total_price=_money(total_price),
        total_deduction=total_deduction,
        excluded_item_count=len(excluded),
        total_package_items=len(items),
        additional_items_total=additional_total,
        custom_package_price=package_price,
        deductions_applied=deduct_excluded,
        excluded_items=[item.name for item in excluded],
        custom_items=customization.custom_items,
    )
