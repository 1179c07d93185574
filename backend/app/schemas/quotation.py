"""
Quotation-scoped menu customization: request and computed totals.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SelectedMenuItem(BaseModel):
    id: Optional[int] = None
    name: str
    price: float = Field(default=0, ge=0)
    additional_price: float = Field(default=0, ge=0)
    quantity: int = Field(default=1, ge=1)
    is_package_item: bool = True


class CustomMenuItem(BaseModel):
    name: str
    price: float = Field(default=0, ge=0)


class PackageCustomization(BaseModel):
    package_id: int
    # None means "not customized": every package item is included
    selected_items: Optional[list[SelectedMenuItem]] = None
    custom_package_price: Optional[float] = Field(None, ge=0)
    custom_items: list[CustomMenuItem] = Field(default_factory=list)


class PackageTotal(BaseModel):
    package_id: int
    total_price: float
    total_deduction: float
    excluded_item_count: int
    total_package_items: int
    additional_items_total: float
    custom_package_price: float
    deductions_applied: bool
    excluded_items: list[str]
    custom_items: list[CustomMenuItem]
