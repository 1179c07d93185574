"""
Menu package and menu item models.

Key design decisions:
- `MenuPackage.price` is denormalized: it always equals the sum of its items'
  `price` and is rewritten by the menu service after every item mutation
- Items reference their package by id only; the menu service deletes a
  package's items together with the package
- `additional_price` is what an item costs when added on top of a package
  in a quotation; it never contributes to the package base price
"""

import enum

from sqlalchemy import Column, Integer, String, Float, Boolean, Text, ForeignKey, CheckConstraint

from app.db.base import Base, TimestampMixin


class PackageType(str, enum.Enum):
    VEG = "veg"
    NON_VEG = "non-veg"


class MenuPackage(Base, TimestampMixin):
    __tablename__ = "menu_packages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(10), nullable=False)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0.0)

    __table_args__ = (
        CheckConstraint("type IN ('veg', 'non-veg')", name="check_menu_package_type"),
        CheckConstraint("price >= 0", name="check_menu_package_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<MenuPackage(id={self.id}, name={self.name}, type={self.type}, price={self.price})>"


class MenuItem(Base, TimestampMixin):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(
        Integer, ForeignKey("menu_packages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Float, nullable=False, default=0.0)
    additional_price = Column(Float, nullable=False, default=0.0)
    is_veg = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_menu_item_quantity_positive"),
        CheckConstraint("price >= 0", name="check_menu_item_price_non_negative"),
        CheckConstraint("additional_price >= 0", name="check_menu_item_additional_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, package={self.package_id}, name={self.name}, price={self.price})>"
