"""
Pydantic schemas for menu packages and menu items.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import reject_explicit_nulls

PackageTypeLiteral = Literal["veg", "non-veg"]


class MenuPackageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: PackageTypeLiteral
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class MenuPackageUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[PackageTypeLiteral] = None
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        reject_explicit_nulls(self, ("name", "type"))
        return self


class MenuPackageResponse(BaseModel):
    id: int
    name: str
    type: str
    category: Optional[str]
    description: Optional[str]
    price: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MenuItemCreate(BaseModel):
    package_id: int
    category: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    price: float = Field(default=0, ge=0)
    additional_price: float = Field(default=0, ge=0)
    is_veg: bool = True


class MenuItemUpdate(BaseModel):
    package_id: Optional[int] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)
    additional_price: Optional[float] = Field(None, ge=0)
    is_veg: Optional[bool] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        # description is the only column an item may clear
        reject_explicit_nulls(
            self,
            ("package_id", "category", "name", "quantity", "price", "additional_price", "is_veg"),
        )
        return self


class MenuItemResponse(BaseModel):
    id: int
    package_id: int
    category: str
    name: str
    description: Optional[str]
    quantity: int
    price: float
    additional_price: float
    is_veg: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class PriceRecalculationResponse(BaseModel):
    message: str
    package_id: int
    price: float


class DeleteResponse(BaseModel):
    message: str
