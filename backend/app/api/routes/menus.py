"""
Menu package and menu item endpoints.
Every item mutation recalculates the owning package's price before responding.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.menu import (
    DeleteResponse,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MenuPackageCreate,
    MenuPackageResponse,
    MenuPackageUpdate,
    PriceRecalculationResponse,
)
from app.services import menu_service

router = APIRouter(prefix="/menus", tags=["Menus"])


# Packages

@router.get("/packages", response_model=list[MenuPackageResponse])
async def list_packages_endpoint(db: AsyncSession = Depends(get_db)):
    return await menu_service.list_packages(db)


@router.post("/packages", response_model=MenuPackageResponse, status_code=status.HTTP_201_CREATED)
async def create_package_endpoint(package_data: MenuPackageCreate, db: AsyncSession = Depends(get_db)):
    """Create a package. Its price starts at 0 and follows its items."""
    return await menu_service.create_package(db, package_data)


@router.get("/packages/{package_id}", response_model=MenuPackageResponse)
async def get_package_endpoint(package_id: int, db: AsyncSession = Depends(get_db)):
    return await menu_service.get_package(db, package_id)


@router.patch("/packages/{package_id}", response_model=MenuPackageResponse)
async def update_package_endpoint(
    package_id: int,
    package_data: MenuPackageUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await menu_service.update_package(db, package_id, package_data)


@router.delete("/packages/{package_id}", response_model=DeleteResponse)
async def delete_package_endpoint(package_id: int, db: AsyncSession = Depends(get_db)):
    await menu_service.delete_package(db, package_id)
    return DeleteResponse(message="Menu package deleted successfully")


@router.post("/packages/{package_id}/recalculate-price", response_model=PriceRecalculationResponse)
async def recalculate_price_endpoint(package_id: int, db: AsyncSession = Depends(get_db)):
    """Recompute the package price from its items (repairs drifted totals)."""
    price = await menu_service.recalculate_package_price(db, package_id, trigger="manual")
    return PriceRecalculationResponse(
        message="Package price recalculated successfully",
        package_id=package_id,
        price=price,
    )


# Items

@router.get("/items", response_model=list[MenuItemResponse])
async def list_items_endpoint(db: AsyncSession = Depends(get_db)):
    return await menu_service.list_items(db)


@router.get("/items/package/{package_id}", response_model=list[MenuItemResponse])
async def list_package_items_endpoint(package_id: int, db: AsyncSession = Depends(get_db)):
    return await menu_service.list_items_by_package(db, package_id)


@router.get("/items/{item_id}", response_model=MenuItemResponse)
async def get_item_endpoint(item_id: int, db: AsyncSession = Depends(get_db)):
    return await menu_service.get_item(db, item_id)


@router.post("/items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item_endpoint(item_data: MenuItemCreate, db: AsyncSession = Depends(get_db)):
    """Add an item to a package. Non-veg items are rejected from veg packages."""
    return await menu_service.create_item(db, item_data)


@router.patch("/items/{item_id}", response_model=MenuItemResponse)
async def update_item_endpoint(item_id: int, item_data: MenuItemUpdate, db: AsyncSession = Depends(get_db)):
    return await menu_service.update_item(db, item_id, item_data)


@router.delete("/items/{item_id}", response_model=DeleteResponse)
async def delete_item_endpoint(item_id: int, db: AsyncSession = Depends(get_db)):
    await menu_service.delete_item(db, item_id)
    return DeleteResponse(message="Menu item deleted successfully")
