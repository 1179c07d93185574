"""
Menu package and item management with recalculate-on-write package pricing.

PRICING CONSISTENCY
===================
MenuPackage.price is a stored, derived value: the sum of its items' price.
Every item create / update / delete calls recalculate_package_price() for
the affected package(s) before the request returns, so readers never see a
package total that disagrees with its items.

Recomputation runs under the per-package lock from strategy_factory and
commits inside it; two concurrent edits of the same package therefore
write their totals one after the other, each re-summing committed items.
Moving an item reprices the old and new package in a single commit, so a
lock timeout on either leaves the move and both prices unwritten.
"""

import time
from contextlib import AsyncExitStack
from typing import Iterable

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CategoryMismatch, NotFound
from app.core.logging import get_logger
from app.core.metrics import price_lock_wait, record_price_recalculation
from app.models.menu import MenuItem, MenuPackage, PackageType
from app.schemas.menu import MenuItemCreate, MenuItemUpdate, MenuPackageCreate, MenuPackageUpdate
from app.services.pricing_service import calculate_package_price
from app.services.strategy_factory import get_price_lock

logger = get_logger(__name__)


# -- packages ---------------------------------------------------------------

async def get_package(db: AsyncSession, package_id: int) -> MenuPackage:
    result = await db.execute(select(MenuPackage).where(MenuPackage.id == package_id))
    package = result.scalar_one_or_none()
    if not package:
        raise NotFound("Menu package", package_id)
    return package


async def list_packages(db: AsyncSession) -> list[MenuPackage]:
    result = await db.execute(select(MenuPackage).order_by(MenuPackage.name.asc(), MenuPackage.id.asc()))
    return list(result.scalars().all())


async def create_package(db: AsyncSession, data: MenuPackageCreate) -> MenuPackage:
    """New packages start at price 0; items define the price."""
    package = MenuPackage(
        name=data.name,
        type=data.type,
        category=data.category,
        description=data.description,
        price=0.0,
    )
    db.add(package)
    await db.flush()
    await db.refresh(package)

    logger.info("menu_package_created", package_id=package.id, name=package.name, type=package.type)
    return package


async def update_package(db: AsyncSession, package_id: int, data: MenuPackageUpdate) -> MenuPackage:
    package = await get_package(db, package_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("type") == PackageType.VEG.value and package.type != PackageType.VEG.value:
        result = await db.execute(
            select(MenuItem).where(MenuItem.package_id == package_id, MenuItem.is_veg.is_(False)).limit(1)
        )
        non_veg = result.scalar_one_or_none()
        if non_veg:
            raise CategoryMismatch(package_id, non_veg.name)

    for field, value in changes.items():
        setattr(package, field, value)
    await db.flush()
    await db.refresh(package)

    logger.info("menu_package_updated", package_id=package.id, fields=sorted(changes))
    return package


async def delete_package(db: AsyncSession, package_id: int) -> None:
    package = await get_package(db, package_id)
    await db.execute(delete(MenuItem).where(MenuItem.package_id == package_id))
    await db.delete(package)
    await db.flush()
    logger.info("menu_package_deleted", package_id=package_id)


async def recalculate_package_price(db: AsyncSession, package_id: int, trigger: str = "manual") -> float:
    """Re-sum the package's item prices, persist the total and return it."""
    prices = await recalculate_package_prices(db, [package_id], trigger=trigger)
    return prices[package_id]


async def recalculate_package_prices(
    db: AsyncSession,
    package_ids: Iterable[int],
    trigger: str = "manual",
) -> dict[int, float]:
    """
    Recompute several packages under their locks and commit them together.

    Locks are taken in ascending id order. If any lock cannot be acquired,
    nothing is committed and the caller's pending item change rolls back
    with the request.
    """
    ids = sorted(set(package_ids))
    lock = get_price_lock()
    started = time.perf_counter()
    async with AsyncExitStack() as held:
        for package_id in ids:
            await held.enter_async_context(lock.hold(package_id))
        price_lock_wait.observe(time.perf_counter() - started)

        recalculated = []
        for package_id in ids:
            package = await get_package(db, package_id)
            result = await db.execute(select(MenuItem).where(MenuItem.package_id == package_id))
            items = list(result.scalars().all())
            recalculated.append((package, package.price, len(items)))
            package.price = calculate_package_price(items)
        await db.commit()

    for package, previous, item_count in recalculated:
        record_price_recalculation(trigger)
        logger.info(
            "package_price_recalculated",
            package_id=package.id,
            previous_price=previous,
            price=package.price,
            item_count=item_count,
            trigger=trigger,
        )
    return {package.id: package.price for package, _, _ in recalculated}


# -- items ------------------------------------------------------------------

def _ensure_category(package: MenuPackage, is_veg: bool, item_name: str) -> None:
    if package.type == PackageType.VEG.value and not is_veg:
        logger.warning("menu_item_category_mismatch", package_id=package.id, item=item_name)
        raise CategoryMismatch(package.id, item_name)


async def get_item(db: AsyncSession, item_id: int) -> MenuItem:
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    item = result.scalar_one_or_none()
    if not item:
        raise NotFound("Menu item", item_id)
    return item


async def list_items(db: AsyncSession) -> list[MenuItem]:
    result = await db.execute(select(MenuItem).order_by(MenuItem.package_id.asc(), MenuItem.id.asc()))
    return list(result.scalars().all())


async def list_items_by_package(db: AsyncSession, package_id: int) -> list[MenuItem]:
    await get_package(db, package_id)
    result = await db.execute(
        select(MenuItem).where(MenuItem.package_id == package_id).order_by(MenuItem.id.asc())
    )
    return list(result.scalars().all())


async def create_item(db: AsyncSession, data: MenuItemCreate) -> MenuItem:
    package = await get_package(db, data.package_id)
    _ensure_category(package, data.is_veg, data.name)

    item = MenuItem(**data.model_dump())
    db.add(item)
    await db.flush()
    await db.refresh(item)
    logger.info("menu_item_created", item_id=item.id, package_id=item.package_id, price=item.price)

    await recalculate_package_price(db, item.package_id, trigger="item_created")
    return item


async def update_item(db: AsyncSession, item_id: int, data: MenuItemUpdate) -> MenuItem:
    item = await get_item(db, item_id)
    changes = data.model_dump(exclude_unset=True)

    old_package_id = item.package_id
    target = await get_package(db, changes.get("package_id", old_package_id))
    _ensure_category(target, changes.get("is_veg", item.is_veg), changes.get("name", item.name))

    for field, value in changes.items():
        setattr(item, field, value)
    await db.flush()
    await db.refresh(item)
    logger.info("menu_item_updated", item_id=item.id, fields=sorted(changes))

    # A move reprices both packages in one commit
    await recalculate_package_prices(db, {old_package_id, target.id}, trigger="item_updated")
    return item


async def delete_item(db: AsyncSession, item_id: int) -> None:
    item = await get_item(db, item_id)
    package_id = item.package_id
    await db.delete(item)
    await db.flush()
    logger.info("menu_item_deleted", item_id=item_id, package_id=package_id)

    await recalculate_package_price(db, package_id, trigger="item_deleted")
