"""
Quotation pricing endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.quotation import PackageCustomization, PackageTotal
from app.services.menu_service import get_package, list_items_by_package
from app.services.pricing_service import compute_quotation_package_total

router = APIRouter(prefix="/quotations", tags=["Quotations"])


@router.post("/menu-package-total", response_model=PackageTotal)
async def menu_package_total_endpoint(
    customization: PackageCustomization,
    db: AsyncSession = Depends(get_db),
):
    """
    Price one package as customized for a quotation.
    Excluded items are priced from the stored menu, not from the request.
    """
    package = await get_package(db, customization.package_id)
    items = await list_items_by_package(db, package.id)
    return compute_quotation_package_total(customization, package, items)
