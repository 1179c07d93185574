from app.schemas.booking import (
    BookingCreate, BookingUpdate, BookingResponse, BookingCancel, ConflictCheckResponse,
)
from app.schemas.menu import (
    MenuPackageCreate, MenuPackageUpdate, MenuPackageResponse,
    MenuItemCreate, MenuItemUpdate, MenuItemResponse,
)
from app.schemas.occupancy import VenueOccupancyEntry
from app.schemas.quotation import PackageCustomization, PackageTotal

__all__ = [
    "BookingCreate", "BookingUpdate", "BookingResponse", "BookingCancel", "ConflictCheckResponse",
    "MenuPackageCreate", "MenuPackageUpdate", "MenuPackageResponse",
    "MenuItemCreate", "MenuItemUpdate", "MenuItemResponse",
    "VenueOccupancyEntry",
    "PackageCustomization", "PackageTotal",
]
