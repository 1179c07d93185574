from app.models.booking import Booking, BookingSession, BookingStatus
from app.models.menu import MenuPackage, MenuItem, PackageType

__all__ = [
    "Booking", "BookingSession", "BookingStatus",
    "MenuPackage", "MenuItem", "PackageType",
]
