"""
Domain exception hierarchy.

Services raise these; the handler registered in app.main turns them into
JSON responses using each class's ``status_code``. A conflict-check result
is a plain value; only the booking service escalates it to VenueConflict.
"""

from typing import Any, Dict, Optional


class BanquetError(Exception):
    """Base exception for all back-office domain errors."""

    status_code: int = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(BanquetError):
    """Malformed booking, session or menu input (bad times, missing venue...)."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        context: Dict[str, Any] = {}
        if field is not None:
            context["field"] = field
        if value is not None:
            context["value"] = value
        super().__init__(message, context)
        self.field = field
        self.value = value


class InvalidDateRange(ValidationError):
    """An end date that falls before its start date."""

    def __init__(self, start, end, field: str = "event_end_date"):
        super().__init__(
            f"End date {end} is before start date {start}",
            field=field,
            value=str(end),
        )
        self.start = start
        self.end = end


class CategoryMismatch(BanquetError):
    """A non-veg item assigned to a veg package."""

    status_code = 400

    def __init__(self, package_id: int, item_name: str):
        super().__init__(
            "Cannot add a non-veg item to a veg package",
            {"package_id": package_id, "item": item_name},
        )


class NotFound(BanquetError):
    """Referenced booking, package or item does not exist."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class VenueConflict(BanquetError):
    """The requested schedule overlaps an existing booking in the same venue."""

    status_code = 409

    def __init__(self, conflicts: list):
        super().__init__(
            "Venue conflict detected",
            {
                "conflicts": conflicts,
                "details": "The selected venue and time slot conflicts with existing bookings",
            },
        )
        self.conflicts = conflicts


class PriceRecalculationBusy(BanquetError):
    """Another worker holds the package price lock for too long."""

    status_code = 409

    def __init__(self, package_id: int):
        super().__init__(
            "Package price is being recalculated, please retry",
            {"package_id": package_id},
        )
