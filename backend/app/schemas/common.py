"""
Helpers shared by the partial-update (PATCH) schemas.
"""

from typing import Iterable

from pydantic import BaseModel


def reject_explicit_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """
    Omitting a field leaves it unchanged; sending null for a column that
    cannot be empty is a client error (422), not a write.
    """
    nulls = sorted(
        name for name in fields
        if name in model.model_fields_set and getattr(model, name) is None
    )
    if nulls:
        raise ValueError(f"{', '.join(nulls)} cannot be null")
