"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .price_lock import PackagePriceLock
from .local_price_lock import LocalPackagePriceLock

__all__ = ['PackagePriceLock', 'LocalPackagePriceLock']
