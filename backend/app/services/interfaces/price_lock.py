"""
Package price lock strategy interface.
Allows swapping between in-process and cross-worker serialization.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager


class PackagePriceLock(ABC):
    """
    Serializes price recomputation per menu package.

    Two item edits under the same package must not interleave their
    read-sum-write of MenuPackage.price, or the slower one overwrites the
    newer total with a stale one.

    Implementations:
    - LocalPackagePriceLock: asyncio.Lock per package id, one process
    - RedisPackagePriceLock: Redis lock shared by every worker
    """

    @abstractmethod
    def hold(self, package_id: int) -> AsyncContextManager[None]:
        """
        Async context manager held for the whole recomputation.

        Args:
            package_id: Package whose price is being recomputed

        Raises:
            PriceRecalculationBusy: if the lock cannot be acquired in time
        """
        pass
