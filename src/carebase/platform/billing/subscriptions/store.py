"""
Subscription persistence boundary.

The engine only reads and writes whole records keyed by organization. Any
backing store must make ``save`` atomic per record and reject a save whose
version does not directly follow the stored one.
"""

import threading
from typing import Protocol, runtime_checkable

from carebase.platform.billing.exceptions import ConcurrentModificationError
from carebase.platform.billing.subscriptions.models import Subscription


@runtime_checkable
class SubscriptionStore(Protocol):
    """Storage interface consumed by the subscription service."""

    def load(self, organization_id: str) -> Subscription | None:
        """Return the organization's subscription, or None."""
        ...

    def save(self, subscription: Subscription) -> None:
        """
        Atomically replace the organization's subscription.

        Raises:
            ConcurrentModificationError: The stored version is not
                ``subscription.version - 1``
        """
        ...


class InMemorySubscriptionStore:
    """Process-local store with per-record compare-and-swap."""

    def __init__(self) -> None:
        self._records: dict[str, Subscription] = {}
        self._lock = threading.Lock()

    def load(self, organization_id: str) -> Subscription | None:
        with self._lock:
            return self._records.get(organization_id)

    def save(self, subscription: Subscription) -> None:
        with self._lock:
            current = self._records.get(subscription.organization_id)
            current_version = current.version if current is not None else 0
            if subscription.version != current_version + 1:
                raise ConcurrentModificationError(
                    subscription.organization_id,
                    expected_version=subscription.version - 1,
                    actual_version=current_version,
                )
            self._records[subscription.organization_id] = subscription
