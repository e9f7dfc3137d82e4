"""
Optimistic favorites.

``toggle()`` flips the local mark immediately and hands back an operation
whose ``settle()`` talks to the service. The local mark ends up either
confirmed by the service or restored to what it was before the tap.
"""

import logging
import uuid
from enum import Enum

from client.api import HomeHNIClient
from client.cancellation import CancellationToken, is_cancelled
from client.errors import ClientError, NetworkError

module_logger = logging.getLogger(__name__)


class OperationState(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    LOGIN_REQUIRED = "login_required"
    CANCELLED = "cancelled"


def is_demo_listing(listing_id: str) -> bool:
    """Catalog demo cards use short ids; real listings use UUIDs."""
    try:
        uuid.UUID(str(listing_id))
    except ValueError:
        return True
    return False


class FavoriteToggle:
    def __init__(
        self,
        store: "FavoritesStore",
        listing_id: str,
        previous: bool,
        state: OperationState,
    ):
        self.store = store
        self.listing_id = listing_id
        self.previous = previous
        self.state = state
        self.error: str | None = None

    @property
    def requested(self) -> bool:
        return not self.previous

    async def settle(self, cancel_token: CancellationToken | None = None) -> OperationState:
        """Confirm with the service, or roll back. A no-op once settled."""
        if self.state == OperationState.PENDING:
            await self.store._settle(self, cancel_token)
        return self.state


class FavoritesStore:
    def __init__(self, client: HomeHNIClient, logger: logging.Logger | None = None):
        self.client = client
        self.logger = logger or module_logger
        self._favorites: set[str] = set()

    def is_favorite(self, listing_id: str) -> bool:
        return listing_id in self._favorites

    def count(self) -> int:
        return len(self._favorites)

    @property
    def listing_ids(self) -> frozenset[str]:
        return frozenset(self._favorites)

    def _set(self, listing_id: str, value: bool) -> None:
        if value:
            self._favorites.add(listing_id)
        else:
            self._favorites.discard(listing_id)

    def toggle(self, listing_id: str) -> FavoriteToggle:
        previous = self.is_favorite(listing_id)

        if not self.client.session.authenticated:
            return FavoriteToggle(self, listing_id, previous, OperationState.LOGIN_REQUIRED)

        self._set(listing_id, not previous)

        if is_demo_listing(listing_id):
            # Demo cards have no server row to mark
            return FavoriteToggle(self, listing_id, previous, OperationState.COMMITTED)

        return FavoriteToggle(self, listing_id, previous, OperationState.PENDING)

    async def _settle(
        self, op: FavoriteToggle, cancel_token: CancellationToken | None
    ) -> None:
        if is_cancelled(cancel_token):
            op.state = OperationState.CANCELLED
            return

        try:
            is_favorite = await self.client.toggle_favorite(op.listing_id)
        except ClientError as e:
            if is_cancelled(cancel_token):
                op.state = OperationState.CANCELLED
                return
            self.logger.warning(f"Favorite toggle for {op.listing_id} failed: {e}")
            self._set(op.listing_id, op.previous)
            op.state = OperationState.ROLLED_BACK
            if isinstance(e, NetworkError):
                op.error = "Could not reach the server. Please try again."
            else:
                op.error = "Failed to update favorites. Please try again."
            return

        if is_cancelled(cancel_token):
            op.state = OperationState.CANCELLED
            return

        self._set(op.listing_id, is_favorite)
        op.state = OperationState.COMMITTED

    async def refresh(self, cancel_token: CancellationToken | None = None) -> None:
        """Reload every mark from the service, e.g. after a change on another device."""
        if not self.client.session.authenticated:
            self._favorites = set()
            return

        try:
            listing_ids = await self.client.list_favorites()
        except ClientError as e:
            self.logger.warning(f"Could not load favorites: {e}")
            return

        if is_cancelled(cancel_token):
            return
        self._favorites = set(listing_ids)
