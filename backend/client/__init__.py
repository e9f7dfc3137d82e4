"""Client-side sync layer for the HomeHNI API."""

from client.api import HomeHNIClient, Session
from client.cancellation import CancellationToken
from client.favorites import FavoritesStore, FavoriteToggle, OperationState
from client.local_store import LocalDraftStore
from client.wizard import DraftWizard, DraftWriteQueue, ResumeOffer

__all__ = [
    "HomeHNIClient",
    "Session",
    "CancellationToken",
    "FavoritesStore",
    "FavoriteToggle",
    "OperationState",
    "LocalDraftStore",
    "DraftWizard",
    "DraftWriteQueue",
    "ResumeOffer",
]
