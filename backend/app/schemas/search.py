from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ListingCard(BaseModel):
    """A listing as it appears in search results."""

    id: str
    title: str
    type: str
    intent: str
    price_inr: int | None
    city: str
    state: str
    country: str
    locality: str | None = None
    bedrooms: int | None = None
    image: str | None = None
    badges: list[str] = []
    url: str
    price_display: str = ""
    is_favorite: bool = False
    # Static catalog card with no database row behind it
    demo: bool = False


class ServiceCard(BaseModel):
    id: str
    name: str
    category: str
    city: str
    state: str
    country: str = "India"
    phone: str
    whatsapp: str | None = None
    image: str | None = None
    url: str
    rating: float | None = None
    experience: str | None = None
    demo: bool = False


class SearchPage(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    page_size: int
    has_more: bool
