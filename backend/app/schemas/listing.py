from datetime import datetime
from pydantic import BaseModel, Field


class ListingResponse(BaseModel):
    id: str
    owner_id: int | None
    title: str
    property_type: str
    intent: str
    price_inr: int | None
    price_display: str = ""
    country: str
    state: str
    city: str
    locality: str | None
    bedrooms: int | None
    media: list[str] = []
    badges: list[str] = []
    details: dict = {}
    status: str
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime
    is_favorite: bool = False

    class Config:
        from_attributes = True


class ListingCreate(BaseModel):
    title: str = Field(min_length=3, max_length=300)
    property_type: str
    intent: str = Field(pattern="^(buy|sell|rent|lease)$")
    price_inr: int | None = Field(default=None, gt=0)  # None means "on request"
    country: str = "India"
    state: str = Field(min_length=1)
    city: str = Field(min_length=1)
    locality: str | None = None
    bedrooms: int | None = Field(default=None, ge=0)
    media: list[str] = []
    badges: list[str] = []
    details: dict = {}


class ListingUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=3, max_length=300)
    property_type: str | None = None
    intent: str | None = Field(default=None, pattern="^(buy|sell|rent|lease)$")
    price_inr: int | None = Field(default=None, gt=0)
    state: str | None = None
    city: str | None = None
    locality: str | None = None
    bedrooms: int | None = Field(default=None, ge=0)
    media: list[str] | None = None
    badges: list[str] | None = None
    details: dict | None = None


class RejectRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=1000)
