from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, model_validator


class LeadCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=5, max_length=40)
    email: EmailStr | None = None
    message: str | None = Field(default=None, max_length=5000)
    listing_id: str | None = None
    service_id: str | None = None

    @model_validator(mode="after")
    def needs_target(self):
        if not self.listing_id and not self.service_id:
            raise ValueError("Either listing_id or service_id is required")
        return self


class LeadResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: str | None
    message: str | None
    listing_id: str | None
    service_id: str | None
    catalog_listing_id: str | None = None
    catalog_service_id: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
