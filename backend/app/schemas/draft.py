from datetime import datetime
from pydantic import BaseModel, Field

STEP_RANGE = {"ge": 1, "le": 7}


class DraftCreate(BaseModel):
    form_type: str = Field(pattern="^(rental|sale|commercial|commercial-sale|land)$")
    property_type: str | None = None
    listing_type: str | None = None
    current_step: int = Field(default=1, **STEP_RANGE)
    data: dict = {}


class DraftUpdate(BaseModel):
    current_step: int | None = Field(default=None, **STEP_RANGE)
    data: dict = {}


class DraftResponse(BaseModel):
    id: str
    form_type: str
    property_type: str
    listing_type: str
    current_step: int
    data: dict
    progress: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
