from pydantic import BaseModel


class FavoriteState(BaseModel):
    listing_id: str
    is_favorite: bool


class FavoriteList(BaseModel):
    listing_ids: list[str]
