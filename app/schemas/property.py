from pydantic import BaseModel, Field
from typing import Optional

from app.models.property_settings import PropertyId


class PropertySettingsUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    location: Optional[str] = Field(default=None, max_length=200)
    map_link: Optional[str] = Field(default=None, max_length=500)
    photo_url: Optional[str] = Field(default=None, max_length=500)
    rules: list[str] = []


class PropertySettingsResponse(BaseModel):
    property_id: PropertyId
    name: str
    location: Optional[str] = None
    map_link: Optional[str] = None
    photo_url: Optional[str] = None
    rules: list[str]

    model_config = {"from_attributes": True}
