from uuid import UUID
from datetime import date, datetime
from pydantic import BaseModel, Field

from app.models.property_settings import PropertyId


class DateBlockCreate(BaseModel):
    property_id: PropertyId
    start_date: date
    end_date: date
    reason: str = Field(max_length=255)


class DateBlockResponse(BaseModel):
    id: UUID
    property_id: PropertyId
    start_date: date
    end_date: date
    reason: str
    created_at: datetime

    model_config = {"from_attributes": True}
