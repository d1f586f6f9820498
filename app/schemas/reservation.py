from uuid import UUID
from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional

from app.models.property_settings import PropertyId


class ReservationCreate(BaseModel):
    """Entwurf einer Reservierung (Neuanlage und Bearbeitung)"""
    property_id: PropertyId
    guest_name: str = Field(max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    color: Optional[str] = Field(default=None, max_length=20)
    start_date: date
    end_date: date
    notes: Optional[str] = None


class ReservationResponse(BaseModel):
    id: UUID
    property_id: PropertyId
    guest_name: str
    email: Optional[str]
    color: str
    start_date: date
    end_date: date
    notes: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class ConflictEntry(BaseModel):
    """Bestehender Eintrag, der mit dem Entwurf kollidiert"""
    kind: str              # "reservation" oder "block"
    id: UUID
    property_id: PropertyId
    start_date: date
    end_date: date
    label: str


class ConflictResponse(BaseModel):
    message: str
    conflicts: list[ConflictEntry]


class CalendarDayResponse(BaseModel):
    """Ein Tag im Kalender: frei, reserviert oder gesperrt"""
    day: date
    status: str            # "free", "reserved", "blocked"
    reservation_id: Optional[UUID] = None
    guest_name: Optional[str] = None
    color: Optional[str] = None
    block_id: Optional[UUID] = None
    reason: Optional[str] = None


class UpcomingEntryResponse(BaseModel):
    """Eintrag der Übersicht: Reservierungen und Sperren gemeinsam"""
    kind: str
    id: UUID
    property_id: PropertyId
    start_date: date
    end_date: date
    label: str
    color: Optional[str] = None
    days: int
