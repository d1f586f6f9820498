import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, String, Text, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.property_settings import PropertyId


class Reservation(Base):
    """
    Ein Aufenthalt in einer Wohnung. start_date und end_date sind beide inklusive.
    """
    __tablename__ = "reservations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    property_id = Column(Enum(PropertyId), nullable=False, index=True)
    guest_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    color = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    days = relationship("OccupiedDay", back_populates="reservation", cascade="all, delete-orphan")


class OccupiedDay(Base):
    """
    Ein belegter Tag pro Wohnung, entweder durch eine Reservierung oder einen Block.
    Der Unique-Constraint verhindert Doppelbuchungen auch bei gleichzeitigen Requests.
    """
    __tablename__ = "occupied_days"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    property_id = Column(Enum(PropertyId), nullable=False)
    day = Column(Date, nullable=False)
    reservation_id = Column(Uuid, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=True)
    block_id = Column(Uuid, ForeignKey("date_blocks.id", ondelete="CASCADE"), nullable=True)

    reservation = relationship("Reservation", back_populates="days")
    block = relationship("DateBlock", back_populates="days")

    __table_args__ = (
        UniqueConstraint('property_id', 'day', name='uq_property_day'),
    )
