import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Enum, String, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.property_settings import PropertyId


class DateBlock(Base):
    """Administrative Sperre, z.B. für Wartung. Belegt Tage wie eine Reservierung."""
    __tablename__ = "date_blocks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    property_id = Column(Enum(PropertyId), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    days = relationship("OccupiedDay", back_populates="block", cascade="all, delete-orphan")
