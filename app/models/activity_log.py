import uuid
import enum

from sqlalchemy import Column, DateTime, Enum, Text, ForeignKey, String, JSON, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.database import Base

class ActionType(enum.Enum):
    RESERVATION_CREATED = "RESERVATION CREATED"
    RESERVATION_UPDATED = "RESERVATION UPDATED"
    RESERVATION_DELETED = "RESERVATION DELETED"
    BLOCK_CREATED = "BLOCK CREATED"
    BLOCK_DELETED = "BLOCK DELETED"
    SETTINGS_CHANGED = "SETTINGS CHANGED"


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    entity_type = Column(String, nullable=False)
    entity_id = Column(String, nullable=False)
    # Familienmitglieder buchen ohne Account, daher optional
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    user = relationship("User")
    timestamp = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    action_type = Column(Enum(ActionType), nullable=False)
    description = Column(Text, nullable=False)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    details = Column(JSON, nullable=True)
