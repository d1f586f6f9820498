import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.activity_log import ActivityLog, ActionType
from app.services.reservation_service import BackendUnavailable
from uuid import UUID
from typing import Optional

logger = logging.getLogger("app.services.activity_service")


def log_activity(
    db: Session,
    entity_type: str,
    entity_id: UUID | str,
    action_type: ActionType,
    description: str,
    user_id: Optional[UUID] = None,
    old_value: Optional[str] = None,
    new_value: Optional[str] = None,
    details: Optional[dict] = None
):
    new_activity_log = ActivityLog(
        entity_type=entity_type,
        entity_id=str(entity_id),
        user_id=user_id,
        action_type=action_type,
        description=description,
        old_value=old_value,
        new_value=new_value,
        details=details
    )
    try:
        db.add(new_activity_log)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Aktivität {action_type.value} für {entity_type} {entity_id} nicht gespeichert: {e}")
        raise BackendUnavailable(str(e)) from e
