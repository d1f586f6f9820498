from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.models.activity_log import ActivityLog
from app.models.user import User
from app.schemas.activity import ActivityResponse

from app.utils.security import get_current_user
from app.database import get_db

router = APIRouter(prefix="/activities", tags=["activities"])

@router.get("/", response_model=list[ActivityResponse])
def get_activities(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    entity_type: Optional[str] = Query(default=None),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100)
):
    query = db.query(ActivityLog).options(joinedload(ActivityLog.user))
    if entity_type:
        query = query.filter(ActivityLog.entity_type == entity_type)

    return query.order_by(
                ActivityLog.timestamp.desc()
                ).offset(skip).limit(limit).all()


@router.get("/{entity_type}/{entity_id}", response_model=list[ActivityResponse])
def get_entity_activities(
    entity_type: str,
    entity_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    activities = db.query(ActivityLog).filter(
            ActivityLog.entity_id == entity_id,
            ActivityLog.entity_type == entity_type).options(
            joinedload(ActivityLog.user)).order_by(
            ActivityLog.timestamp.desc()).all()

    return activities
