import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from app.dependencies import get_ledger
from app.models import User
from app.models.activity_log import ActionType
from app.models.property_settings import PropertyId
from app.routers.reservations import _raise_for_result
from app.schemas.date_block import DateBlockCreate, DateBlockResponse
from app.services.activity_service import log_activity
from app.services.reservation_service import ReservationLedger
from app.utils.security import get_current_user

logger = logging.getLogger("app.routers.date_blocks")

router = APIRouter(prefix="/date-blocks", tags=["date-blocks"])


@router.get("/", response_model=list[DateBlockResponse])
def get_date_blocks(
    property_id: Optional[PropertyId] = None,
    ledger: ReservationLedger = Depends(get_ledger)
):
    return ledger.list_blocks(property_id)


@router.post("/", response_model=DateBlockResponse, status_code=201)
def create_date_block(
    draft: DateBlockCreate,
    current_user: User = Depends(get_current_user),
    ledger: ReservationLedger = Depends(get_ledger)
):
    """
    Sperrt einen Zeitraum (z.B. Wartung). Kollidiert die Sperre mit einer
    bestehenden Reservierung oder Sperre → 409.
    """
    result = ledger.try_create_block(draft)
    _raise_for_result(result)
    block = result.value

    log_activity(
        db=ledger.db,
        entity_type="date_block",
        entity_id=block.id,
        user_id=current_user.id,
        action_type=ActionType.BLOCK_CREATED,
        description=f"Zeitraum gesperrt: {block.reason}",
        new_value=f"{block.start_date} bis {block.end_date}",
        details={"property_id": block.property_id.value}
    )
    return block


@router.delete("/{id}")
def delete_date_block(
    id: UUID,
    current_user: User = Depends(get_current_user),
    ledger: ReservationLedger = Depends(get_ledger)
):
    result = ledger.delete_block(id)
    _raise_for_result(result)
    snapshot = result.value

    log_activity(
        db=ledger.db,
        entity_type="date_block",
        entity_id=snapshot.id,
        user_id=current_user.id,
        action_type=ActionType.BLOCK_DELETED,
        description=f"Sperre aufgehoben: {snapshot.reason}",
        old_value=f"{snapshot.start_date} bis {snapshot.end_date}"
    )
    return {"message": "Sperre gelöscht"}
