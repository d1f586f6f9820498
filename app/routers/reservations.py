import logging
from dataclasses import asdict
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_ledger, get_settings_store
from app.models.activity_log import ActionType
from app.models.property_settings import PropertyId
from app.schemas.reservation import (
    ReservationCreate,
    ReservationResponse,
    ConflictEntry,
    ConflictResponse,
    CalendarDayResponse,
    UpcomingEntryResponse
)
from app.services.activity_service import log_activity
from app.services.email_service import send_booking_confirmation
from app.services.reservation_service import ReservationLedger, LedgerResult, Outcome
from app.services.settings_service import SettingsStore

logger = logging.getLogger("app.routers.reservations")

router = APIRouter(prefix="/reservations", tags=["reservations"])


def _raise_for_result(result: LedgerResult):
    """Übersetzt erwartete Ledger-Fehler in HTTP-Fehler."""
    if result.outcome == Outcome.VALIDATION_ERROR:
        raise HTTPException(status_code=422, detail=result.message)
    if result.outcome == Outcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.message)
    if result.outcome == Outcome.CONFLICT:
        body = ConflictResponse(
            message=result.message,
            conflicts=[ConflictEntry(**asdict(c)) for c in result.conflicts]
        )
        raise HTTPException(status_code=409, detail=body.model_dump(mode="json"))


async def _notify(reservation, store: SettingsStore):
    """Bestätigung per Email, Fehler werden nur geloggt."""
    if not reservation.email:
        return
    try:
        sent = await send_booking_confirmation(reservation, store.display_name(reservation.property_id))
        if not sent:
            logger.warning(f"Email an {reservation.email} konnte nicht gesendet werden")
    except Exception as e:
        logger.warning(f"Email-Versand fehlgeschlagen: {e}")


@router.get("/", response_model=list[ReservationResponse])
def get_reservations(
    property_id: Optional[PropertyId] = None,
    ledger: ReservationLedger = Depends(get_ledger)
):
    return ledger.list_reservations(property_id)


@router.get("/upcoming", response_model=list[UpcomingEntryResponse])
def get_upcoming(
    property_id: Optional[PropertyId] = None,
    ledger: ReservationLedger = Depends(get_ledger)
):
    """
    Übersicht: laufende und kommende Reservierungen und Sperren,
    beide Wohnungen zusammen, nach Anreise sortiert.
    """
    return ledger.upcoming(date.today(), property_id)


@router.get("/calendar", response_model=list[CalendarDayResponse])
def get_calendar(
    property_id: PropertyId,
    start: Optional[date] = None,
    days: int = Query(default=31, ge=1, le=62),
    ledger: ReservationLedger = Depends(get_ledger)
):
    """
    Belegung pro Tag für eine Wohnung.
    Tage OHNE Belegung werden als "free" mitgeliefert.
    """
    return ledger.calendar(property_id, start or date.today(), days)


@router.get("/{id}", response_model=ReservationResponse)
def get_reservation(id: UUID, ledger: ReservationLedger = Depends(get_ledger)):
    reservation = ledger.get(id)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservierung nicht gefunden")
    return reservation


@router.post("/", response_model=ReservationResponse, status_code=201)
async def create_reservation(
    draft: ReservationCreate,
    ledger: ReservationLedger = Depends(get_ledger),
    store: SettingsStore = Depends(get_settings_store)
):
    result = ledger.try_create(draft)
    _raise_for_result(result)
    reservation = result.value

    log_activity(
        db=ledger.db,
        entity_type="reservation",
        entity_id=reservation.id,
        action_type=ActionType.RESERVATION_CREATED,
        description=f"Reservierung für {reservation.guest_name} angelegt",
        new_value=f"{reservation.start_date} bis {reservation.end_date}",
        details={"property_id": reservation.property_id.value}
    )

    await _notify(reservation, store)
    return reservation


@router.put("/{id}", response_model=ReservationResponse)
async def update_reservation(
    id: UUID,
    draft: ReservationCreate,
    ledger: ReservationLedger = Depends(get_ledger),
    store: SettingsStore = Depends(get_settings_store)
):
    existing = ledger.get(id)
    old_value = f"{existing.start_date} bis {existing.end_date}" if existing else None

    result = ledger.try_update(id, draft)
    _raise_for_result(result)
    reservation = result.value

    log_activity(
        db=ledger.db,
        entity_type="reservation",
        entity_id=reservation.id,
        action_type=ActionType.RESERVATION_UPDATED,
        description=f"Reservierung für {reservation.guest_name} geändert",
        old_value=old_value,
        new_value=f"{reservation.start_date} bis {reservation.end_date}",
        details={"property_id": reservation.property_id.value}
    )

    await _notify(reservation, store)
    return reservation


@router.delete("/{id}")
def delete_reservation(id: UUID, ledger: ReservationLedger = Depends(get_ledger)):
    result = ledger.delete(id)
    _raise_for_result(result)
    snapshot = result.value

    log_activity(
        db=ledger.db,
        entity_type="reservation",
        entity_id=snapshot.id,
        action_type=ActionType.RESERVATION_DELETED,
        description=f"Reservierung für {snapshot.guest_name} gelöscht",
        old_value=f"{snapshot.start_date} bis {snapshot.end_date}"
    )
    return {"message": "Reservierung gelöscht"}
