from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.change_feed import ChangeFeed
from app.services.reservation_service import ReservationLedger
from app.services.settings_service import SettingsStore


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


def get_ledger(db: Session = Depends(get_db), feed: ChangeFeed = Depends(get_change_feed)) -> ReservationLedger:
    return ReservationLedger(db, feed)


def get_settings_store(db: Session = Depends(get_db)) -> SettingsStore:
    return SettingsStore(db)
