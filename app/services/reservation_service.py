"""
Reservierungs-Ledger: die einzige Stelle, an der Doppelbuchungen verhindert werden.

Regel: zwei Einträge derselben Wohnung überschneiden sich, wenn
start_a <= end_b und end_a >= start_b (beide Enden inklusive).
Ein Wechsel am selben Tag (Abreise == Anreise) ist damit NICHT erlaubt.

Reservierungen und Sperren (DateBlock) belegen dieselben Tage in
occupied_days. Der Unique-Constraint (property_id, day) ist die letzte
Instanz gegen parallele Schreibzugriffe, die Abfrage davor liefert nur
die lesbare Fehlermeldung.
"""
import enum
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.models.date_block import DateBlock
from app.models.property_settings import PropertyId
from app.models.reservation import Reservation, OccupiedDay
from app.schemas.date_block import DateBlockCreate, DateBlockResponse
from app.schemas.reservation import ReservationCreate, ReservationResponse
from app.services.change_feed import ChangeFeed
from app.utils.dates import ranges_overlap, iter_days, count_days

logger = logging.getLogger("app.services.reservation_service")


class BackendUnavailable(Exception):
    """Datenbank nicht erreichbar oder Schreiben fehlgeschlagen."""


class Outcome(enum.Enum):
    OK = "OK"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"


@dataclass
class Conflict:
    kind: str
    id: UUID
    property_id: PropertyId
    start_date: date
    end_date: date
    label: str


@dataclass
class LedgerResult:
    """Ergebnis einer Ledger-Operation. Erwartete Fehler werden zurückgegeben, nicht geworfen."""
    outcome: Outcome
    value: Any = None
    message: Optional[str] = None
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.OK

    @classmethod
    def success(cls, value: Any = None) -> "LedgerResult":
        return cls(Outcome.OK, value=value)

    @classmethod
    def invalid(cls, message: str) -> "LedgerResult":
        return cls(Outcome.VALIDATION_ERROR, message=message)

    @classmethod
    def conflict(cls, conflicts: list[Conflict]) -> "LedgerResult":
        return cls(
            Outcome.CONFLICT,
            message="Zeitraum ist bereits belegt",
            conflicts=conflicts
        )

    @classmethod
    def not_found(cls, message: str) -> "LedgerResult":
        return cls(Outcome.NOT_FOUND, message=message)


# ============ VALIDIERUNG ============

def validate_range(start: date | None, end: date | None) -> Optional[str]:
    if start is None or end is None:
        return "Bitte Start- und Enddatum angeben"
    if start > end:
        return "Das Enddatum darf nicht vor dem Startdatum liegen"
    if count_days(start, end) > settings.max_stay_days:
        return f"Ein Zeitraum darf höchstens {settings.max_stay_days} Tage lang sein"
    return None


def validate_draft(draft: ReservationCreate) -> Optional[str]:
    if not draft.guest_name or not draft.guest_name.strip():
        return "Bitte einen Namen angeben"
    return validate_range(draft.start_date, draft.end_date)


def validate_block(draft: DateBlockCreate) -> Optional[str]:
    if not draft.reason or not draft.reason.strip():
        return "Bitte einen Grund für die Sperre angeben"
    return validate_range(draft.start_date, draft.end_date)


def _reservation_conflict(r: Reservation) -> Conflict:
    return Conflict("reservation", r.id, r.property_id, r.start_date, r.end_date, r.guest_name)


def _block_conflict(b: DateBlock) -> Conflict:
    return Conflict("block", b.id, b.property_id, b.start_date, b.end_date, b.reason)


# ============ LEDGER ============

class ReservationLedger:

    def __init__(self, db: Session, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed

    # ---- Lesen ----

    def list_reservations(self, property_id: Optional[PropertyId] = None) -> list[Reservation]:
        query = self.db.query(Reservation)
        if property_id:
            query = query.filter(Reservation.property_id == property_id)
        return query.order_by(Reservation.start_date, Reservation.created_at).all()

    def get(self, reservation_id: UUID) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def list_blocks(self, property_id: Optional[PropertyId] = None) -> list[DateBlock]:
        query = self.db.query(DateBlock)
        if property_id:
            query = query.filter(DateBlock.property_id == property_id)
        return query.order_by(DateBlock.start_date).all()

    def find_conflicts(
        self,
        property_id: PropertyId,
        start: date,
        end: date,
        exclude_reservation_id: Optional[UUID] = None,
        exclude_block_id: Optional[UUID] = None
    ) -> list[Conflict]:
        """Alle Reservierungen und Sperren der Wohnung, die sich mit [start, end] überschneiden."""
        # Pro Wohnung gibt es nur wenige Einträge, gefiltert wird mit derselben Regel wie überall
        conflicts = [
            _reservation_conflict(r)
            for r in self.list_reservations(property_id)
            if r.id != exclude_reservation_id and ranges_overlap(start, end, r.start_date, r.end_date)
        ]
        conflicts += [
            _block_conflict(b)
            for b in self.list_blocks(property_id)
            if b.id != exclude_block_id and ranges_overlap(start, end, b.start_date, b.end_date)
        ]
        return sorted(conflicts, key=lambda c: c.start_date)

    # ---- Reservierungen ----

    def try_create(self, draft: ReservationCreate) -> LedgerResult:
        error = validate_draft(draft)
        if error:
            return LedgerResult.invalid(error)

        conflicts = self._read(self.find_conflicts, draft.property_id, draft.start_date, draft.end_date)
        if conflicts:
            logger.info(f"Reservierung abgelehnt: {draft.property_id.value} {draft.start_date} bis {draft.end_date} belegt")
            return LedgerResult.conflict(conflicts)

        reservation = Reservation(
            property_id=draft.property_id,
            guest_name=draft.guest_name,
            email=draft.email,
            color=draft.color or settings.default_color,
            start_date=draft.start_date,
            end_date=draft.end_date,
            notes=draft.notes
        )
        reservation.days = self._occupy(draft.property_id, draft.start_date, draft.end_date)

        rejected = self._write(
            lambda: self.db.add(reservation),
            draft.property_id, draft.start_date, draft.end_date
        )
        if rejected:
            return rejected

        self.db.refresh(reservation)
        logger.info(f"Reservierung {reservation.id} angelegt: {reservation.guest_name}, {reservation.start_date} bis {reservation.end_date}")
        self._publish()
        return LedgerResult.success(reservation)

    def try_update(self, reservation_id: UUID, draft: ReservationCreate) -> LedgerResult:
        """
        Ersetzt eine Reservierung in einer einzigen Transaktion.
        Bei einem Konflikt bleibt die ursprüngliche Reservierung unverändert.
        """
        error = validate_draft(draft)
        if error:
            return LedgerResult.invalid(error)

        reservation = self._read(self.get, reservation_id)
        if not reservation:
            return LedgerResult.not_found("Reservierung nicht gefunden")

        conflicts = self._read(
            self.find_conflicts,
            draft.property_id, draft.start_date, draft.end_date,
            exclude_reservation_id=reservation.id
        )
        if conflicts:
            logger.info(f"Änderung an Reservierung {reservation.id} abgelehnt: Zeitraum belegt")
            return LedgerResult.conflict(conflicts)

        def apply():
            # Alte Tage zuerst freigeben, sonst kollidieren sie im selben Flush mit den neuen
            reservation.days.clear()
            self.db.flush()

            reservation.property_id = draft.property_id
            reservation.guest_name = draft.guest_name
            reservation.email = draft.email
            reservation.color = draft.color or reservation.color
            reservation.start_date = draft.start_date
            reservation.end_date = draft.end_date
            reservation.notes = draft.notes
            reservation.days.extend(self._occupy(draft.property_id, draft.start_date, draft.end_date))

        rejected = self._write(
            apply,
            draft.property_id, draft.start_date, draft.end_date,
            exclude_reservation_id=reservation_id
        )
        if rejected:
            return rejected

        self.db.refresh(reservation)
        logger.info(f"Reservierung {reservation.id} geändert: {reservation.start_date} bis {reservation.end_date}")
        self._publish()
        return LedgerResult.success(reservation)

    def delete(self, reservation_id: UUID) -> LedgerResult:
        reservation = self._read(self.get, reservation_id)
        if not reservation:
            return LedgerResult.not_found("Reservierung nicht gefunden")

        snapshot = ReservationResponse.model_validate(reservation)
        self._write(lambda: self.db.delete(reservation))

        logger.info(f"Reservierung {reservation_id} gelöscht")
        self._publish()
        return LedgerResult.success(snapshot)

    # ---- Sperren ----

    def try_create_block(self, draft: DateBlockCreate) -> LedgerResult:
        error = validate_block(draft)
        if error:
            return LedgerResult.invalid(error)

        conflicts = self._read(self.find_conflicts, draft.property_id, draft.start_date, draft.end_date)
        if conflicts:
            return LedgerResult.conflict(conflicts)

        block = DateBlock(
            property_id=draft.property_id,
            start_date=draft.start_date,
            end_date=draft.end_date,
            reason=draft.reason.strip()
        )
        block.days = self._occupy(draft.property_id, draft.start_date, draft.end_date)

        rejected = self._write(
            lambda: self.db.add(block),
            draft.property_id, draft.start_date, draft.end_date
        )
        if rejected:
            return rejected

        self.db.refresh(block)
        logger.info(f"Sperre {block.id} angelegt: {block.start_date} bis {block.end_date} ({block.reason})")
        return LedgerResult.success(block)

    def delete_block(self, block_id: UUID) -> LedgerResult:
        block = self._read(lambda: self.db.query(DateBlock).filter(DateBlock.id == block_id).first())
        if not block:
            return LedgerResult.not_found("Sperre nicht gefunden")

        snapshot = DateBlockResponse.model_validate(block)
        self._write(lambda: self.db.delete(block))

        logger.info(f"Sperre {block_id} gelöscht")
        return LedgerResult.success(snapshot)

    # ---- Übersichten ----

    def calendar(self, property_id: PropertyId, start: date, days: int) -> list[dict]:
        """Belegung Tag für Tag, auch freie Tage werden zurückgegeben."""
        # Fenster endet spätestens am letzten darstellbaren Tag
        days = min(days, count_days(start, date.max))
        end = start + timedelta(days=days - 1)
        occupied = self._read(
            lambda: self.db.query(OccupiedDay).options(
                joinedload(OccupiedDay.reservation),
                joinedload(OccupiedDay.block)
            ).filter(
                OccupiedDay.property_id == property_id,
                OccupiedDay.day >= start,
                OccupiedDay.day <= end
            ).all()
        )
        by_day = {o.day: o for o in occupied}

        result = []
        for day in iter_days(start, end):
            entry = {"day": day, "status": "free"}
            o = by_day.get(day)
            if o and o.reservation:
                entry.update(
                    status="reserved",
                    reservation_id=o.reservation.id,
                    guest_name=o.reservation.guest_name,
                    color=o.reservation.color
                )
            elif o and o.block:
                entry.update(status="blocked", block_id=o.block.id, reason=o.block.reason)
            result.append(entry)
        return result

    def upcoming(self, today: date, property_id: Optional[PropertyId] = None) -> list[dict]:
        """Laufende und zukünftige Reservierungen und Sperren, nach Startdatum sortiert."""
        entries = []
        for r in self._read(self.list_reservations, property_id):
            if r.end_date >= today:
                entries.append({
                    "kind": "reservation",
                    "id": r.id,
                    "property_id": r.property_id,
                    "start_date": r.start_date,
                    "end_date": r.end_date,
                    "label": r.guest_name,
                    "color": r.color,
                    "days": count_days(r.start_date, r.end_date)
                })
        for b in self._read(self.list_blocks, property_id):
            if b.end_date >= today:
                entries.append({
                    "kind": "block",
                    "id": b.id,
                    "property_id": b.property_id,
                    "start_date": b.start_date,
                    "end_date": b.end_date,
                    "label": b.reason,
                    "color": None,
                    "days": count_days(b.start_date, b.end_date)
                })
        return sorted(entries, key=lambda e: e["start_date"])

    # ---- Intern ----

    def _occupy(self, property_id: PropertyId, start: date, end: date) -> list[OccupiedDay]:
        return [OccupiedDay(property_id=property_id, day=d) for d in iter_days(start, end)]

    def _read(self, func: Callable, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Datenbankfehler beim Lesen: {e}")
            raise BackendUnavailable(str(e)) from e

    def _write(
        self,
        apply: Callable[[], None],
        property_id: Optional[PropertyId] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        **exclude
    ) -> Optional[LedgerResult]:
        """
        Führt eine Änderung aus und committed. Alles oder nichts:
        bei einem Fehler wird zurückgerollt.
        """
        try:
            apply()
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if property_id is None:
                logger.error(f"Integritätsfehler: {e}")
                raise BackendUnavailable(str(e)) from e
            # Ein paralleler Request hat die Tage zwischen Prüfung und Commit belegt
            logger.warning(f"Belegung kollidiert beim Speichern: {property_id.value} {start} bis {end}")
            return LedgerResult.conflict(self._read(self.find_conflicts, property_id, start, end, **exclude))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Datenbankfehler beim Speichern: {e}")
            raise BackendUnavailable(str(e)) from e
        return None

    def _publish(self) -> None:
        if self.feed is None:
            return
        self.feed.publish(self._read(self.list_reservations))
