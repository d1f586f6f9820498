"""
SettingsStore: Anzeige-Daten der Wohnungen laden und speichern.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.property_settings import PropertyId, PropertySettings
from app.services.reservation_service import BackendUnavailable

logger = logging.getLogger("app.services.settings_service")


DEFAULT_SETTINGS = {
    PropertyId.CARAGUA: {
        "name": "Apto Caraguatatuba",
        "location": "Caraguatatuba, SP",
        "map_link": "https://maps.google.com/?q=Caraguatatuba,SP",
        "photo_url": "https://images.unsplash.com/photo-1499793983690-e29da59ef1c2?auto=format&fit=crop&q=80&w=800",
        "rules": ["Check-in ab 14 Uhr", "Bettwäsche mitbringen", "Keine laute Musik nach 22 Uhr"],
    },
    PropertyId.PRAIA_GRANDE: {
        "name": "Apto Praia Grande",
        "location": "Praia Grande, SP",
        "map_link": "https://maps.google.com/?q=Praia+Grande,SP",
        "photo_url": "https://images.unsplash.com/photo-1520483601560-389dff434fdf?auto=format&fit=crop&q=80&w=800",
        "rules": ["Check-out bis 12 Uhr", "Keine Haustiere", "Müll bei Abreise mitnehmen"],
    },
}


class SettingsStore:

    def __init__(self, db: Session):
        self.db = db

    def get(self, property_id: PropertyId) -> dict:
        """Gespeicherte Einstellungen oder Standardwerte, falls noch nichts gespeichert ist."""
        stored = self._find(property_id)
        if stored:
            return {
                "property_id": stored.property_id,
                "name": stored.name,
                "location": stored.location,
                "map_link": stored.map_link,
                "photo_url": stored.photo_url,
                "rules": list(stored.rules or []),
            }
        return {"property_id": property_id, **DEFAULT_SETTINGS[property_id]}

    def load(self) -> dict[PropertyId, dict]:
        return {property_id: self.get(property_id) for property_id in PropertyId}

    def display_name(self, property_id: PropertyId) -> str:
        return self.get(property_id)["name"]

    def save(self, property_id: PropertyId, data: dict) -> dict:
        stored = self._find(property_id)
        if not stored:
            stored = PropertySettings(property_id=property_id)
            self.db.add(stored)

        stored.name = data["name"]
        stored.location = data.get("location")
        stored.map_link = data.get("map_link")
        stored.photo_url = data.get("photo_url")
        # Leere Regeln aus dem Formular nicht speichern
        stored.rules = [rule.strip() for rule in data.get("rules", []) if rule and rule.strip()]
        stored.updated_at = datetime.now(timezone.utc)

        self._commit()
        logger.info(f"Einstellungen für {property_id.value} gespeichert")
        return self.get(property_id)

    def seed_defaults(self) -> int:
        """Legt fehlende Einträge mit Standardwerten an. Gibt die Anzahl neuer Einträge zurück."""
        created = 0
        for property_id, defaults in DEFAULT_SETTINGS.items():
            if not self._find(property_id):
                self.db.add(PropertySettings(property_id=property_id, **defaults))
                created += 1
        self._commit()
        return created

    def _find(self, property_id: PropertyId):
        try:
            return self.db.query(PropertySettings).filter(
                PropertySettings.property_id == property_id
            ).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Datenbankfehler beim Lesen der Einstellungen: {e}")
            raise BackendUnavailable(str(e)) from e

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Datenbankfehler beim Speichern der Einstellungen: {e}")
            raise BackendUnavailable(str(e)) from e
