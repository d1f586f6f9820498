import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, Enum, JSON, DateTime

from app.database import Base


class PropertyId(enum.Enum):
    CARAGUA = "caraguatatuba"
    PRAIA_GRANDE = "praia_grande"


class PropertySettings(Base):
    """
    Anzeige-Daten pro Wohnung (Name, Foto, Hausregeln).
    Fehlt ein Eintrag, liefert der SettingsStore die Standardwerte.
    """
    __tablename__ = "property_settings"

    property_id = Column(Enum(PropertyId), primary_key=True)
    name = Column(String(100), nullable=False)
    location = Column(String(200), nullable=True)
    map_link = Column(String(500), nullable=True)
    photo_url = Column(String(500), nullable=True)
    rules = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
