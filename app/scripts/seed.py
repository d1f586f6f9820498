"""
Richtet die Datenbank ein: Tabellen, Admin-User und Standard-Einstellungen.

    ADMIN_EMAIL=... ADMIN_PASSWORD=... python -m app.scripts.seed
"""
import os
import sys
import traceback

from app.database import Base, SessionLocal, engine
from app.models import User
from app.services.settings_service import SettingsStore
from app.utils.logging_config import setup_logging
from app.utils.security import hash_password

logger = setup_logging()


def ensure_admin(db, email: str, password: str, name: str = "Admin") -> bool:
    """Legt den Admin an, falls es ihn noch nicht gibt. True wenn neu angelegt."""
    if db.query(User).filter(User.email == email).first():
        return False
    db.add(User(name=name, email=email, password_hash=hash_password(password), is_active=True))
    db.commit()
    return True


def main() -> int:
    """
    Gibt Exit-Code zurück: 0 = Erfolg, 1 = Fehler
    """
    logger.info("Seed gestartet")

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = SettingsStore(db).seed_defaults()
        logger.info(f"{created} Wohnungs-Einstellungen angelegt")

        email = os.environ.get("ADMIN_EMAIL")
        password = os.environ.get("ADMIN_PASSWORD")
        if email and password:
            if ensure_admin(db, email, password):
                logger.info(f"Admin {email} angelegt")
            else:
                logger.info(f"Admin {email} existiert bereits")
        else:
            logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD nicht gesetzt, kein Admin angelegt")
        return 0

    except Exception as e:
        logger.error(f"Seed fehlgeschlagen: {e}")
        logger.error(traceback.format_exc())
        return 1
    finally:
        db.close()
        logger.info("Seed beendet")


if __name__ == "__main__":
    sys.exit(main())
