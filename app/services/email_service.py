"""
Email-Service für Buchungsbestätigungen an Familienmitglieder.

Best effort: ein Fehler beim Versand macht die Buchung nie rückgängig.
"""
from typing import Optional

from fastapi_mail import FastMail, MessageSchema, MessageType, ConnectionConfig
import logging
from app.config import settings
from app.utils.dates import format_date

logger = logging.getLogger("app.services.email_service")


# ============ KONFIGURATION ============

def get_connection_config() -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.smtp_user,
        MAIL_PASSWORD=settings.smtp_password,
        MAIL_FROM=settings.smtp_from,
        MAIL_PORT=settings.smtp_port,
        MAIL_SERVER=settings.smtp_host,
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=bool(settings.smtp_user),
        VALIDATE_CERTS=True,
        SUPPRESS_SEND=settings.mail_suppress_send
    )


# ============ HILFSFUNKTIONEN ============

def build_confirmation_body(guest_name: str, property_name: str, start_date, end_date, notes: Optional[str]) -> str:
    return f"""Hallo {guest_name},

deine Reservierung ist eingetragen.

Wohnung: {property_name}
Anreise: {format_date(start_date)}
Abreise: {format_date(end_date)}
Notizen: {notes or "Keine Notizen."}

Viel Spaß!
{settings.app_name}
"""


# ============ EMAIL VERSAND ============

async def send_booking_confirmation(
    reservation,
    property_name: str,
    mailer: Optional[FastMail] = None
) -> bool:
    """
    Sendet die Buchungsbestätigung an die Email der Reservierung.

    Args:
        reservation: Gespeicherte Reservierung (braucht email, guest_name, Daten, notes)
        property_name: Anzeigename der Wohnung
        mailer: Optional vorkonfiguriertes FastMail (z.B. in Tests)

    Returns:
        True wenn versendet, False wenn übersprungen oder fehlgeschlagen
    """
    if not reservation.email:
        return False

    if not settings.smtp_from:
        logger.warning("SMTP-Absender nicht konfiguriert, Bestätigung wird übersprungen")
        return False

    try:
        message = MessageSchema(
            subject=f"Reservierung {property_name}: {format_date(reservation.start_date)} bis {format_date(reservation.end_date)}",
            recipients=[reservation.email],
            body=build_confirmation_body(
                reservation.guest_name,
                property_name,
                reservation.start_date,
                reservation.end_date,
                reservation.notes
            ),
            subtype=MessageType.plain
        )
        fm = mailer or FastMail(get_connection_config())
        await fm.send_message(message)
        logger.info(f"Bestätigung an {reservation.email} gesendet")
        return True
    except Exception as e:
        logger.error(f"EMAIL FEHLER: {e}")
        return False
