"""
Tests für den Email-Service (Versand unterdrückt via MAIL_SUPPRESS_SEND).
"""
import asyncio
from datetime import date
from types import SimpleNamespace

from fastapi_mail import FastMail

from app.services import email_service
from app.services.email_service import send_booking_confirmation, build_confirmation_body, get_connection_config


def make_reservation(**overrides):
    data = {
        "guest_name": "Tia Maria",
        "email": "maria@example.com",
        "start_date": date(2025, 7, 10),
        "end_date": date(2025, 7, 15),
        "notes": None,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


class TestConfirmationBody:

    def test_body_contains_dates_and_placeholder(self):
        body = build_confirmation_body("Tia Maria", "Apto Praia Grande", date(2025, 7, 10), date(2025, 7, 15), None)

        assert "Hallo Tia Maria" in body
        assert "Apto Praia Grande" in body
        assert "10.07.2025" in body
        assert "15.07.2025" in body
        assert "Keine Notizen." in body


class TestSendBookingConfirmation:

    def test_sends_with_suppressed_backend(self):
        fm = FastMail(get_connection_config())

        with fm.record_messages() as outbox:
            sent = asyncio.run(send_booking_confirmation(make_reservation(), "Apto Caraguatatuba", mailer=fm))

        assert sent is True
        assert len(outbox) == 1
        assert "Apto Caraguatatuba" in outbox[0]["Subject"]

    def test_skips_without_email(self):
        sent = asyncio.run(send_booking_confirmation(make_reservation(email=None), "Apto Caraguatatuba"))
        assert sent is False

    def test_skips_without_sender(self, monkeypatch):
        monkeypatch.setattr(email_service.settings, "smtp_from", "")

        sent = asyncio.run(send_booking_confirmation(make_reservation(), "Apto Caraguatatuba"))

        assert sent is False

    def test_invalid_recipient_returns_false(self):
        """Ungültige Adresse → kein Fehler nach außen, nur False"""
        sent = asyncio.run(send_booking_confirmation(make_reservation(email="keine-email"), "Apto Caraguatatuba"))
        assert sent is False
