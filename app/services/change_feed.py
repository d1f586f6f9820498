"""
Benachrichtigung über Änderungen an Reservierungen.

Abonnenten bekommen nach jedem erfolgreichen Commit die komplette,
nach Startdatum sortierte Reservierungsliste.
"""
import logging
import threading
from typing import Callable

logger = logging.getLogger("app.services.change_feed")


class ChangeFeed:

    def __init__(self):
        self._subscribers: list[Callable[[list], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[list], None]) -> Callable[[], None]:
        """Registriert einen Callback. Gibt eine Funktion zum Abmelden zurück."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, reservations: list) -> None:
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            # Ein fehlerhafter Abonnent darf die anderen nicht blockieren
            try:
                callback(reservations)
            except Exception as e:
                logger.warning(f"Abonnent fehlgeschlagen: {e}")
