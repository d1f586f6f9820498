from datetime import date, timedelta
from typing import Iterator


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """
    Überschneidung zweier Zeiträume, beide Enden inklusive.
    Berühren sich zwei Zeiträume (end_a == start_b), gilt das als Überschneidung.
    """
    return start_a <= end_b and end_a >= start_b


def iter_days(start: date, end: date) -> Iterator[date]:
    """Alle Tage von start bis end (inklusive)."""
    for offset in range(count_days(start, end)):
        yield start + timedelta(days=offset)


def count_days(start: date, end: date) -> int:
    return (end - start).days + 1


def format_date(d: date | None) -> str:
    """Formatiert Datum auf Deutsch."""
    if d is None:
        return "-"
    return d.strftime("%d.%m.%Y")
