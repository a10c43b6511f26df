"""Lectura y formato de fechas de calendario (sin hora ni zona horaria)."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta

# Origen de los numeros seriales de planillas. Replica el bug historico de
# 1900 como año bisiesto, por eso no es 1899-12-31.
SPREADSHEET_EPOCH = date(1899, 12, 30)

MONTH_NAMES: tuple[str, ...] = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)
MONTH_ABBREVIATIONS: tuple[str, ...] = tuple(name[:3] for name in MONTH_NAMES)
WEEKDAY_ABBREVIATIONS: tuple[str, ...] = ("Dom", "Lun", "Mar", "Mié", "Jue", "Vie", "Sáb")

_ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")
_SERIAL_PATTERN = re.compile(r"^\d+(?:[.,]\d+)?$")


def parse_calendar_date(value: object) -> date | None:
    """Convierte un valor almacenado en un dia de calendario.

    Acepta ``YYYY-MM-DD`` (la hora que venga despues se descarta), objetos
    ``date``/``datetime`` y numeros seriales de planilla. Cualquier otro
    valor, vacio o invalido retorna None; nunca lanza excepciones.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return serial_to_date(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = _ISO_DATE_PATTERN.fullmatch(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    if _SERIAL_PATTERN.fullmatch(text):
        return serial_to_date(float(text.replace(",", ".")))

    return None


def serial_to_date(serial: float) -> date | None:
    """Convierte un serial de planilla en fecha; la fraccion (hora) se ignora."""
    if isinstance(serial, bool) or not math.isfinite(serial) or serial < 1:
        return None

    try:
        return SPREADSHEET_EPOCH + timedelta(days=int(serial))
    except OverflowError:
        return None


def today() -> date:
    """Dia actual. Se recalcula en cada llamada, nunca se cachea."""
    return date.today()


def days_between(start: date, end: date) -> int:
    """Dias de calendario completos desde start hasta end."""
    return (end - start).days


def format_iso(value: date | None) -> str:
    """Formatea como ``YYYY-MM-DD`` o cadena vacia si no hay fecha."""
    return value.isoformat() if value is not None else ""


def format_display_date(value: date | str | None) -> str:
    """Formatea una fecha como ``05 ene 2024`` para tablas y tarjetas."""
    if value is None or value == "":
        return "No definida"

    parsed = parse_calendar_date(value)
    if parsed is None:
        return "Fecha inválida"

    return f"{parsed.day:02d} {MONTH_ABBREVIATIONS[parsed.month - 1]} {parsed.year}"


def format_short_date(value: date) -> str:
    """Formato corto para marcas del eje de la cronologia (``5 ene``)."""
    return f"{value.day} {MONTH_ABBREVIATIONS[value.month - 1]}"


def format_month_title(year: int, month: int) -> str:
    """Titulo de mes para el calendario (``enero de 2024``)."""
    return f"{MONTH_NAMES[month - 1]} de {year}"
