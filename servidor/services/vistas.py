"""Proyeccion de referencias para la tabla y las tarjetas."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

from parametros import PAGE_SIZE
from servidor.domain.models import Reference
from servidor.services.desbloqueo import (
    ReferenceStatus,
    days_until_unlock,
    evaluate_reference,
    is_locked,
    is_unlocked,
    phase_label,
)
from servidor.services.fechas import format_display_date, format_iso
from shared.catalogos import curva_label
from shared.errors import ValidationError


class StatusFilter(str, Enum):
    """Filtro por estado derivado."""

    ALL = "all"
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class DayRange:
    """Rango inclusivo de dias que faltan para el desbloqueo."""

    label: str
    minimum: int
    maximum: int

    def contains(self, days: int) -> bool:
        return self.minimum <= days <= self.maximum


DAY_RANGE_OPTIONS: tuple[DayRange, ...] = (
    DayRange(label="1-7 días", minimum=1, maximum=7),
    DayRange(label="8-15 días", minimum=8, maximum=15),
    DayRange(label="16-30 días", minimum=16, maximum=30),
)

UNLOCK_DATE_FIELD = "fecha_desbloqueo"
STATUS_DAYS_FIELD = "dias_desbloqueo"

SORT_FIELDS: tuple[str, ...] = (
    "referencia",
    "curva",
    "cantidad",
    "cantidad_colores",
    "distribucion",
    "color",
    "ingreso_a_bodega",
    "lanzamiento_capsula",
    "ubicacion",
    "created_at",
    "updated_at",
    UNLOCK_DATE_FIELD,
    STATUS_DAYS_FIELD,
)


@dataclass(frozen=True, slots=True)
class ReferenceRow:
    """Referencia junto a su estado evaluado para el dia de la consulta."""

    reference: Reference
    status: ReferenceStatus
    today: date

    @property
    def label(self) -> str:
        return phase_label(self.status)

    @property
    def unlock_iso(self) -> str:
        return format_iso(self.status.unlock)

    @property
    def days_until_unlock(self) -> int | None:
        return days_until_unlock(self.status, self.today)

    def sort_value(self, sort_field: str) -> object:
        """Valor usado para ordenar por la columna indicada."""
        if sort_field == UNLOCK_DATE_FIELD:
            return self.unlock_iso or None
        if sort_field == STATUS_DAYS_FIELD:
            return self.status.days
        return getattr(self.reference, sort_field)


@dataclass(frozen=True, slots=True)
class ReferenceQuery:
    """Estado de filtros, orden y pagina de la tabla."""

    search: str = ""
    status: StatusFilter = StatusFilter.ALL
    unlock_month: int | None = None
    day_range: DayRange | None = None
    sort_field: str = "referencia"
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1


@dataclass(frozen=True, slots=True)
class Page:
    """Pagina de resultados ya filtrados y ordenados."""

    rows: tuple[ReferenceRow, ...]
    page: int
    total_pages: int
    total_items: int
    page_size: int = PAGE_SIZE

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True, slots=True)
class ReferenceCard:
    """Datos listos para pintar una tarjeta."""

    id: str
    referencia: str
    color: str
    curva: str
    imagen_url: str | None
    distribucion: str
    ubicacion: str
    launch_label: str
    unlock_label: str
    status_label: str
    unlocked: bool


def evaluate_rows(
    references: Iterable[Reference],
    today: date,
    offset_days: int,
) -> list[ReferenceRow]:
    """Evalua cada referencia contra el dia actual."""
    return [
        ReferenceRow(
            reference=reference,
            status=evaluate_reference(reference, today, offset_days),
            today=today,
        )
        for reference in references
    ]


def filter_references(
    rows: Iterable[ReferenceRow],
    query: ReferenceQuery,
) -> list[ReferenceRow]:
    """Aplica busqueda por referencia, estado, mes y rango de dias."""
    search = query.search.strip().casefold()
    filtered: list[ReferenceRow] = []

    for row in rows:
        if search and search not in row.reference.referencia.casefold():
            continue
        if query.status is StatusFilter.UNLOCKED and not is_unlocked(row.status):
            continue
        if query.status is StatusFilter.LOCKED and not is_locked(row.status):
            continue
        if query.unlock_month is not None and (
            row.status.unlock is None or row.status.unlock.month != query.unlock_month
        ):
            continue
        if query.day_range is not None:
            remaining = row.days_until_unlock
            if remaining is None or not query.day_range.contains(remaining):
                continue
        filtered.append(row)

    return filtered


def sort_rows(
    rows: Iterable[ReferenceRow],
    sort_field: str,
    direction: SortDirection = SortDirection.ASC,
) -> list[ReferenceRow]:
    """Ordena por una columna; vacios al final y desempate por referencia."""
    if sort_field not in SORT_FIELDS:
        raise ValidationError(f"Campo de orden invalido: {sort_field}")

    ordered = sorted(rows, key=lambda row: (row.reference.referencia.casefold(), row.reference.id))
    with_value = [row for row in ordered if row.sort_value(sort_field) not in (None, "")]
    without_value = [row for row in ordered if row.sort_value(sort_field) in (None, "")]

    with_value.sort(
        key=lambda row: _comparable(row.sort_value(sort_field)),
        reverse=direction is SortDirection.DESC,
    )
    return with_value + without_value


def paginate(
    rows: Sequence[ReferenceRow],
    page: int,
    page_size: int = PAGE_SIZE,
) -> Page:
    """Corta la lista en paginas de tamaño fijo, acotando la pagina pedida."""
    total_items = len(rows)
    total_pages = max(1, math.ceil(total_items / page_size))
    current = min(max(1, page), total_pages)
    start = (current - 1) * page_size

    return Page(
        rows=tuple(rows[start:start + page_size]),
        page=current,
        total_pages=total_pages,
        total_items=total_items,
        page_size=page_size,
    )


def page_window(current: int, total_pages: int) -> list[int | None]:
    """Numeros de pagina visibles: primera, ultima y vecinas; None es un salto."""
    pages = [
        page
        for page in range(1, total_pages + 1)
        if page in (1, total_pages) or abs(page - current) <= 1
    ]

    window: list[int | None] = []
    previous: int | None = None
    for page in pages:
        if previous is not None and page - previous > 1:
            window.append(None)
        window.append(page)
        previous = page
    return window


def project_references(
    references: Iterable[Reference],
    query: ReferenceQuery,
    today: date,
    offset_days: int,
    page_size: int = PAGE_SIZE,
) -> Page:
    """Proyeccion completa de la tabla: evaluar, filtrar, ordenar, paginar."""
    rows = evaluate_rows(references, today, offset_days)
    rows = filter_references(rows, query)
    rows = sort_rows(rows, query.sort_field, query.sort_direction)
    return paginate(rows, query.page, page_size)


def build_cards(rows: Iterable[ReferenceRow]) -> list[ReferenceCard]:
    """Tarjetas ordenadas por lanzamiento (sin fecha al final)."""
    ordered = sorted(
        rows,
        key=lambda row: (
            row.status.launch is None,
            row.status.launch or date.min,
            row.reference.referencia.casefold(),
        ),
    )

    cards: list[ReferenceCard] = []
    for row in ordered:
        reference = row.reference
        cards.append(
            ReferenceCard(
                id=reference.id,
                referencia=reference.referencia,
                color=reference.color or "",
                curva=curva_label(reference.curva),
                imagen_url=reference.imagen_url,
                distribucion=reference.distribucion or "-",
                ubicacion=reference.ubicacion or "-",
                launch_label=format_display_date(row.status.launch),
                unlock_label=format_display_date(row.status.unlock),
                status_label=row.label,
                unlocked=is_unlocked(row.status),
            )
        )
    return cards


def _comparable(value: object) -> object:
    """Numeros se comparan como numeros; el resto como texto sin mayusculas."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return str(value).casefold()
