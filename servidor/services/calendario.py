"""Agrupacion de referencias por fecha de lanzamiento para el calendario."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from parametros import CALENDAR_MAX_ITEMS_PER_DAY
from servidor.domain.models import Reference
from servidor.services.fechas import parse_calendar_date


@dataclass(frozen=True, slots=True)
class CalendarDay:
    day: date
    references: tuple[Reference, ...] = field(default_factory=tuple)
    is_today: bool = False
    max_items: int = CALENDAR_MAX_ITEMS_PER_DAY

    @property
    def visible(self) -> tuple[Reference, ...]:
        return self.references[: self.max_items]

    @property
    def overflow(self) -> int:
        return max(0, len(self.references) - self.max_items)


def bucket_by_launch(references: Iterable[Reference]) -> dict[str, list[Reference]]:
    """Agrupa referencias por fecha de lanzamiento exacta (``YYYY-MM-DD``)."""
    buckets: dict[str, list[Reference]] = {}
    for reference in references:
        launch = parse_calendar_date(reference.lanzamiento_capsula)
        if launch is None:
            continue
        buckets.setdefault(launch.isoformat(), []).append(reference)
    return buckets


def build_month_grid(
    year: int,
    month: int,
    buckets: dict[str, list[Reference]],
    today: date,
    max_items: int = CALENDAR_MAX_ITEMS_PER_DAY,
) -> list[list[CalendarDay | None]]:
    """Semanas del mes (domingo primero); None son celdas fuera del mes."""
    first = date(year, month, 1)
    leading_blanks = (first.weekday() + 1) % 7
    days_in_month = calendar.monthrange(year, month)[1]

    cells: list[CalendarDay | None] = [None] * leading_blanks
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        cells.append(
            CalendarDay(
                day=day,
                references=tuple(buckets.get(day.isoformat(), ())),
                is_today=day == today,
                max_items=max_items,
            )
        )

    while len(cells) % 7:
        cells.append(None)

    return [cells[index:index + 7] for index in range(0, len(cells), 7)]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Avanza o retrocede ``delta`` meses."""
    index = year * 12 + (month - 1) + delta
    new_year, month_index = divmod(index, 12)
    return new_year, month_index + 1
