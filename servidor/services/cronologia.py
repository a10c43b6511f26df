"""Proyeccion de referencias como barras de cronologia (Gantt)."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from parametros import GANTT_DEFAULT_WINDOW_DAYS, GANTT_PADDING_DAYS
from servidor.domain.models import Reference
from servidor.services.desbloqueo import evaluate_reference
from servidor.services.fechas import days_between


class GanttMode(str, Enum):
    """Tramo que representa cada barra."""

    INTAKE_TO_LAUNCH = "intake-to-launch"
    BASE_TO_UNLOCK = "base-to-unlock"


@dataclass(frozen=True, slots=True)
class GanttBar:
    id: str
    label: str
    start: date
    end: date
    progress_percent: int


def compute_progress(start: date, end: date, today: date) -> int:
    """Porcentaje transcurrido del tramo, acotado a 0..100."""
    window = days_between(start, end)
    if window <= 0:
        return 100 if today >= end else 0

    percent = days_between(start, today) / window * 100
    percent = max(0.0, min(100.0, percent))
    return int(percent + 0.5)


def build_gantt_bars(
    references: Iterable[Reference],
    mode: GanttMode,
    today: date,
    offset_days: int,
) -> list[GanttBar]:
    """Una barra por referencia con fecha de lanzamiento (y de ingreso si aplica)."""
    bars: list[GanttBar] = []

    for reference in references:
        status = evaluate_reference(reference, today, offset_days)
        if status.launch is None:
            continue

        if mode is GanttMode.INTAKE_TO_LAUNCH:
            if status.intake is None:
                continue
            start, end = status.intake, status.launch
        else:
            if status.base is None or status.unlock is None:
                continue
            start, end = status.base, status.unlock

        bars.append(
            GanttBar(
                id=reference.id,
                label=reference.referencia,
                start=start,
                end=end,
                progress_percent=compute_progress(start, end, today),
            )
        )

    bars.sort(key=lambda bar: (bar.start, bar.end, bar.label.casefold()))
    return bars


def build_timeline(
    bars: Sequence[GanttBar],
    today: date,
    padding_days: int = GANTT_PADDING_DAYS,
    default_window_days: int = GANTT_DEFAULT_WINDOW_DAYS,
) -> list[date]:
    """Dias del eje: desde el primer inicio hasta el ultimo fin con margen."""
    if not bars:
        return [today + timedelta(days=offset) for offset in range(default_window_days)]

    first = min(bar.start for bar in bars) - timedelta(days=padding_days)
    last = max(bar.end for bar in bars) + timedelta(days=padding_days)
    return [first + timedelta(days=offset) for offset in range(days_between(first, last) + 1)]


def timeline_ticks(timeline: Sequence[date]) -> list[date]:
    """Subconjunto de dias a rotular en el eje (aprox. cinco marcas)."""
    if not timeline:
        return []

    step = max(1, len(timeline) // 5)
    last_index = len(timeline) - 1
    return [day for index, day in enumerate(timeline) if index % step == 0 or index == last_index]


def timeline_position(timeline: Sequence[date], day: date) -> float:
    """Posicion porcentual de un dia dentro del eje."""
    if not timeline:
        return 0.0

    total = days_between(timeline[0], timeline[-1])
    if total <= 0:
        return 0.0
    return days_between(timeline[0], day) / total * 100
