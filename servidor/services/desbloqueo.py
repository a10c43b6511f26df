"""Calculo de fecha de desbloqueo y fase del ciclo de vida de una referencia.

Todas las funciones son puras: dependen solo de sus argumentos (incluido
``today``) y se pueden evaluar de nuevo en cada refresco de las vistas.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from servidor.domain.models import Reference
from servidor.services.fechas import days_between, parse_calendar_date


class LifecyclePhase(str, Enum):
    """Fase derivada de las fechas de una referencia."""

    NO_SCHEDULE = "no-schedule"
    PENDING_LAUNCH = "pending-launch"
    PENDING_INTAKE = "pending-intake"
    COUNTING_DOWN = "counting-down"
    UNLOCKED = "unlocked"


LOCKED_PHASES: frozenset[LifecyclePhase] = frozenset(
    {
        LifecyclePhase.PENDING_LAUNCH,
        LifecyclePhase.PENDING_INTAKE,
        LifecyclePhase.COUNTING_DOWN,
    }
)


@dataclass(frozen=True, slots=True)
class UnlockSchedule:
    """Fecha base de la cuenta regresiva y fecha de desbloqueo resultante."""

    base: date
    unlock: date


@dataclass(frozen=True, slots=True)
class LifecycleStatus:
    """Fase y dias asociados (restantes o None cuando no aplica)."""

    phase: LifecyclePhase
    days: int | None


@dataclass(frozen=True, slots=True)
class ReferenceStatus:
    """Estado completo de una referencia evaluada en un dia dado."""

    intake: date | None
    launch: date | None
    base: date | None
    unlock: date | None
    phase: LifecyclePhase
    days: int | None

    @property
    def lifecycle(self) -> LifecycleStatus:
        return LifecycleStatus(phase=self.phase, days=self.days)


def derive_base_and_unlock(
    intake: date | None,
    launch: date | None,
    offset_days: int,
) -> UnlockSchedule | None:
    """Calcula fecha base y de desbloqueo.

    Sin lanzamiento no hay calendario. Si la mercaderia ingresa a bodega
    despues del lanzamiento, la cuenta parte desde el ingreso real.
    """
    if launch is None:
        return None

    base = intake if intake is not None and intake > launch else launch
    return UnlockSchedule(base=base, unlock=base + timedelta(days=offset_days))


def classify(
    today: date,
    launch: date | None,
    base: date | None,
    unlock: date | None,
) -> LifecycleStatus:
    """Clasifica la fase de una referencia para el dia ``today``."""
    if launch is None or base is None or unlock is None:
        return LifecycleStatus(phase=LifecyclePhase.NO_SCHEDULE, days=None)

    if today < launch:
        return LifecycleStatus(
            phase=LifecyclePhase.PENDING_LAUNCH,
            days=days_between(today, launch),
        )

    if today < base:
        return LifecycleStatus(
            phase=LifecyclePhase.PENDING_INTAKE,
            days=days_between(today, base),
        )

    offset_days = days_between(base, unlock)
    elapsed = days_between(base, today)
    if elapsed < offset_days:
        return LifecycleStatus(
            phase=LifecyclePhase.COUNTING_DOWN,
            days=offset_days - elapsed,
        )

    return LifecycleStatus(phase=LifecyclePhase.UNLOCKED, days=0)


def evaluate_reference(
    reference: Reference,
    today: date,
    offset_days: int,
) -> ReferenceStatus:
    """Lee fechas de la referencia, deriva su calendario y la clasifica."""
    intake = parse_calendar_date(reference.ingreso_a_bodega)
    launch = parse_calendar_date(reference.lanzamiento_capsula)
    schedule = derive_base_and_unlock(intake, launch, offset_days)
    base = schedule.base if schedule is not None else None
    unlock = schedule.unlock if schedule is not None else None
    status = classify(today, launch, base, unlock)

    return ReferenceStatus(
        intake=intake,
        launch=launch,
        base=base,
        unlock=unlock,
        phase=status.phase,
        days=status.days,
    )


def phase_label(status: LifecycleStatus | ReferenceStatus) -> str:
    """Etiqueta legible de la fase, usada en tabla, tarjetas y exportacion."""
    phase = status.phase
    days = status.days or 0

    if phase is LifecyclePhase.NO_SCHEDULE:
        return "Sin fecha de lanzamiento"
    if phase is LifecyclePhase.PENDING_LAUNCH:
        return f"{_format_days(days)} para lanzar"
    if phase is LifecyclePhase.PENDING_INTAKE:
        return f"{_format_days(days)} para ingreso a bodega"
    if phase is LifecyclePhase.COUNTING_DOWN:
        return f"{_format_days(days)} restantes" if days != 1 else "1 día restante"
    return "Desbloqueado"


def is_unlocked(status: LifecycleStatus | ReferenceStatus) -> bool:
    return status.phase is LifecyclePhase.UNLOCKED


def is_locked(status: LifecycleStatus | ReferenceStatus) -> bool:
    """True mientras la referencia tiene calendario pero aun no se desbloquea."""
    return status.phase in LOCKED_PHASES


def days_until_unlock(status: ReferenceStatus, today: date) -> int | None:
    """Dias que faltan para la fecha de desbloqueo (negativo si ya paso)."""
    if status.unlock is None:
        return None
    return days_between(today, status.unlock)


def _format_days(days: int) -> str:
    return "1 día" if days == 1 else f"{days} días"
