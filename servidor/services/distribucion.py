"""Calculo de cantidad total y distribucion por talla segun curva y colores."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from shared.catalogos import DISTRIBUTION_TABLE

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DistributionConfig:
    """Distribucion por talla (``3-4-4-4-3``) y total de unidades."""

    distribution: str
    total: int


@dataclass(frozen=True, slots=True)
class DistributionFormState:
    """Valores del formulario que dependen de curva y cantidad de colores."""

    curva: str | None
    cantidad_colores: str | None
    cantidad: int | None
    distribucion: str | None
    auto_calculated: bool = False


def lookup(curva: str | None, cantidad_colores: str | None) -> DistributionConfig | None:
    """Busca la distribucion fija para el par (curva, cantidad de colores).

    None significa que la cantidad y distribucion se ingresan a mano; nunca
    se asume cero.
    """
    if not curva or not cantidad_colores:
        return None

    entry = DISTRIBUTION_TABLE.get(cantidad_colores, {}).get(curva)
    if entry is None:
        return None

    distribution, total = entry
    return DistributionConfig(distribution=distribution, total=total)


def split_distribution(text: str | None) -> list[int] | None:
    """Separa ``6-6-6`` en enteros; None si algun componente no es numerico."""
    raw = (text or "").strip()
    if not raw:
        return None

    parts = [part.strip() for part in raw.split("-")]
    if not all(part.isdigit() for part in parts):
        return None
    return [int(part) for part in parts]


def distribution_is_consistent(distribution: str | None, total: int) -> bool:
    """Indica si los componentes de la distribucion suman el total."""
    parts = split_distribution(distribution)
    return parts is not None and sum(parts) == total


def recompute_distribution_fields(state: DistributionFormState) -> DistributionFormState:
    """Recalcula cantidad y distribucion cuando cambia curva o colores.

    Si el par tiene entrada en la tabla, ambos campos quedan derivados y de
    solo lectura. Si no, solo se apaga la marca de calculo automatico y se
    conservan los valores ya escritos.
    """
    config = lookup(state.curva, state.cantidad_colores)
    if config is None:
        if state.auto_calculated:
            LOGGER.debug(
                "Distribucion vuelve a ingreso manual: curva=%s, colores=%s",
                state.curva,
                state.cantidad_colores,
            )
        return replace(state, auto_calculated=False)

    return replace(
        state,
        cantidad=config.total,
        distribucion=config.distribution,
        auto_calculated=True,
    )
