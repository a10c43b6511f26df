"""Validaciones para entradas del cliente."""

from __future__ import annotations

from pathlib import Path

from servidor.services.distribucion import lookup, split_distribution
from servidor.services.fechas import parse_calendar_date
from shared.catalogos import CANTIDAD_COLORES_OPTIONS, CURVA_OPTIONS
from shared.errors import ValidationError
from shared.protocol import ReferenceDraft


def validate_reference_draft(draft: ReferenceDraft) -> None:
    """Valida los campos de una referencia antes de crearla o editarla."""
    if not draft.referencia.strip():
        raise ValidationError("La referencia es obligatoria.")

    if draft.curva not in CURVA_OPTIONS:
        raise ValidationError(f"Curva invalida: {draft.curva!r}")

    if isinstance(draft.cantidad, bool) or not isinstance(draft.cantidad, int) or draft.cantidad < 1:
        raise ValidationError("La cantidad debe ser un entero mayor a cero.")

    if draft.cantidad_colores and draft.cantidad_colores not in CANTIDAD_COLORES_OPTIONS:
        raise ValidationError(f"Cantidad de colores invalida: {draft.cantidad_colores!r}")

    for label, value in (
        ("ingreso a bodega", draft.ingreso_a_bodega),
        ("lanzamiento de capsula", draft.lanzamiento_capsula),
    ):
        if value and parse_calendar_date(value) is None:
            raise ValidationError(f"Fecha de {label} invalida: {value!r}")

    # Con entrada en la tabla, cantidad y distribucion deben ser las derivadas.
    config = lookup(draft.curva, draft.cantidad_colores)
    if config is not None:
        if draft.cantidad != config.total or draft.distribucion != config.distribution:
            raise ValidationError(
                "Cantidad y distribucion no coinciden con la curva y colores seleccionados "
                f"(esperado {config.total} / {config.distribution})."
            )
        return

    parts = split_distribution(draft.distribucion)
    if parts is not None and sum(parts) != draft.cantidad:
        raise ValidationError(
            f"La distribucion {draft.distribucion!r} no suma la cantidad {draft.cantidad}."
        )


def validate_output_dir(path: Path) -> None:
    """Valida que la ruta de salida sea utilizable para archivos exportados."""
    if path.exists() and not path.is_dir():
        raise ValidationError(f"La ruta no es un directorio: {path}")

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ValidationError(f"No se pudo crear/acceder al directorio: {path}") from exc
