"""Modelos de dominio de referencias de inventario."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Reference:
    """Representa un lote de inventario con sus fechas de ciclo de vida."""

    id: str
    referencia: str
    curva: str
    cantidad: int
    cantidad_colores: str | None = None
    distribucion: str | None = None
    color: str | None = None
    ingreso_a_bodega: str | None = None
    lanzamiento_capsula: str | None = None
    imagen_url: str | None = None
    ubicacion: str | None = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serializa la referencia para persistencia JSON."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Reference:
        """Construye una referencia ignorando llaves desconocidas."""
        known = {item.name for item in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values["cantidad"] = int(values.get("cantidad") or 0)
        return cls(**values)

    def with_changes(self, **changes: Any) -> Reference:
        """Retorna una copia con los campos indicados reemplazados."""
        return replace(self, **changes)


EDITABLE_FIELDS: tuple[str, ...] = (
    "referencia",
    "curva",
    "cantidad",
    "cantidad_colores",
    "distribucion",
    "color",
    "ingreso_a_bodega",
    "lanzamiento_capsula",
    "imagen_url",
    "ubicacion",
)


class ChangeOp(str, Enum):
    """Tipo de cambio notificado por el almacen."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Cambio individual entregado por la suscripcion del almacen."""

    op: ChangeOp
    entity: Reference


@dataclass(frozen=True, slots=True)
class ImportRecord:
    """Registro del historial de importaciones/exportaciones."""

    file_name: str
    record_count: int
    status: str
    timestamp: str
    operation: str = "import"
    error_message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == "success"
