"""DTOs del protocolo cliente-servidor."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date

from parametros import UNLOCK_OFFSET_DAYS


@dataclass(slots=True)
class ReferenceDraft:
    """Campos editables de una referencia, sin id ni marcas de tiempo."""

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

    def to_fields(self) -> dict[str, object]:
        """Retorna los campos como diccionario para crear o actualizar."""
        return asdict(self)


@dataclass(slots=True)
class ImportFileRequest:
    """Solicitud de importacion masiva desde un archivo tabular."""

    file_path: str


@dataclass(slots=True)
class ImportFileResponse:
    """Respuesta de una importacion completada."""

    file_name: str
    record_count: int


@dataclass(slots=True)
class ExportReferencesRequest:
    """Solicitud de exportacion de referencias en el orden indicado."""

    output_dir: str
    filename_stem: str
    reference_ids: list[str] = field(default_factory=list)
    file_format: str = "xlsx"
    offset_days: int = UNLOCK_OFFSET_DAYS
    as_of: date | None = None


@dataclass(slots=True)
class ExportReferencesResponse:
    """Respuesta con la ruta del archivo exportado."""

    created_path: str
    record_count: int
