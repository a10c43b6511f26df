"""Esquema canonico de columnas tabulares compartido por cliente/servidor."""

from __future__ import annotations

import unicodedata

REFERENCIA_HEADER = "Referencia"
CURVA_HEADER = "Curva"
CANTIDAD_HEADER = "Cantidad"
UNLOCK_DATE_HEADER = "Fecha Desbloqueo"
STATUS_HEADER = "Estado"

# Columna visible -> atributo de Reference.
REFERENCE_COLUMNS: tuple[tuple[str, str], ...] = (
    (REFERENCIA_HEADER, "referencia"),
    (CURVA_HEADER, "curva"),
    (CANTIDAD_HEADER, "cantidad"),
    ("Cantidad de Colores", "cantidad_colores"),
    ("Distribución", "distribucion"),
    ("Color", "color"),
    ("Ingreso a Bodega", "ingreso_a_bodega"),
    ("Lanzamiento Cápsula", "lanzamiento_capsula"),
    ("Imagen", "imagen_url"),
    ("Ubicación", "ubicacion"),
)

REFERENCE_HEADERS: tuple[str, ...] = tuple(header for header, _ in REFERENCE_COLUMNS)
DERIVED_HEADERS: tuple[str, ...] = (UNLOCK_DATE_HEADER, STATUS_HEADER)
EXPORT_HEADERS: tuple[str, ...] = REFERENCE_HEADERS + DERIVED_HEADERS

FIELD_BY_HEADER: dict[str, str] = dict(REFERENCE_COLUMNS)
HEADER_BY_FIELD: dict[str, str] = {field: header for header, field in REFERENCE_COLUMNS}

_FIELD_ALIASES: dict[str, str] = {
    "cantidadcolores": "cantidad_colores",
    "ingresoabodega": "ingreso_a_bodega",
    "lanzamientocapsula": "lanzamiento_capsula",
    "imagenurl": "imagen_url",
    "urlimagen": "imagen_url",
    "imagendereferencia": "imagen_url",
    "lanzamiento": "lanzamiento_capsula",
    "ingreso": "ingreso_a_bodega",
    "colores": "cantidad_colores",
}


def normalize_header_name(header: str) -> str:
    """Normaliza un nombre de columna removiendo BOM y espacios extra."""
    return header.replace("\ufeff", "").strip()


def _lookup_key(text: str) -> str:
    """Clave tolerante a acentos, mayusculas, espacios y guiones."""
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    return "".join(char for char in ascii_text.casefold() if char.isalnum())


_FIELD_LOOKUP: dict[str, str] = {
    **{_lookup_key(header): field for header, field in REFERENCE_COLUMNS},
    **{_lookup_key(field): field for _, field in REFERENCE_COLUMNS},
    **_FIELD_ALIASES,
}


def resolve_reference_field(header: str) -> str | None:
    """Resuelve el atributo de Reference para una columna de importacion.

    Las columnas derivadas (fecha de desbloqueo, estado) y las desconocidas
    retornan None y se ignoran al importar.
    """
    normalized = normalize_header_name(header)
    if not normalized:
        return None
    return _FIELD_LOOKUP.get(_lookup_key(normalized))
