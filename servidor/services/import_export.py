"""Importacion masiva y exportacion de referencias en CSV o Excel."""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime
from pathlib import Path
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from servidor.domain.models import ImportRecord
from servidor.services.distribucion import lookup, split_distribution
from servidor.services.fechas import format_iso, parse_calendar_date
from servidor.services.import_history import ImportHistoryLog
from servidor.services.reference_store import JsonReferenceStore
from servidor.services.vistas import ReferenceRow
from shared.catalogos import CANTIDAD_COLORES_OPTIONS, CURVA_LABELS, CURVA_OPTIONS, DOS_COLORES, UN_COLOR
from shared.csv_schema import EXPORT_HEADERS, REFERENCE_COLUMNS, normalize_header_name, resolve_reference_field
from shared.errors import ImportIssue, ImportValidationError, ServiceError, ValidationError
from shared.protocol import ImportFileResponse, ReferenceDraft

LOGGER = logging.getLogger(__name__)

SUPPORTED_IMPORT_SUFFIXES = (".csv", ".txt", ".xlsx")
EXPORT_FORMATS = ("csv", "xlsx")

RawRow = dict[str, object]

_CURVA_LOOKUP: dict[str, str] = {
    **{curva.casefold(): curva for curva in CURVA_OPTIONS},
    **{label.casefold(): curva for curva, label in CURVA_LABELS.items()},
}
_COLORES_LOOKUP: dict[str, str] = {
    **{option.casefold(): option for option in CANTIDAD_COLORES_OPTIONS},
    "1": UN_COLOR,
    "2": DOS_COLORES,
}


def read_rows(path: Path) -> list[tuple[int, RawRow]]:
    """Lee un archivo tabular y retorna ``(numero_de_fila, valores_por_columna)``.

    La fila 1 es el encabezado, por lo que la primera fila de datos es la 2.
    Las filas completamente vacias se omiten conservando la numeracion.
    """
    if not path.exists() or not path.is_file():
        raise ValidationError(f"No existe el archivo a importar: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_IMPORT_SUFFIXES:
        raise ValidationError(
            "Formato no soportado. Use uno de: " + ", ".join(SUPPORTED_IMPORT_SUFFIXES)
        )

    table = _read_xlsx(path) if suffix == ".xlsx" else _read_delimited(path)
    if not table:
        return []

    headers = [normalize_header_name(_cell_text(cell)) for cell in table[0]]
    rows: list[tuple[int, RawRow]] = []
    for offset, values in enumerate(table[1:], start=2):
        if not any(_cell_text(value) for value in values):
            continue
        raw = {
            header: values[index] if index < len(values) else None
            for index, header in enumerate(headers)
            if header
        }
        rows.append((offset, raw))

    LOGGER.debug("Archivo leido: path=%s, filas=%d", path, len(rows))
    return rows


def _read_delimited(path: Path) -> list[list[object]]:
    """Lee CSV/TXT detectando separador entre coma, punto y coma o tabulador."""
    try:
        with path.open("r", newline="", encoding="utf-8-sig") as csv_file:
            sample = csv_file.read(4096)
            csv_file.seek(0)
            try:
                dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
            except csv.Error:
                dialect = csv.excel
            return [list(row) for row in csv.reader(csv_file, dialect)]
    except UnicodeDecodeError as exc:
        raise ValidationError(f"El archivo debe estar codificado en UTF-8: {path.name}") from exc
    except OSError as exc:
        raise ServiceError(f"No fue posible leer el archivo: {path}") from exc


def _read_xlsx(path: Path) -> list[list[object]]:
    """Lee la hoja activa de un libro Excel con valores ya calculados."""
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError) as exc:
        raise ValidationError(f"El archivo Excel no es valido: {path.name}") from exc
    except OSError as exc:
        raise ServiceError(f"No fue posible leer el archivo: {path}") from exc

    try:
        sheet = workbook.active
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _cell_text(value: object) -> str:
    """Texto de una celda en una sola linea."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return _clean_single_line(str(value))


def _clean_single_line(text: str) -> str:
    """Normaliza texto en una sola linea para almacenamiento."""
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "")
    cleaned = cleaned.replace("\n", " ")
    return cleaned.strip()


class ReferenceImportService:
    """Importa lotes de referencias con semantica todo o nada."""

    OPERATION = "import"

    def __init__(
        self,
        store: JsonReferenceStore,
        history: ImportHistoryLog,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._history = history
        self._clock = clock

    def import_file(self, path: Path) -> ImportFileResponse:
        """Valida todas las filas y crea las referencias solo si no hay problemas."""
        file_name = path.name
        LOGGER.info("Importando referencias desde: %s", path)

        try:
            rows = read_rows(path)
            if not rows:
                raise ValidationError(f"El archivo '{file_name}' no contiene filas para importar.")
            drafts = self._build_drafts(file_name, rows)
            created = self._store.create_many(drafts)
        except (ValidationError, ServiceError) as exc:
            LOGGER.warning("Importacion rechazada: file=%s, motivo=%s", file_name, exc)
            self._record(file_name, 0, "error", str(exc))
            raise

        self._record(file_name, len(created), "success")
        LOGGER.info("Importacion completada: file=%s, referencias=%d", file_name, len(created))
        return ImportFileResponse(file_name=file_name, record_count=len(created))

    def _build_drafts(
        self,
        file_name: str,
        rows: Sequence[tuple[int, RawRow]],
    ) -> list[ReferenceDraft]:
        headers = {resolve_reference_field(header) for header in rows[0][1]}
        if "referencia" not in headers:
            raise ValidationError(f"El archivo '{file_name}' no tiene la columna 'Referencia'.")

        existing = self._store.existing_referencias()
        seen: set[str] = set()
        issues: list[ImportIssue] = []
        drafts: list[ReferenceDraft] = []

        for row_number, raw in rows:
            draft = self._row_to_draft(row_number, raw, issues)
            if draft is None:
                continue

            key = draft.referencia.casefold()
            if key in seen:
                issues.append(
                    ImportIssue(row_number, "referencia", draft.referencia, "Referencia repetida en el archivo")
                )
            elif key in existing:
                issues.append(
                    ImportIssue(row_number, "referencia", draft.referencia, "La referencia ya existe")
                )
            seen.add(key)
            drafts.append(draft)

        if issues:
            raise ImportValidationError(file_name, issues)
        return drafts

    @staticmethod
    def _row_to_draft(
        row_number: int,
        raw: RawRow,
        issues: list[ImportIssue],
    ) -> ReferenceDraft | None:
        """Convierte una fila en borrador; agrega problemas en vez de lanzar."""
        values: dict[str, object] = {}
        for header, value in raw.items():
            field_name = resolve_reference_field(header)
            if field_name is not None and field_name not in values:
                values[field_name] = value

        issue_count = len(issues)

        def text(field_name: str) -> str:
            return _cell_text(values.get(field_name))

        referencia = text("referencia")
        if not referencia:
            issues.append(ImportIssue(row_number, "referencia", "", "La referencia es obligatoria"))

        raw_curva = text("curva")
        curva = _CURVA_LOOKUP.get(raw_curva.casefold())
        if curva is None:
            issues.append(ImportIssue(row_number, "curva", raw_curva, "Curva invalida"))

        raw_colores = text("cantidad_colores")
        cantidad_colores = _COLORES_LOOKUP.get(raw_colores.casefold()) if raw_colores else None
        if raw_colores and cantidad_colores is None:
            issues.append(
                ImportIssue(row_number, "cantidad_colores", raw_colores, "Cantidad de colores invalida")
            )

        fechas: dict[str, str | None] = {}
        for field_name in ("ingreso_a_bodega", "lanzamiento_capsula"):
            raw_value = values.get(field_name)
            raw_text = _cell_text(raw_value)
            parsed = parse_calendar_date(raw_value)
            if raw_text and parsed is None:
                issues.append(ImportIssue(row_number, field_name, raw_text, "Fecha invalida"))
            fechas[field_name] = format_iso(parsed) or None

        raw_cantidad = text("cantidad")
        distribucion = text("distribucion") or None
        config = lookup(curva, cantidad_colores)
        if config is not None:
            raw_cantidad = raw_cantidad or str(config.total)
            distribucion = distribucion or config.distribution

        cantidad = _parse_cantidad(raw_cantidad)
        if cantidad is None:
            issues.append(
                ImportIssue(row_number, "cantidad", raw_cantidad, "La cantidad debe ser un entero mayor a cero")
            )
        elif config is not None:
            # Con entrada en la tabla, los valores escritos deben ser los derivados.
            if cantidad != config.total:
                issues.append(
                    ImportIssue(
                        row_number,
                        "cantidad",
                        raw_cantidad,
                        f"La cantidad no coincide con la curva y colores (esperado {config.total})",
                    )
                )
            if distribucion != config.distribution:
                issues.append(
                    ImportIssue(
                        row_number,
                        "distribucion",
                        distribucion or "",
                        f"La distribucion no coincide con la curva y colores (esperado {config.distribution})",
                    )
                )
        else:
            parts = split_distribution(distribucion)
            if parts is not None and sum(parts) != cantidad:
                issues.append(
                    ImportIssue(
                        row_number,
                        "distribucion",
                        distribucion or "",
                        f"La distribucion no suma la cantidad {cantidad}",
                    )
                )

        if len(issues) > issue_count:
            return None

        return ReferenceDraft(
            referencia=referencia,
            curva=curva or "",
            cantidad=cantidad or 0,
            cantidad_colores=cantidad_colores,
            distribucion=distribucion,
            color=text("color") or None,
            ingreso_a_bodega=fechas["ingreso_a_bodega"],
            lanzamiento_capsula=fechas["lanzamiento_capsula"],
            imagen_url=text("imagen_url") or None,
            ubicacion=text("ubicacion") or None,
        )

    def _record(self, file_name: str, count: int, status: str, error: str | None = None) -> None:
        self._history.append(
            ImportRecord(
                file_name=file_name,
                record_count=count,
                status=status,
                timestamp=self._clock().isoformat(timespec="seconds"),
                operation=self.OPERATION,
                error_message=error,
            )
        )


def _parse_cantidad(text: str) -> int | None:
    """Entero positivo; acepta ``12`` y ``12.0`` pero no fracciones."""
    raw = text.strip().replace(",", ".")
    if not raw:
        return None
    try:
        number = float(raw)
    except ValueError:
        return None
    if not number.is_integer() or number < 1:
        return None
    return int(number)


class ReferenceExportService:
    """Exporta referencias evaluadas con su fecha de desbloqueo y estado."""

    OPERATION = "export"
    SHEET_TITLE = "Referencias"
    HEADER_FILL = "1F2937"
    HEADER_FONT_COLOR = "FFFFFF"

    def __init__(
        self,
        history: ImportHistoryLog,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._history = history
        self._clock = clock

    def export(
        self,
        rows: Sequence[ReferenceRow],
        output_dir: Path,
        filename_stem: str,
        file_format: str = "xlsx",
    ) -> Path:
        """Escribe un archivo con una fila por referencia en el orden recibido."""
        stem = filename_stem.strip()
        if not stem:
            raise ValidationError("El nombre del archivo de exportacion no puede estar vacio.")

        fmt = file_format.strip().lower()
        if fmt not in EXPORT_FORMATS:
            raise ValidationError("Formato de exportacion invalido. Use: " + ", ".join(EXPORT_FORMATS))

        if output_dir.exists() and not output_dir.is_dir():
            raise ServiceError(f"La ruta de salida no es un directorio: {output_dir}")

        timestamp = self._clock().strftime("%Y%m%d_%H%M%S")
        output_path = output_dir / f"{stem}_{timestamp}.{fmt}"
        table = [self._row_values(row) for row in rows]

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            output_path = self._resolve_collision(output_path)
            if fmt == "csv":
                self._write_csv(output_path, table)
            else:
                self._write_xlsx(output_path, table)
        except OSError as exc:
            LOGGER.exception("Error al exportar referencias: %s", output_path)
            self._record(output_path.name, 0, "error", str(exc))
            raise ServiceError("No fue posible escribir el archivo de exportacion.") from exc

        self._record(output_path.name, len(table), "success")
        LOGGER.info("Referencias exportadas: path=%s, filas=%d", output_path, len(table))
        return output_path

    @staticmethod
    def _row_values(row: ReferenceRow) -> list[object]:
        reference = row.reference
        values: list[object] = [getattr(reference, field_name) for _, field_name in REFERENCE_COLUMNS]
        values.extend([row.unlock_iso, row.label])
        return ["" if value is None else value for value in values]

    @staticmethod
    def _write_csv(path: Path, table: Sequence[Sequence[object]]) -> None:
        with path.open("w", newline="", encoding="utf-8") as csv_file:
            writer = csv.writer(csv_file)
            writer.writerow(EXPORT_HEADERS)
            writer.writerows(table)

    def _write_xlsx(self, path: Path, table: Sequence[Sequence[object]]) -> None:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.SHEET_TITLE

        for col_num, header in enumerate(EXPORT_HEADERS, 1):
            cell = sheet.cell(row=1, column=col_num, value=header)
            cell.font = Font(bold=True, color=self.HEADER_FONT_COLOR)
            cell.fill = PatternFill(
                start_color=self.HEADER_FILL,
                end_color=self.HEADER_FILL,
                fill_type="solid",
            )
            cell.alignment = Alignment(horizontal="center", vertical="center")

        for row_num, values in enumerate(table, 2):
            for col_num, value in enumerate(values, 1):
                cell = sheet.cell(row=row_num, column=col_num, value=value)
                # Texto que empieza con "=" se guarda como texto, no como formula.
                if isinstance(value, str) and value.startswith("="):
                    cell.data_type = "s"

        for col_num, header in enumerate(EXPORT_HEADERS, 1):
            longest = max(
                [len(header), *(len(str(values[col_num - 1])) for values in table)]
            )
            sheet.column_dimensions[get_column_letter(col_num)].width = min(longest + 2, 50)

        sheet.freeze_panes = "A2"
        workbook.save(path)

    @staticmethod
    def _resolve_collision(path: Path) -> Path:
        """Resuelve colisiones de nombre para no sobrescribir archivos existentes."""
        counter = 1
        candidate = path
        while candidate.exists():
            candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
            counter += 1
        return candidate

    def _record(self, file_name: str, count: int, status: str, error: str | None = None) -> None:
        self._history.append(
            ImportRecord(
                file_name=file_name,
                record_count=count,
                status=status,
                timestamp=self._clock().isoformat(timespec="seconds"),
                operation=self.OPERATION,
                error_message=error,
            )
        )
