"""Historial append-only de importaciones y exportaciones."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from parametros import IMPORT_HISTORY_CSV, IMPORT_HISTORY_LIMIT
from servidor.domain.models import ImportRecord
from shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


class ImportHistoryLog:
    """Registra cada operacion masiva en un CSV local."""

    HEADERS = ("timestamp", "operation", "file_name", "record_count", "status", "error_message")

    def __init__(self, path: Path = IMPORT_HISTORY_CSV) -> None:
        self._path = path

    def append(self, record: ImportRecord) -> None:
        """Agrega un registro al final del historial."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            is_new = not self._path.exists() or self._path.stat().st_size == 0
            with self._path.open("a", newline="", encoding="utf-8") as csv_file:
                writer = csv.writer(csv_file, quoting=csv.QUOTE_ALL)
                if is_new:
                    writer.writerow(self.HEADERS)
                writer.writerow(
                    [
                        record.timestamp,
                        record.operation,
                        record.file_name,
                        str(record.record_count),
                        record.status,
                        _single_line(record.error_message or ""),
                    ]
                )
        except OSError as exc:
            LOGGER.exception("Error al escribir historial de importaciones: %s", self._path)
            raise ServiceError("No fue posible registrar la operacion en el historial.") from exc

        LOGGER.debug(
            "Historial actualizado: operation=%s, file=%s, status=%s",
            record.operation,
            record.file_name,
            record.status,
        )

    def list_recent(self, limit: int = IMPORT_HISTORY_LIMIT) -> list[ImportRecord]:
        """Retorna los ultimos registros, del mas reciente al mas antiguo."""
        if limit <= 0 or not self._path.exists():
            return []

        try:
            with self._path.open("r", newline="", encoding="utf-8-sig") as csv_file:
                rows = list(csv.DictReader(csv_file))
        except OSError as exc:
            raise ServiceError(f"No fue posible leer el historial: {self._path}") from exc

        records: list[ImportRecord] = []
        for row in reversed(rows):
            raw_count = (row.get("record_count") or "").strip()
            records.append(
                ImportRecord(
                    file_name=row.get("file_name") or "",
                    record_count=int(raw_count) if raw_count.isdigit() else 0,
                    status=row.get("status") or "",
                    timestamp=row.get("timestamp") or "",
                    operation=row.get("operation") or "import",
                    error_message=row.get("error_message") or None,
                )
            )
            if len(records) >= limit:
                break
        return records


def _single_line(text: str) -> str:
    """El historial guarda mensajes de error en una sola linea."""
    return " | ".join(part.strip() for part in text.splitlines() if part.strip())
