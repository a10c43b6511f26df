"""Gateway de comunicacion cliente-servidor."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

from parametros import IMPORT_HISTORY_LIMIT
from servidor.domain.models import ChangeEvent, ImportRecord, Reference
from servidor.services.fechas import today
from servidor.services.import_export import ReferenceExportService, ReferenceImportService
from servidor.services.import_history import ImportHistoryLog
from servidor.services.reference_store import TABLE_REFERENCES, JsonReferenceStore
from servidor.services.vistas import evaluate_rows
from shared.errors import ServiceError, ValidationError
from shared.protocol import (
    ExportReferencesRequest,
    ExportReferencesResponse,
    ImportFileRequest,
    ImportFileResponse,
    ReferenceDraft,
)

LOGGER = logging.getLogger(__name__)


class ServerGateway(Protocol):
    """Interfaz de acceso del cliente a servicios del servidor."""

    def list_references(self) -> list[Reference]:
        """Lectura completa de referencias."""

    def create_reference(self, draft: ReferenceDraft) -> Reference:
        """Solicita creacion de una referencia."""

    def update_reference(self, reference_id: str, patch: Mapping[str, Any]) -> Reference:
        """Solicita actualizacion de campos de una referencia."""

    def delete_reference(self, reference_id: str) -> None:
        """Solicita eliminacion definitiva de una referencia."""

    def subscribe_changes(self, on_change: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        """Suscribe un callback a cambios de referencias."""

    def import_file(self, request: ImportFileRequest) -> ImportFileResponse:
        """Solicita importacion masiva desde archivo."""

    def export_references(self, request: ExportReferencesRequest) -> ExportReferencesResponse:
        """Solicita exportacion de referencias."""

    def list_import_history(self, limit: int = IMPORT_HISTORY_LIMIT) -> list[ImportRecord]:
        """Lista las ultimas operaciones masivas."""


class LocalServerGateway:
    """Implementacion local del gateway usando servicios en proceso."""

    def __init__(
        self,
        store: JsonReferenceStore | None = None,
        history: ImportHistoryLog | None = None,
        import_service: ReferenceImportService | None = None,
        export_service: ReferenceExportService | None = None,
    ) -> None:
        self._store = store or JsonReferenceStore()
        self._store.ensure_initialized()
        self._history = history or ImportHistoryLog()
        self._import_service = import_service or ReferenceImportService(self._store, self._history)
        self._export_service = export_service or ReferenceExportService(self._history)

    def list_references(self) -> list[Reference]:
        """Retorna todas las referencias del almacen."""
        try:
            return self._store.list()
        except (ServiceError, ValidationError):
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al listar referencias.")
            raise ServiceError("No fue posible cargar las referencias.") from exc

    def create_reference(self, draft: ReferenceDraft) -> Reference:
        """Crea una referencia delegando en el almacen."""
        try:
            return self._store.create(draft)
        except (ServiceError, ValidationError):
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al crear referencia.")
            raise ServiceError("No fue posible crear la referencia.") from exc

    def update_reference(self, reference_id: str, patch: Mapping[str, Any]) -> Reference:
        """Actualiza una referencia existente."""
        try:
            return self._store.update(reference_id, patch)
        except (ServiceError, ValidationError):
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al actualizar referencia: id=%s", reference_id)
            raise ServiceError("No fue posible actualizar la referencia.") from exc

    def delete_reference(self, reference_id: str) -> None:
        """Elimina una referencia."""
        try:
            self._store.delete(reference_id)
        except (ServiceError, ValidationError):
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al eliminar referencia: id=%s", reference_id)
            raise ServiceError("No fue posible eliminar la referencia.") from exc

    def subscribe_changes(self, on_change: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        """Suscribe el callback a la tabla de referencias."""
        return self._store.subscribe(TABLE_REFERENCES, on_change)

    def import_file(self, request: ImportFileRequest) -> ImportFileResponse:
        """Importa un archivo completo o ninguna de sus filas."""
        try:
            return self._import_service.import_file(Path(request.file_path))
        except (ServiceError, ValidationError):
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al importar archivo: %s", request.file_path)
            raise ServiceError("No fue posible importar el archivo.") from exc

    def export_references(self, request: ExportReferencesRequest) -> ExportReferencesResponse:
        """Exporta las referencias indicadas respetando el orden recibido."""
        try:
            by_id = {reference.id: reference for reference in self._store.list()}
            missing = [reference_id for reference_id in request.reference_ids if reference_id not in by_id]
            if missing:
                LOGGER.warning("Referencias no encontradas al exportar: %s", ", ".join(missing))

            references = [by_id[reference_id] for reference_id in request.reference_ids if reference_id in by_id]
            rows = evaluate_rows(references, request.as_of or today(), request.offset_days)
            created_path = self._export_service.export(
                rows=rows,
                output_dir=Path(request.output_dir),
                filename_stem=request.filename_stem,
                file_format=request.file_format,
            )
        except (ServiceError, ValidationError):
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al exportar referencias.")
            raise ServiceError("No fue posible exportar las referencias.") from exc

        return ExportReferencesResponse(created_path=str(created_path), record_count=len(rows))

    def list_import_history(self, limit: int = IMPORT_HISTORY_LIMIT) -> list[ImportRecord]:
        """Lista el historial de importaciones y exportaciones."""
        try:
            return self._history.list_recent(limit)
        except (ServiceError, ValidationError):
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al leer historial.")
            raise ServiceError("No fue posible leer el historial de importaciones.") from exc
