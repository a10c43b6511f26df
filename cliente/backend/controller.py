"""Controlador principal del cliente."""

from __future__ import annotations

import logging
import queue
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from parametros import (
    DEFAULT_EXPORT_FILENAME_STEM,
    IMPORT_HISTORY_LIMIT,
    OUTPUT_DIR,
    PAGE_SIZE,
    UNLOCK_OFFSET_DAYS,
)
from servidor.domain.models import ChangeEvent, ImportRecord, Reference
from servidor.services.calendario import CalendarDay, bucket_by_launch, build_month_grid
from servidor.services.cronologia import GanttBar, GanttMode, build_gantt_bars
from servidor.services.fechas import format_iso, today
from servidor.services.vistas import (
    DayRange,
    Page,
    ReferenceCard,
    ReferenceQuery,
    ReferenceRow,
    SortDirection,
    StatusFilter,
    build_cards,
    evaluate_rows,
    filter_references,
    page_window,
    paginate,
    sort_rows,
)
from shared.errors import ValidationError
from shared.protocol import (
    ExportReferencesRequest,
    ImportFileRequest,
    ImportFileResponse,
    ReferenceDraft,
)

from .gateway import ServerGateway
from .validators import validate_output_dir, validate_reference_draft
from .working_set import ReferenceWorkingSet

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

LOGGER = logging.getLogger(__name__)

Listener = Callable[[], None]


class AppController:
    """Coordina acciones de UI, el conjunto de trabajo y las proyecciones."""

    def __init__(
        self,
        gateway: ServerGateway,
        working_set: ReferenceWorkingSet | None = None,
        today_provider: Callable[[], date] = today,
        offset_days: int = UNLOCK_OFFSET_DAYS,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self._gateway = gateway
        self._working_set = working_set or ReferenceWorkingSet()
        self._today_provider = today_provider
        self._offset_days = offset_days
        self._page_size = page_size
        self._changes: queue.Queue[ChangeEvent] = queue.Queue()
        self._listeners: list[Listener] = []
        self._unsubscribe: Callable[[], None] | None = None
        self._query = ReferenceQuery()

    @property
    def offset_days(self) -> int:
        return self._offset_days

    @property
    def query(self) -> ReferenceQuery:
        return self._query

    def start(self) -> None:
        """Suscribe el canal de cambios y hace la primera lectura completa."""
        if self._unsubscribe is None:
            self._unsubscribe = self._gateway.subscribe_changes(self._changes.put)
            LOGGER.info("Suscripcion a cambios de referencias activa")
        self.refresh()

    def stop(self) -> None:
        """Cancela la suscripcion de cambios."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            LOGGER.info("Suscripcion a cambios de referencias cancelada")

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Registra un callback que se invoca cuando cambian los datos visibles."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def refresh(self) -> None:
        """Relee todas las referencias; una respuesta tardia se descarta."""
        token = self._working_set.begin_fetch()
        references = self._gateway.list_references()
        if self._working_set.apply_fetch(token, references):
            LOGGER.info("Referencias cargadas: %d", len(references))
            self._notify()

    def process_pending_changes(self) -> int:
        """Aplica los eventos encolados; retorna cuantos modificaron el conjunto."""
        applied = 0
        while True:
            try:
                event = self._changes.get_nowait()
            except queue.Empty:
                break
            if self._working_set.apply_event(event):
                applied += 1

        if applied:
            LOGGER.debug("Cambios aplicados desde el canal: %d", applied)
            self._notify()
        return applied

    def references(self) -> list[Reference]:
        return self._working_set.references()

    def get_reference(self, reference_id: str) -> Reference | None:
        return self._working_set.get(reference_id)

    def on_create_reference(self, draft: ReferenceDraft, launch_date: date | None) -> Reference:
        """Crea una referencia con la fecha de lanzamiento elegida en el encabezado."""
        draft = replace(draft, lanzamiento_capsula=format_iso(launch_date) or None)
        validate_reference_draft(draft)

        created = self._gateway.create_reference(draft)
        LOGGER.info("Referencia creada desde UI: id=%s, referencia=%s", created.id, created.referencia)
        self.process_pending_changes()
        return created

    def on_update_reference(self, reference_id: str, draft: ReferenceDraft) -> Reference:
        """Guarda la edicion de todos los campos editables."""
        if self._working_set.get(reference_id) is None:
            raise ValidationError("La referencia ya no existe.")
        validate_reference_draft(draft)

        updated = self._gateway.update_reference(reference_id, draft.to_fields())
        LOGGER.info("Referencia actualizada desde UI: id=%s", reference_id)
        self.process_pending_changes()
        return updated

    def on_delete_reference(self, reference_id: str) -> None:
        """Elimina una referencia de forma permanente."""
        self._gateway.delete_reference(reference_id)
        LOGGER.info("Referencia eliminada desde UI: id=%s", reference_id)
        self.process_pending_changes()

    def on_import_file(self, file_path: str) -> ImportFileResponse:
        """Importa un archivo; si alguna fila es invalida no se crea ninguna."""
        if not file_path.strip():
            raise ValidationError("Selecciona un archivo para importar.")

        response = self._gateway.import_file(ImportFileRequest(file_path=file_path))
        LOGGER.info(
            "Archivo importado desde UI: %s (%d referencias)",
            response.file_name,
            response.record_count,
        )
        self.process_pending_changes()
        return response

    def on_export(
        self,
        output_dir: Path = OUTPUT_DIR,
        filename_stem: str = DEFAULT_EXPORT_FILENAME_STEM,
        file_format: str = "xlsx",
    ) -> str:
        """Exporta las referencias filtradas en el orden visible de la tabla."""
        validate_output_dir(output_dir)
        rows = self.filtered_rows()

        response = self._gateway.export_references(
            ExportReferencesRequest(
                output_dir=str(output_dir),
                filename_stem=filename_stem,
                reference_ids=[row.reference.id for row in rows],
                file_format=file_format,
                offset_days=self._offset_days,
                as_of=self._today_provider(),
            )
        )
        LOGGER.info("Exportacion creada: %s (%d filas)", response.created_path, response.record_count)
        return response.created_path

    def list_import_history(self, limit: int = IMPORT_HISTORY_LIMIT) -> list[ImportRecord]:
        return self._gateway.list_import_history(limit)

    def set_search(self, text: str) -> None:
        self._set_query(replace(self._query, search=text, page=1))

    def set_status_filter(self, status: StatusFilter) -> None:
        self._set_query(replace(self._query, status=status, page=1))

    def set_unlock_month(self, month: int | None) -> None:
        if month is not None and not 1 <= month <= 12:
            raise ValidationError(f"Mes invalido: {month}")
        self._set_query(replace(self._query, unlock_month=month, page=1))

    def set_day_range(self, day_range: DayRange | None) -> None:
        self._set_query(replace(self._query, day_range=day_range, page=1))

    def set_sort(self, sort_field: str) -> None:
        """Ordena por la columna; repetir la misma columna invierte la direccion."""
        if sort_field == self._query.sort_field:
            direction = (
                SortDirection.DESC
                if self._query.sort_direction is SortDirection.ASC
                else SortDirection.ASC
            )
        else:
            direction = SortDirection.ASC
        self._set_query(
            replace(self._query, sort_field=sort_field, sort_direction=direction, page=1)
        )

    def set_page(self, page: int) -> None:
        self._set_query(replace(self._query, page=page))

    def clear_filters(self) -> None:
        self._set_query(
            ReferenceQuery(
                sort_field=self._query.sort_field,
                sort_direction=self._query.sort_direction,
            )
        )

    def filtered_rows(self) -> list[ReferenceRow]:
        """Filas evaluadas hoy, filtradas y ordenadas segun la consulta vigente."""
        rows = evaluate_rows(self.references(), self._today_provider(), self._offset_days)
        rows = filter_references(rows, self._query)
        return sort_rows(rows, self._query.sort_field, self._query.sort_direction)

    def table_page(self) -> Page:
        return paginate(self.filtered_rows(), self._query.page, self._page_size)

    def page_numbers(self) -> list[int | None]:
        page = self.table_page()
        return page_window(page.page, page.total_pages)

    def cards(self) -> list[ReferenceCard]:
        rows = evaluate_rows(self.references(), self._today_provider(), self._offset_days)
        return build_cards(rows)

    def gantt(self, mode: GanttMode = GanttMode.BASE_TO_UNLOCK) -> list[GanttBar]:
        return build_gantt_bars(self.references(), mode, self._today_provider(), self._offset_days)

    def calendar_month(self, year: int, month: int) -> list[list[CalendarDay | None]]:
        buckets = bucket_by_launch(self.references())
        return build_month_grid(year, month, buckets, self._today_provider())

    def today(self) -> date:
        return self._today_provider()

    def on_exit(
        self,
        app: QApplication | Callable[[], None] | None,
    ) -> None:
        """Cierra la aplicacion."""
        LOGGER.info("Accion ejecutada: salir")
        self.stop()

        if callable(app):
            app()
            return

        if app is not None:
            app.quit()

    def _set_query(self, query: ReferenceQuery) -> None:
        if query == self._query:
            return
        self._query = query
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
