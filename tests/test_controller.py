"""Tests de AppController sobre un almacen local temporal."""

from __future__ import annotations

import csv
import tempfile
import unittest
from datetime import date, datetime, timedelta
from pathlib import Path
from unittest import mock

from cliente.backend.controller import AppController
from cliente.backend.gateway import LocalServerGateway
from servidor.services.cronologia import GanttMode
from servidor.services.import_history import ImportHistoryLog
from servidor.services.reference_store import JsonReferenceStore
from servidor.services.vistas import SortDirection, StatusFilter
from shared.errors import ValidationError
from shared.protocol import ReferenceDraft

TODAY = date(2024, 3, 15)


class SteppingClock:
    def __init__(self) -> None:
        self._current = datetime(2024, 3, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        self._current += timedelta(seconds=1)
        return self._current


def build_draft(referencia: str, **overrides: object) -> ReferenceDraft:
    values: dict[str, object] = {
        "referencia": referencia,
        "curva": "S-M-L",
        "cantidad": 18,
        "cantidad_colores": "1 color",
        "distribucion": "6-6-6",
    }
    values.update(overrides)
    return ReferenceDraft(**values)


class AppControllerTests(unittest.TestCase):
    """Valida acciones de UI, canal de cambios y proyecciones."""

    def setUp(self) -> None:
        self._tmp_dir = tempfile.TemporaryDirectory()
        self.base_path = Path(self._tmp_dir.name)
        self.store = JsonReferenceStore(
            path=self.base_path / "utilities" / "references.json",
            clock=SteppingClock(),
        )
        self.gateway = LocalServerGateway(
            store=self.store,
            history=ImportHistoryLog(path=self.base_path / "utilities" / "import_history.csv"),
        )
        self.controller = AppController(
            gateway=self.gateway,
            today_provider=lambda: TODAY,
            page_size=2,
        )
        self.notifications = 0
        self.controller.add_listener(self._on_change)
        self.controller.start()

    def tearDown(self) -> None:
        self.controller.stop()
        self._tmp_dir.cleanup()

    def _on_change(self) -> None:
        self.notifications += 1

    def _create(self, referencia: str, launch: date | None = None, **overrides: object):
        return self.controller.on_create_reference(build_draft(referencia, **overrides), launch)

    def test_create_uses_header_launch_date(self) -> None:
        created = self._create("ABC123", date(2024, 3, 1), lanzamiento_capsula="2020-01-01")

        self.assertEqual(created.lanzamiento_capsula, "2024-03-01")
        self.assertEqual(self.controller.get_reference(created.id), created)
        self.assertEqual(self.store.get(created.id), created)

    def test_create_without_launch_date(self) -> None:
        created = self._create("ABC123")
        self.assertIsNone(created.lanzamiento_capsula)
        self.assertEqual(self.controller.cards()[0].status_label, "Sin fecha de lanzamiento")

    def test_invalid_draft_is_not_created(self) -> None:
        with self.assertRaises(ValidationError):
            self._create("ABC123", cantidad=20)
        self.assertEqual(self.store.list(), [])

    def test_changes_from_other_writers_arrive_through_channel(self) -> None:
        before = self.notifications
        self.store.create(build_draft("EXTERNO"))

        self.assertEqual(self.controller.references(), [])
        self.assertEqual(self.controller.process_pending_changes(), 1)
        self.assertEqual([reference.referencia for reference in self.controller.references()], ["EXTERNO"])
        self.assertEqual(self.notifications, before + 1)
        self.assertEqual(self.controller.process_pending_changes(), 0)

    def test_stop_cancels_subscription(self) -> None:
        self.controller.stop()
        self.store.create(build_draft("EXTERNO"))
        self.assertEqual(self.controller.process_pending_changes(), 0)

    def test_update_and_delete(self) -> None:
        created = self._create("ABC123", date(2024, 3, 1))
        draft = build_draft("ABC123", ubicacion="B-02", lanzamiento_capsula="2024-03-01")

        updated = self.controller.on_update_reference(created.id, draft)
        self.assertEqual(self.controller.get_reference(created.id).ubicacion, "B-02")
        self.assertGreater(updated.updated_at, created.updated_at)

        self.controller.on_delete_reference(created.id)
        self.assertIsNone(self.controller.get_reference(created.id))
        with self.assertRaises(ValidationError):
            self.controller.on_update_reference(created.id, draft)

    def test_refresh_reads_store_once(self) -> None:
        with mock.patch.object(
            self.gateway,
            "list_references",
            wraps=self.gateway.list_references,
        ) as spy:
            self.controller.refresh()
            self.assertEqual(spy.call_count, 1)

    def test_query_setters(self) -> None:
        self.controller.set_page(3)
        self.controller.set_search("abc")
        self.assertEqual(self.controller.query.page, 1)

        self.controller.set_sort("referencia")
        self.assertIs(self.controller.query.sort_direction, SortDirection.DESC)
        self.controller.set_sort("cantidad")
        self.assertEqual(self.controller.query.sort_field, "cantidad")
        self.assertIs(self.controller.query.sort_direction, SortDirection.ASC)

        with self.assertRaises(ValidationError):
            self.controller.set_unlock_month(13)

        self.controller.clear_filters()
        self.assertEqual(self.controller.query.search, "")
        self.assertEqual(self.controller.query.sort_field, "cantidad")

    def test_unchanged_query_does_not_notify(self) -> None:
        self.controller.set_status_filter(StatusFilter.UNLOCKED)
        before = self.notifications
        self.controller.set_status_filter(StatusFilter.UNLOCKED)
        self.assertEqual(self.notifications, before)

    def test_projections(self) -> None:
        self._create("ABC123", date(2024, 3, 1))
        self._create("ZETA", date(2024, 2, 1))
        self._create("BETA")

        page = self.controller.table_page()
        self.assertEqual(page.total_pages, 2)
        self.assertEqual([row.reference.referencia for row in page.rows], ["ABC123", "BETA"])
        self.assertEqual(self.controller.page_numbers(), [1, 2])

        self.controller.set_status_filter(StatusFilter.UNLOCKED)
        self.assertEqual([row.reference.referencia for row in self.controller.filtered_rows()], ["ZETA"])

        bars = self.controller.gantt(GanttMode.BASE_TO_UNLOCK)
        self.assertEqual([bar.label for bar in bars], ["ZETA", "ABC123"])

        grid = self.controller.calendar_month(2024, 3)
        first = next(cell for cell in grid[0] if cell is not None)
        self.assertEqual([reference.referencia for reference in first.references], ["ABC123"])
        self.assertEqual(self.controller.today(), TODAY)

    def test_export_uses_visible_order(self) -> None:
        self._create("ABC123", date(2024, 3, 1))
        self._create("ZETA", date(2024, 2, 1))
        self.controller.set_sort("referencia")

        output = self.controller.on_export(self.base_path / "output", "referencias", "csv")

        with Path(output).open("r", newline="", encoding="utf-8") as csv_file:
            table = list(csv.reader(csv_file))
        self.assertEqual([row[0] for row in table[1:]], ["ZETA", "ABC123"])
        self.assertEqual(table[2][-1], "7 días restantes")
        self.assertEqual(self.controller.list_import_history()[0].operation, "export")

    def test_import_file_updates_working_set(self) -> None:
        path = self.base_path / "lote.csv"
        with path.open("w", newline="", encoding="utf-8") as csv_file:
            writer = csv.writer(csv_file)
            writer.writerow(["Referencia", "Curva", "Cantidad de Colores"])
            writer.writerow(["IMP1", "S-M-L", "1 color"])
            writer.writerow(["IMP2", "ONE-SIZE", "2 colores"])

        response = self.controller.on_import_file(str(path))

        self.assertEqual(response.record_count, 2)
        self.assertEqual(len(self.controller.references()), 2)
        with self.assertRaises(ValidationError):
            self.controller.on_import_file("   ")

    def test_on_exit_calls_quit_callback(self) -> None:
        app = mock.Mock()
        self.controller.on_exit(app)
        app.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
