"""Tests para el historial de importaciones y exportaciones."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from servidor.domain.models import ImportRecord
from servidor.services.import_history import ImportHistoryLog


class ImportHistoryLogTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp_dir.name) / "utilities" / "import_history.csv"
        self.history = ImportHistoryLog(path=self.path)

    def tearDown(self) -> None:
        self._tmp_dir.cleanup()

    def test_empty_history(self) -> None:
        self.assertEqual(self.history.list_recent(), [])

    def test_append_and_list_newest_first(self) -> None:
        self.history.append(ImportRecord("a.csv", 3, "success", "2024-03-01T10:00:00"))
        self.history.append(
            ImportRecord(
                "b.xlsx",
                0,
                "error",
                "2024-03-02T10:00:00",
                error_message="Fila 2: Curva invalida\nFila 3: Fecha invalida",
            )
        )
        self.history.append(
            ImportRecord("referencias.xlsx", 5, "success", "2024-03-03T10:00:00", operation="export")
        )

        records = self.history.list_recent()

        self.assertEqual([record.file_name for record in records], ["referencias.xlsx", "b.xlsx", "a.csv"])
        self.assertEqual(records[0].operation, "export")
        self.assertEqual(records[1].error_message, "Fila 2: Curva invalida | Fila 3: Fecha invalida")
        self.assertFalse(records[1].is_success)
        self.assertEqual(records[2].record_count, 3)
        self.assertIsNone(records[2].error_message)

    def test_header_written_once(self) -> None:
        for index in range(3):
            self.history.append(ImportRecord(f"{index}.csv", index, "success", "2024-03-01T10:00:00"))

        lines = self.path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[0].startswith('"timestamp"'))

    def test_limit(self) -> None:
        for index in range(5):
            self.history.append(ImportRecord(f"{index}.csv", index, "success", "2024-03-01T10:00:00"))

        self.assertEqual([record.file_name for record in self.history.list_recent(2)], ["4.csv", "3.csv"])
        self.assertEqual(self.history.list_recent(0), [])


if __name__ == "__main__":
    unittest.main()
