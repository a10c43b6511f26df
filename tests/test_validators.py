"""Tests para validaciones de referencias en el cliente."""

from __future__ import annotations

import tempfile
import unittest
from dataclasses import replace
from pathlib import Path

from cliente.backend.validators import validate_output_dir, validate_reference_draft
from shared.errors import ValidationError
from shared.protocol import ReferenceDraft


class ValidateReferenceDraftTests(unittest.TestCase):
    def setUp(self) -> None:
        self.draft = ReferenceDraft(
            referencia="ABC123",
            curva="S-M-L",
            cantidad=18,
            cantidad_colores="1 color",
            distribucion="6-6-6",
            lanzamiento_capsula="2024-03-01",
        )

    def test_valid_draft(self) -> None:
        validate_reference_draft(self.draft)

    def test_rejects_invalid_fields(self) -> None:
        invalid = (
            replace(self.draft, referencia="   "),
            replace(self.draft, curva="XXS"),
            replace(self.draft, cantidad=0),
            replace(self.draft, cantidad=True),
            replace(self.draft, cantidad_colores="3 colores"),
            replace(self.draft, ingreso_a_bodega="2024-02-30"),
        )
        for draft in invalid:
            with self.subTest(draft=draft):
                with self.assertRaises(ValidationError):
                    validate_reference_draft(draft)

    def test_table_values_are_enforced(self) -> None:
        with self.assertRaises(ValidationError):
            validate_reference_draft(replace(self.draft, cantidad=20))
        with self.assertRaises(ValidationError):
            validate_reference_draft(replace(self.draft, distribucion="5-7-6"))

    def test_manual_distribution_must_sum(self) -> None:
        manual = replace(self.draft, cantidad_colores=None, cantidad=12, distribucion="4-4-4")
        validate_reference_draft(manual)
        validate_reference_draft(replace(manual, distribucion="S:4 M:4 L:4"))
        with self.assertRaises(ValidationError):
            validate_reference_draft(replace(manual, distribucion="4-4-5"))


class ValidateOutputDirTests(unittest.TestCase):
    def test_creates_missing_directory(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            target = Path(temp_dir) / "salida" / "exportes"
            validate_output_dir(target)
            self.assertTrue(target.is_dir())

    def test_rejects_file_path(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            target = Path(temp_dir) / "archivo.txt"
            target.write_text("x", encoding="utf-8")
            with self.assertRaises(ValidationError):
                validate_output_dir(target)


if __name__ == "__main__":
    unittest.main()
