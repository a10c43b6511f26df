"""Tests para la tabla de distribucion por talla."""

from __future__ import annotations

import unittest

from servidor.services.distribucion import (
    DistributionConfig,
    DistributionFormState,
    distribution_is_consistent,
    lookup,
    recompute_distribution_fields,
    split_distribution,
)
from shared.catalogos import (
    CANTIDAD_COLORES_OPTIONS,
    CURVA_OPTIONS,
    DISTRIBUTION_TABLE,
    DOS_COLORES,
    UN_COLOR,
    build_color_value,
    split_color_value,
)


class LookupTests(unittest.TestCase):
    """Valida la busqueda (curva, colores) -> distribucion y total."""

    def test_known_pair(self) -> None:
        self.assertEqual(lookup("S-M-L", UN_COLOR), DistributionConfig("6-6-6", 18))
        self.assertEqual(lookup("ONE-SIZE", DOS_COLORES), DistributionConfig("50-50", 100))

    def test_missing_keys_require_manual_entry(self) -> None:
        self.assertIsNone(lookup("S-M-L", None))
        self.assertIsNone(lookup(None, UN_COLOR))
        self.assertIsNone(lookup("S-M-L", "3 colores"))
        self.assertIsNone(lookup("XXS", UN_COLOR))

    def test_every_entry_sums_to_its_total(self) -> None:
        for cantidad_colores, by_curva in DISTRIBUTION_TABLE.items():
            for curva, (distribution, total) in by_curva.items():
                with self.subTest(curva=curva, colores=cantidad_colores):
                    self.assertTrue(distribution_is_consistent(distribution, total))

    def test_table_covers_all_curvas_and_colores(self) -> None:
        for cantidad_colores in CANTIDAD_COLORES_OPTIONS:
            self.assertEqual(set(DISTRIBUTION_TABLE[cantidad_colores]), set(CURVA_OPTIONS))

    def test_split_distribution(self) -> None:
        self.assertEqual(split_distribution("3-4-4-4-3"), [3, 4, 4, 4, 3])
        self.assertEqual(split_distribution(" 6 - 6 - 6 "), [6, 6, 6])
        self.assertIsNone(split_distribution("S:3 M:4"))
        self.assertIsNone(split_distribution(""))


class RecomputeFormTests(unittest.TestCase):
    """Valida el recalculo de cantidad y distribucion en formularios."""

    def test_hit_sets_values_and_flag(self) -> None:
        state = DistributionFormState(
            curva="S-M-L-XL",
            cantidad_colores=DOS_COLORES,
            cantidad=5,
            distribucion="1-1-1-2",
        )
        result = recompute_distribution_fields(state)
        self.assertEqual(result.cantidad, 20)
        self.assertEqual(result.distribucion, "4-6-6-4")
        self.assertTrue(result.auto_calculated)

    def test_miss_keeps_typed_values(self) -> None:
        """Al salir de un par valido solo se apaga la marca automatica."""
        state = DistributionFormState(
            curva="S-M-L",
            cantidad_colores=None,
            cantidad=18,
            distribucion="6-6-6",
            auto_calculated=True,
        )
        result = recompute_distribution_fields(state)
        self.assertEqual(result.cantidad, 18)
        self.assertEqual(result.distribucion, "6-6-6")
        self.assertFalse(result.auto_calculated)


class ColorValueTests(unittest.TestCase):
    """Valida la combinacion de colores guardada en la referencia."""

    def test_build_color_value(self) -> None:
        self.assertEqual(build_color_value(DOS_COLORES, "Negro", "Blanco"), "Negro, Blanco")
        self.assertEqual(build_color_value(UN_COLOR, "Negro", "Blanco"), "Negro")
        self.assertEqual(build_color_value(DOS_COLORES, "Negro", None), "Negro")
        self.assertIsNone(build_color_value(None, "", None))

    def test_split_color_value(self) -> None:
        self.assertEqual(split_color_value("Negro, Blanco, Negro"), ["Negro", "Blanco"])
        self.assertEqual(split_color_value(None), [])


if __name__ == "__main__":
    unittest.main()
