"""Tests para el calendario mensual de lanzamientos."""

from __future__ import annotations

import unittest
from datetime import date

from servidor.domain.models import Reference
from servidor.services.calendario import bucket_by_launch, build_month_grid, shift_month


def build_reference(reference_id: str, lanzamiento: str | None) -> Reference:
    return Reference(
        id=reference_id,
        referencia=f"REF-{reference_id}",
        curva="ONE-SIZE",
        cantidad=50,
        lanzamiento_capsula=lanzamiento,
    )


class BucketTests(unittest.TestCase):
    def test_groups_by_exact_launch_day(self) -> None:
        references = [
            build_reference("a", "2024-03-05"),
            build_reference("b", "2024-03-05T10:00:00"),
            build_reference("c", "2024-03-06"),
            build_reference("d", None),
            build_reference("e", "sin fecha"),
        ]
        buckets = bucket_by_launch(references)

        self.assertEqual(set(buckets), {"2024-03-05", "2024-03-06"})
        self.assertEqual([item.id for item in buckets["2024-03-05"]], ["a", "b"])


class MonthGridTests(unittest.TestCase):
    """Valida semanas de domingo a sabado y celdas de relleno."""

    def test_march_2024_layout(self) -> None:
        grid = build_month_grid(2024, 3, {}, date(2024, 3, 15))

        self.assertEqual(len(grid), 6)
        self.assertTrue(all(len(week) == 7 for week in grid))
        self.assertEqual(grid[0][:5], [None] * 5)
        self.assertEqual(grid[0][5].day, date(2024, 3, 1))
        self.assertEqual(grid[4][6].day, date(2024, 3, 30))
        self.assertEqual(grid[5][0].day, date(2024, 3, 31))
        self.assertIsNone(grid[5][1])

    def test_month_starting_on_sunday(self) -> None:
        grid = build_month_grid(2024, 9, {}, date(2024, 3, 15))
        self.assertEqual(grid[0][0].day, date(2024, 9, 1))

    def test_today_and_overflow(self) -> None:
        references = [build_reference(str(index), "2024-03-15") for index in range(5)]
        grid = build_month_grid(2024, 3, bucket_by_launch(references), date(2024, 3, 15))
        cells = [cell for week in grid for cell in week if cell is not None]
        today_cells = [cell for cell in cells if cell.is_today]

        self.assertEqual(len(today_cells), 1)
        cell = today_cells[0]
        self.assertEqual(cell.day, date(2024, 3, 15))
        self.assertEqual(len(cell.visible), 3)
        self.assertEqual(cell.overflow, 2)
        self.assertEqual(sum(len(item.references) for item in cells), 5)


class ShiftMonthTests(unittest.TestCase):
    def test_shift_across_years(self) -> None:
        self.assertEqual(shift_month(2024, 12, 1), (2025, 1))
        self.assertEqual(shift_month(2024, 1, -1), (2023, 12))
        self.assertEqual(shift_month(2024, 3, 0), (2024, 3))
        self.assertEqual(shift_month(2024, 11, 14), (2026, 1))


if __name__ == "__main__":
    unittest.main()
