"""Tests para barras y eje de la cronologia."""

from __future__ import annotations

import unittest
from datetime import date, timedelta

from servidor.domain.models import Reference
from servidor.services.cronologia import (
    GanttBar,
    GanttMode,
    build_gantt_bars,
    build_timeline,
    compute_progress,
    timeline_position,
    timeline_ticks,
)

TODAY = date(2024, 3, 15)


def build_reference(
    reference_id: str,
    ingreso: str | None,
    lanzamiento: str | None,
) -> Reference:
    return Reference(
        id=reference_id,
        referencia=f"REF-{reference_id}",
        curva="S-M-L",
        cantidad=18,
        ingreso_a_bodega=ingreso,
        lanzamiento_capsula=lanzamiento,
    )


class ProgressTests(unittest.TestCase):
    """Valida el porcentaje transcurrido de cada barra."""

    def test_progress_is_rounded(self) -> None:
        self.assertEqual(compute_progress(date(2024, 3, 1), date(2024, 3, 22), TODAY), 67)

    def test_progress_is_clamped(self) -> None:
        self.assertEqual(compute_progress(date(2024, 3, 20), date(2024, 3, 30), TODAY), 0)
        self.assertEqual(compute_progress(date(2024, 2, 1), date(2024, 2, 10), TODAY), 100)

    def test_zero_window(self) -> None:
        same_day = date(2024, 3, 15)
        self.assertEqual(compute_progress(same_day, same_day, TODAY), 100)
        self.assertEqual(compute_progress(date(2024, 3, 20), date(2024, 3, 20), TODAY), 0)


class GanttBarTests(unittest.TestCase):
    """Valida los tramos segun el modo seleccionado."""

    def setUp(self) -> None:
        self.references = [
            build_reference("late", "2024-03-05", "2024-03-01"),
            build_reference("plain", None, "2024-02-20"),
            build_reference("none", "2024-03-01", None),
        ]

    def test_base_to_unlock_skips_without_launch(self) -> None:
        bars = build_gantt_bars(self.references, GanttMode.BASE_TO_UNLOCK, TODAY, 21)

        self.assertEqual([bar.id for bar in bars], ["plain", "late"])
        self.assertEqual(bars[0].start, date(2024, 2, 20))
        self.assertEqual(bars[0].end, date(2024, 3, 12))
        self.assertEqual(bars[0].progress_percent, 100)
        self.assertEqual(bars[1].start, date(2024, 3, 5))
        self.assertEqual(bars[1].end, date(2024, 3, 26))

    def test_intake_to_launch_requires_both_dates(self) -> None:
        bars = build_gantt_bars(self.references, GanttMode.INTAKE_TO_LAUNCH, TODAY, 21)

        self.assertEqual(len(bars), 1)
        self.assertEqual(bars[0].id, "late")
        self.assertEqual((bars[0].start, bars[0].end), (date(2024, 3, 5), date(2024, 3, 1)))
        self.assertEqual(bars[0].progress_percent, 100)


class TimelineTests(unittest.TestCase):
    """Valida el eje de dias, sus marcas y posiciones."""

    def test_timeline_adds_padding(self) -> None:
        bars = [
            GanttBar("a", "A", date(2024, 3, 1), date(2024, 3, 10), 0),
            GanttBar("b", "B", date(2024, 3, 5), date(2024, 3, 20), 0),
        ]
        timeline = build_timeline(bars, TODAY)

        self.assertEqual(timeline[0], date(2024, 2, 28))
        self.assertEqual(timeline[-1], date(2024, 3, 22))
        self.assertEqual(len(timeline), 24)

    def test_empty_timeline_starts_today(self) -> None:
        timeline = build_timeline([], TODAY)
        self.assertEqual(len(timeline), 30)
        self.assertEqual(timeline[0], TODAY)
        self.assertEqual(timeline[-1], TODAY + timedelta(days=29))

    def test_ticks_include_last_day(self) -> None:
        timeline = [date(2024, 3, 1) + timedelta(days=offset) for offset in range(11)]
        ticks = timeline_ticks(timeline)

        self.assertEqual(ticks[0], date(2024, 3, 1))
        self.assertEqual(ticks[-1], date(2024, 3, 11))
        self.assertEqual(len(ticks), 6)
        self.assertEqual(timeline_ticks([]), [])

    def test_position_is_percentage(self) -> None:
        timeline = [date(2024, 3, 1) + timedelta(days=offset) for offset in range(11)]

        self.assertEqual(timeline_position(timeline, date(2024, 3, 1)), 0.0)
        self.assertEqual(timeline_position(timeline, date(2024, 3, 6)), 50.0)
        self.assertEqual(timeline_position(timeline, date(2024, 3, 11)), 100.0)
        self.assertEqual(timeline_position([date(2024, 3, 1)], date(2024, 3, 1)), 0.0)


if __name__ == "__main__":
    unittest.main()
