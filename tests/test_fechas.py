"""Tests para lectura y formato de fechas de calendario."""

from __future__ import annotations

import unittest
from datetime import date, datetime

from servidor.services.fechas import (
    SPREADSHEET_EPOCH,
    days_between,
    format_display_date,
    format_iso,
    format_month_title,
    format_short_date,
    parse_calendar_date,
    serial_to_date,
)


class ParseCalendarDateTests(unittest.TestCase):
    """Valida que cualquier entrada termine en un dia de calendario o None."""

    def test_parses_iso_date(self) -> None:
        self.assertEqual(parse_calendar_date("2024-01-05"), date(2024, 1, 5))

    def test_discards_time_suffix(self) -> None:
        """La hora y la zona horaria no deben mover el dia."""
        self.assertEqual(parse_calendar_date("2024-01-05T23:30:00Z"), date(2024, 1, 5))
        self.assertEqual(parse_calendar_date("2024-01-05 00:00:00"), date(2024, 1, 5))

    def test_accepts_date_and_datetime_objects(self) -> None:
        self.assertEqual(parse_calendar_date(date(2024, 2, 29)), date(2024, 2, 29))
        self.assertEqual(parse_calendar_date(datetime(2024, 2, 29, 23, 59)), date(2024, 2, 29))

    def test_converts_spreadsheet_serials(self) -> None:
        """45292 corresponde al 1 de enero de 2024 en planillas."""
        self.assertEqual(parse_calendar_date(45292), date(2024, 1, 1))
        self.assertEqual(parse_calendar_date(45292.75), date(2024, 1, 1))
        self.assertEqual(parse_calendar_date("45292"), date(2024, 1, 1))

    def test_invalid_values_return_none(self) -> None:
        for value in (None, "", "   ", "hola", "2024-13-01", "2024-02-30", True, 0, -5, object()):
            with self.subTest(value=value):
                self.assertIsNone(parse_calendar_date(value))

    def test_serial_epoch(self) -> None:
        self.assertEqual(serial_to_date(1), date(1899, 12, 31))
        self.assertEqual(SPREADSHEET_EPOCH, date(1899, 12, 30))
        self.assertIsNone(serial_to_date(float("nan")))
        self.assertIsNone(serial_to_date(1e12))


class FormatDateTests(unittest.TestCase):
    """Valida textos de fecha usados en tablas, tarjetas y ejes."""

    def test_format_display_date(self) -> None:
        self.assertEqual(format_display_date("2024-01-05"), "05 ene 2024")
        self.assertEqual(format_display_date(date(2024, 12, 31)), "31 dic 2024")
        self.assertEqual(format_display_date(None), "No definida")
        self.assertEqual(format_display_date(""), "No definida")
        self.assertEqual(format_display_date("no es fecha"), "Fecha inválida")

    def test_short_formats(self) -> None:
        self.assertEqual(format_short_date(date(2024, 1, 5)), "5 ene")
        self.assertEqual(format_month_title(2024, 9), "septiembre de 2024")
        self.assertEqual(format_iso(date(2024, 3, 1)), "2024-03-01")
        self.assertEqual(format_iso(None), "")

    def test_days_between_counts_calendar_days(self) -> None:
        self.assertEqual(days_between(date(2024, 2, 28), date(2024, 3, 1)), 2)
        self.assertEqual(days_between(date(2024, 3, 1), date(2024, 2, 28)), -2)


if __name__ == "__main__":
    unittest.main()
