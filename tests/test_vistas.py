"""Tests para la proyeccion de tabla y tarjetas."""

from __future__ import annotations

import unittest
from datetime import date

from servidor.domain.models import Reference
from servidor.services.vistas import (
    DAY_RANGE_OPTIONS,
    STATUS_DAYS_FIELD,
    UNLOCK_DATE_FIELD,
    ReferenceQuery,
    SortDirection,
    StatusFilter,
    build_cards,
    evaluate_rows,
    filter_references,
    page_window,
    paginate,
    project_references,
    sort_rows,
)
from shared.errors import ValidationError

TODAY = date(2024, 3, 15)
OFFSET = 21


def build_reference(
    reference_id: str,
    referencia: str,
    lanzamiento: str | None,
    cantidad: int = 18,
) -> Reference:
    return Reference(
        id=reference_id,
        referencia=referencia,
        curva="S-M-L",
        cantidad=cantidad,
        lanzamiento_capsula=lanzamiento,
    )


class ReferenceViewTests(unittest.TestCase):
    """Valida filtros, orden, paginacion y tarjetas."""

    def setUp(self) -> None:
        self.counting = build_reference("a", "ABC123", "2024-03-01", cantidad=18)
        self.unlocked = build_reference("b", "zeta", "2024-02-01", cantidad=100)
        self.no_schedule = build_reference("c", "beta", None, cantidad=9)
        self.pending = build_reference("d", "Delta", "2024-03-20", cantidad=20)
        self.references = [self.counting, self.unlocked, self.no_schedule, self.pending]
        self.rows = evaluate_rows(self.references, TODAY, OFFSET)

    def _ids(self, rows) -> list[str]:
        return [row.reference.id for row in rows]

    def test_status_filter(self) -> None:
        unlocked = filter_references(self.rows, ReferenceQuery(status=StatusFilter.UNLOCKED))
        locked = filter_references(self.rows, ReferenceQuery(status=StatusFilter.LOCKED))
        everything = filter_references(self.rows, ReferenceQuery())

        self.assertEqual(self._ids(unlocked), ["b"])
        self.assertEqual(self._ids(locked), ["a", "d"])
        self.assertEqual(len(everything), 4)

    def test_search_is_case_insensitive(self) -> None:
        result = filter_references(self.rows, ReferenceQuery(search="  bc1 "))
        self.assertEqual(self._ids(result), ["a"])

    def test_unlock_month_and_day_range(self) -> None:
        march = filter_references(self.rows, ReferenceQuery(unlock_month=3))
        april = filter_references(self.rows, ReferenceQuery(unlock_month=4))
        this_week = filter_references(self.rows, ReferenceQuery(day_range=DAY_RANGE_OPTIONS[0]))
        later = filter_references(self.rows, ReferenceQuery(day_range=DAY_RANGE_OPTIONS[2]))

        self.assertEqual(self._ids(march), ["a"])
        self.assertEqual(self._ids(april), ["d"])
        self.assertEqual(self._ids(this_week), ["a"])
        self.assertEqual(self._ids(later), ["d"])

    def test_sort_by_referencia_ignores_case(self) -> None:
        ordered = sort_rows(self.rows, "referencia")
        self.assertEqual(
            [row.reference.referencia for row in ordered],
            ["ABC123", "beta", "Delta", "zeta"],
        )

    def test_sort_by_unlock_date_keeps_empty_last(self) -> None:
        ascending = sort_rows(self.rows, UNLOCK_DATE_FIELD, SortDirection.ASC)
        descending = sort_rows(self.rows, UNLOCK_DATE_FIELD, SortDirection.DESC)

        self.assertEqual(self._ids(ascending), ["b", "a", "d", "c"])
        self.assertEqual(self._ids(descending), ["d", "a", "b", "c"])

    def test_sort_numbers_numerically(self) -> None:
        ordered = sort_rows(self.rows, "cantidad")
        self.assertEqual([row.reference.cantidad for row in ordered], [9, 18, 20, 100])

    def test_sort_by_status_days(self) -> None:
        ordered = sort_rows(self.rows, STATUS_DAYS_FIELD)
        self.assertEqual(self._ids(ordered), ["b", "d", "a", "c"])

    def test_unknown_sort_field(self) -> None:
        with self.assertRaises(ValidationError):
            sort_rows(self.rows, "precio")

    def test_cards_ordered_by_launch(self) -> None:
        cards = build_cards(self.rows)
        self.assertEqual([card.id for card in cards], ["b", "a", "d", "c"])
        self.assertEqual(cards[-1].launch_label, "No definida")
        self.assertTrue(cards[0].unlocked)
        self.assertEqual(cards[1].status_label, "7 días restantes")


class PaginationTests(unittest.TestCase):
    """Valida cortes de pagina y numeros visibles."""

    def setUp(self) -> None:
        references = [
            build_reference(f"id-{index:02d}", f"REF{index:02d}", "2024-03-01")
            for index in range(20)
        ]
        self.rows = evaluate_rows(references, TODAY, OFFSET)

    def test_paginate_clamps_page(self) -> None:
        second = paginate(self.rows, 2, 15)
        clamped = paginate(self.rows, 9, 15)
        empty = paginate([], 3, 15)

        self.assertEqual(len(second.rows), 5)
        self.assertEqual(second.total_pages, 2)
        self.assertTrue(second.has_previous)
        self.assertFalse(second.has_next)
        self.assertEqual(clamped.page, 2)
        self.assertEqual((empty.page, empty.total_pages, empty.total_items), (1, 1, 0))

    def test_page_window(self) -> None:
        self.assertEqual(page_window(5, 10), [1, None, 4, 5, 6, None, 10])
        self.assertEqual(page_window(1, 3), [1, 2, 3])
        self.assertEqual(page_window(1, 1), [1])

    def test_project_references_end_to_end(self) -> None:
        references = [row.reference for row in self.rows]
        page = project_references(
            references,
            ReferenceQuery(sort_field="referencia", sort_direction=SortDirection.DESC, page=1),
            TODAY,
            OFFSET,
            page_size=15,
        )
        self.assertEqual(page.total_items, 20)
        self.assertEqual(page.rows[0].reference.referencia, "REF19")
        self.assertEqual(len(page.rows), 15)


if __name__ == "__main__":
    unittest.main()
