"""Tests para el conjunto de trabajo del cliente."""

from __future__ import annotations

import unittest

from cliente.backend.working_set import ReferenceWorkingSet
from servidor.domain.models import ChangeEvent, ChangeOp, Reference


def build_reference(
    reference_id: str,
    updated_at: str = "2024-03-01T10:00:00",
    created_at: str = "2024-03-01T10:00:00",
    ubicacion: str | None = None,
) -> Reference:
    return Reference(
        id=reference_id,
        referencia=f"REF-{reference_id}",
        curva="S-M-L",
        cantidad=18,
        ubicacion=ubicacion,
        created_at=created_at,
        updated_at=updated_at,
    )


class ReferenceWorkingSetTests(unittest.TestCase):
    """Valida tokens de lectura, eventos y marcas de eliminacion."""

    def setUp(self) -> None:
        self.working_set = ReferenceWorkingSet()

    def _load(self, *references: Reference) -> None:
        token = self.working_set.begin_fetch()
        self.assertTrue(self.working_set.apply_fetch(token, references))

    def test_stale_fetch_is_discarded(self) -> None:
        first = self.working_set.begin_fetch()
        second = self.working_set.begin_fetch()

        self.assertFalse(self.working_set.apply_fetch(first, [build_reference("old")]))
        self.assertTrue(self.working_set.apply_fetch(second, [build_reference("new")]))
        self.assertEqual([reference.id for reference in self.working_set.references()], ["new"])
        self.assertEqual(self.working_set.latest_token, second)

    def test_events_during_fetch_are_replayed(self) -> None:
        """Una insercion recibida mientras se lee no se pierde con la lectura."""
        token = self.working_set.begin_fetch()
        self.working_set.apply_event(ChangeEvent(ChangeOp.INSERT, build_reference("live")))

        self.working_set.apply_fetch(token, [build_reference("a")])

        self.assertEqual(len(self.working_set), 2)
        self.assertIsNotNone(self.working_set.get("live"))

    def test_newer_update_wins(self) -> None:
        self._load(build_reference("a", updated_at="2024-03-02T10:00:00", ubicacion="A"))

        older = build_reference("a", updated_at="2024-03-01T10:00:00", ubicacion="viejo")
        newer = build_reference("a", updated_at="2024-03-03T10:00:00", ubicacion="B")

        self.assertFalse(self.working_set.apply_event(ChangeEvent(ChangeOp.UPDATE, older)))
        self.assertTrue(self.working_set.apply_event(ChangeEvent(ChangeOp.UPDATE, newer)))
        self.assertFalse(self.working_set.apply_event(ChangeEvent(ChangeOp.UPDATE, newer)))
        self.assertEqual(self.working_set.get("a").ubicacion, "B")

    def test_deleted_reference_does_not_come_back(self) -> None:
        reference = build_reference("a")
        self._load(reference)

        self.assertTrue(self.working_set.apply_event(ChangeEvent(ChangeOp.DELETE, reference)))
        late_update = build_reference("a", updated_at="2024-03-09T10:00:00")
        self.assertFalse(self.working_set.apply_event(ChangeEvent(ChangeOp.UPDATE, late_update)))

        self._load(reference)
        self.assertIsNone(self.working_set.get("a"))
        self.assertEqual(len(self.working_set), 0)

    def test_tombstone_released_once_fetch_omits_id(self) -> None:
        """La marca de eliminacion dura mientras una lectura aun trae el id."""
        reference = build_reference("a")
        other = build_reference("b")
        self._load(reference, other)
        self.working_set.apply_event(ChangeEvent(ChangeOp.DELETE, reference))

        self._load(reference, other)
        self.assertEqual(self.working_set.tombstones, frozenset({"a"}))
        self.assertIsNone(self.working_set.get("a"))

        for _ in range(3):
            self._load(other)
        self.assertEqual(self.working_set.tombstones, frozenset())
        self.assertEqual([item.id for item in self.working_set.references()], ["b"])

    def test_delete_during_fetch_keeps_tombstone(self) -> None:
        reference = build_reference("a")
        self._load(reference)

        token = self.working_set.begin_fetch()
        self.working_set.apply_event(ChangeEvent(ChangeOp.DELETE, reference))
        self.working_set.apply_fetch(token, [reference])

        self.assertIsNone(self.working_set.get("a"))
        self.assertIn("a", self.working_set.tombstones)

    def test_delete_of_unknown_id_reports_no_change(self) -> None:
        self.assertFalse(
            self.working_set.apply_event(ChangeEvent(ChangeOp.DELETE, build_reference("x")))
        )

    def test_references_newest_first(self) -> None:
        self._load(
            build_reference("a", created_at="2024-03-01T10:00:00"),
            build_reference("b", created_at="2024-03-03T10:00:00"),
            build_reference("c", created_at="2024-03-02T10:00:00"),
        )
        self.assertEqual([reference.id for reference in self.working_set.references()], ["b", "c", "a"])


if __name__ == "__main__":
    unittest.main()
