"""Copia local de referencias que mantiene el cliente entre refrescos."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from servidor.domain.models import ChangeEvent, ChangeOp, Reference

LOGGER = logging.getLogger(__name__)


class ReferenceWorkingSet:
    """Conjunto de trabajo alimentado por lecturas completas y eventos de cambio.

    - Cada lectura completa recibe un token; solo se aplica la ultima pedida.
    - Los eventos reemplazan por id y gana la version con ``updated_at`` mayor.
    - Un id eliminado queda marcado y no vuelve a aparecer por eventos viejos;
      la marca se libera cuando una lectura vigente ya no lo trae.
    - Los eventos recibidos durante una lectura se reaplican sobre ella.
    """

    def __init__(self) -> None:
        self._items: dict[str, Reference] = {}
        self._tombstones: set[str] = set()
        self._latest_token = 0
        self._in_flight: int | None = None
        self._events_during_fetch: list[ChangeEvent] = []

    @property
    def latest_token(self) -> int:
        return self._latest_token

    @property
    def tombstones(self) -> frozenset[str]:
        return frozenset(self._tombstones)

    def begin_fetch(self) -> int:
        """Registra una lectura nueva y retorna su token."""
        self._latest_token += 1
        self._in_flight = self._latest_token
        self._events_during_fetch = []
        LOGGER.debug("Lectura de referencias iniciada: token=%d", self._latest_token)
        return self._latest_token

    def apply_fetch(self, token: int, references: Iterable[Reference]) -> bool:
        """Reemplaza el contenido si el token es el vigente; False si llego tarde."""
        if token != self._latest_token:
            LOGGER.debug(
                "Lectura descartada por token obsoleto: token=%d, vigente=%d",
                token,
                self._latest_token,
            )
            return False

        fetched = {reference.id: reference for reference in references}
        # Solo siguen marcados los ids que la lectura aun trae.
        self._tombstones.intersection_update(fetched)
        self._items = {
            reference_id: reference
            for reference_id, reference in fetched.items()
            if reference_id not in self._tombstones
        }
        pending = self._events_during_fetch
        self._in_flight = None
        self._events_during_fetch = []

        for event in pending:
            self._merge(event)

        LOGGER.debug(
            "Lectura aplicada: token=%d, referencias=%d, eventos_reaplicados=%d",
            token,
            len(self._items),
            len(pending),
        )
        return True

    def apply_event(self, event: ChangeEvent) -> bool:
        """Aplica un cambio del almacen; retorna True si el contenido cambio."""
        if self._in_flight is not None:
            self._events_during_fetch.append(event)
        return self._merge(event)

    def _merge(self, event: ChangeEvent) -> bool:
        entity = event.entity

        if event.op is ChangeOp.DELETE:
            self._tombstones.add(entity.id)
            return self._items.pop(entity.id, None) is not None

        if entity.id in self._tombstones:
            LOGGER.debug("Evento ignorado para referencia eliminada: id=%s", entity.id)
            return False

        current = self._items.get(entity.id)
        if current is not None:
            if current == entity:
                return False
            if current.updated_at > entity.updated_at:
                LOGGER.debug(
                    "Evento obsoleto ignorado: id=%s, actual=%s, recibido=%s",
                    entity.id,
                    current.updated_at,
                    entity.updated_at,
                )
                return False

        self._items[entity.id] = entity
        return True

    def get(self, reference_id: str) -> Reference | None:
        return self._items.get(reference_id)

    def references(self) -> list[Reference]:
        """Snapshot ordenado por creacion, mas recientes primero."""
        return sorted(
            self._items.values(),
            key=lambda reference: (reference.created_at, reference.id),
            reverse=True,
        )

    def __len__(self) -> int:
        return len(self._items)
