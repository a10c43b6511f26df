"""Almacen local de referencias con notificacion de cambios."""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from parametros import REFERENCES_JSON
from servidor.domain.models import EDITABLE_FIELDS, ChangeEvent, ChangeOp, Reference
from shared.errors import ServiceError, ValidationError
from shared.protocol import ReferenceDraft

LOGGER = logging.getLogger(__name__)

TABLE_REFERENCES = "references"

ChangeListener = Callable[[ChangeEvent], None]
ReferenceFilter = Callable[[Reference], bool]


class ReferenceStore(Protocol):
    """Contrato CRUD + suscripcion consumido por el cliente."""

    def create(self, draft: ReferenceDraft) -> Reference:
        """Crea una referencia nueva."""

    def create_many(self, drafts: Sequence[ReferenceDraft]) -> list[Reference]:
        """Crea todas las referencias o ninguna."""

    def update(self, reference_id: str, patch: Mapping[str, Any]) -> Reference:
        """Actualiza campos editables de una referencia."""

    def delete(self, reference_id: str) -> None:
        """Elimina una referencia de forma permanente."""

    def get(self, reference_id: str) -> Reference | None:
        """Retorna una referencia por id."""

    def list(
        self,
        filter: ReferenceFilter | None = None,
        order: str | None = None,
    ) -> list[Reference]:
        """Lista referencias filtradas y ordenadas."""

    def subscribe(self, table: str, on_change: ChangeListener) -> Callable[[], None]:
        """Registra un listener y retorna la funcion para desuscribirlo."""


class JsonReferenceStore:
    """Implementacion del almacen sobre un archivo JSON local."""

    DEFAULT_ORDER = "-created_at"

    def __init__(
        self,
        path: Path = REFERENCES_JSON,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._path = path
        self._clock = clock
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._listeners: dict[str, list[ChangeListener]] = {TABLE_REFERENCES: []}

    def ensure_initialized(self) -> None:
        """Crea el archivo de referencias si no existe."""
        if self._path.exists():
            return

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ServiceError(f"No fue posible crear directorio del almacen: {self._path}") from exc

        self._write_references([])
        LOGGER.info("Almacen de referencias inicializado en: %s", self._path)

    def create(self, draft: ReferenceDraft) -> Reference:
        """Crea una referencia nueva validando unicidad de la referencia."""
        return self.create_many([draft])[0]

    def create_many(self, drafts: Sequence[ReferenceDraft]) -> list[Reference]:
        """Crea un lote completo; si una referencia choca no se escribe ninguna."""
        references = self._read_references()
        taken = {self._referencia_key(reference.referencia) for reference in references}

        duplicated: list[str] = []
        for draft in drafts:
            key = self._referencia_key(draft.referencia)
            if not key:
                raise ValidationError("La referencia es obligatoria.")
            if key in taken:
                duplicated.append(draft.referencia.strip())
            taken.add(key)

        if duplicated:
            raise ValidationError(
                "Ya existen referencias con estos codigos: " + ", ".join(duplicated)
            )

        timestamp = self._now()
        created = [
            Reference(
                id=self._id_factory(),
                created_at=timestamp,
                updated_at=timestamp,
                **self._clean_fields(draft.to_fields()),
            )
            for draft in drafts
        ]

        self._write_references([*references, *created])
        LOGGER.info("Referencias creadas: %d", len(created))

        for reference in created:
            self._notify(TABLE_REFERENCES, ChangeEvent(op=ChangeOp.INSERT, entity=reference))
        return created

    def update(self, reference_id: str, patch: Mapping[str, Any]) -> Reference:
        """Actualiza campos editables; id y marcas de tiempo son inmutables."""
        invalid_fields = sorted(set(patch) - set(EDITABLE_FIELDS))
        if invalid_fields:
            raise ValidationError(
                "Campos no editables en la referencia: " + ", ".join(invalid_fields)
            )

        references = self._read_references()
        index = self._index_of(references, reference_id)
        current = references[index]
        changes = self._clean_fields(dict(patch))

        if "referencia" in changes:
            key = self._referencia_key(changes["referencia"])
            if not key:
                raise ValidationError("La referencia es obligatoria.")
            for other in references:
                if other.id != reference_id and self._referencia_key(other.referencia) == key:
                    raise ValidationError(
                        f"Ya existe una referencia con el codigo: {changes['referencia']}"
                    )

        updated = current.with_changes(**changes, updated_at=self._now())
        references[index] = updated
        self._write_references(references)
        LOGGER.info("Referencia actualizada: id=%s, referencia=%s", updated.id, updated.referencia)

        self._notify(TABLE_REFERENCES, ChangeEvent(op=ChangeOp.UPDATE, entity=updated))
        return updated

    def delete(self, reference_id: str) -> None:
        """Elimina definitivamente una referencia."""
        references = self._read_references()
        index = self._index_of(references, reference_id)
        removed = references.pop(index)
        self._write_references(references)
        LOGGER.info("Referencia eliminada: id=%s, referencia=%s", removed.id, removed.referencia)

        self._notify(TABLE_REFERENCES, ChangeEvent(op=ChangeOp.DELETE, entity=removed))

    def get(self, reference_id: str) -> Reference | None:
        """Retorna una referencia por id o None si no existe."""
        for reference in self._read_references():
            if reference.id == reference_id:
                return reference
        return None

    def list(
        self,
        filter: ReferenceFilter | None = None,
        order: str | None = None,
    ) -> list[Reference]:
        """Lista referencias; ``order`` es un campo con prefijo ``-`` opcional."""
        references = self._read_references()
        if filter is not None:
            references = [reference for reference in references if filter(reference)]

        order_spec = order or self.DEFAULT_ORDER
        descending = order_spec.startswith("-")
        field_name = order_spec.lstrip("-")
        if field_name not in Reference.__dataclass_fields__:
            raise ValidationError(f"Campo de orden invalido: {field_name}")

        with_value = [r for r in references if getattr(r, field_name) is not None]
        without_value = [r for r in references if getattr(r, field_name) is None]
        with_value.sort(key=lambda r: getattr(r, field_name), reverse=descending)
        return with_value + without_value

    def existing_referencias(self) -> set[str]:
        """Claves normalizadas de todas las referencias guardadas."""
        return {self._referencia_key(reference.referencia) for reference in self._read_references()}

    def subscribe(self, table: str, on_change: ChangeListener) -> Callable[[], None]:
        """Suscribe un listener a los cambios de una tabla."""
        listeners = self._listeners.get(table)
        if listeners is None:
            raise ValidationError(f"Tabla desconocida para suscripcion: {table}")

        listeners.append(on_change)
        LOGGER.debug("Listener suscrito a tabla %s (total=%d)", table, len(listeners))

        def unsubscribe() -> None:
            if on_change in listeners:
                listeners.remove(on_change)

        return unsubscribe

    def _notify(self, table: str, event: ChangeEvent) -> None:
        """Entrega el cambio a cada listener; un listener fallido no revierte la escritura."""
        for listener in list(self._listeners.get(table, [])):
            try:
                listener(event)
            except Exception:
                LOGGER.exception(
                    "Listener de cambios fallo: table=%s, op=%s, id=%s",
                    table,
                    event.op.value,
                    event.entity.id,
                )

    def _read_references(self) -> list[Reference]:
        """Lee el archivo JSON completo."""
        if not self._path.exists():
            return []

        try:
            raw_text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ServiceError(f"No fue posible leer el almacen de referencias: {self._path}") from exc

        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise ServiceError(f"El almacen de referencias tiene formato invalido: {self._path}") from exc

        raw_references = data.get("references") if isinstance(data, dict) else None
        if not isinstance(raw_references, list):
            raise ServiceError("El almacen debe contener una lista 'references'.")

        try:
            return [Reference.from_dict(item) for item in raw_references]
        except (TypeError, ValueError) as exc:
            raise ServiceError("El almacen contiene referencias invalidas.") from exc

    def _write_references(self, references: Sequence[Reference]) -> None:
        """Escribe el almacen de manera segura (temp + replace)."""
        temp_path = self._path.with_name(f"{self._path.name}.tmp")
        data = {"references": [reference.to_dict() for reference in references]}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            serialized = json.dumps(data, ensure_ascii=False, indent=2)
            temp_path.write_text(serialized + "\n", encoding="utf-8")
            temp_path.replace(self._path)
        except OSError as exc:
            LOGGER.exception("Error al persistir almacen de referencias: %s", self._path)
            raise ServiceError("No fue posible guardar las referencias.") from exc
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

    @staticmethod
    def _index_of(references: Sequence[Reference], reference_id: str) -> int:
        for index, reference in enumerate(references):
            if reference.id == reference_id:
                return index
        raise ValidationError(f"No existe la referencia con id: {reference_id}")

    @staticmethod
    def _clean_fields(values: dict[str, Any]) -> dict[str, Any]:
        """Recorta textos y convierte opcionales vacios en None."""
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if isinstance(value, str):
                value = value.strip()
                if not value and key not in ("referencia", "curva"):
                    value = None
            cleaned[key] = value
        if "cantidad" in cleaned:
            cleaned["cantidad"] = int(cleaned["cantidad"])
        return cleaned

    @staticmethod
    def _referencia_key(referencia: str) -> str:
        return (referencia or "").strip().casefold()

    def _now(self) -> str:
        return self._clock().isoformat(timespec="microseconds")
