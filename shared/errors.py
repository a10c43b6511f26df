"""Excepciones compartidas del proyecto."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class ValidationError(Exception):
    """Error de validacion de datos de entrada."""


class ServiceError(Exception):
    """Error en la ejecucion de servicios."""


@dataclass(frozen=True, slots=True)
class ImportIssue:
    """Problema detectado en una fila del archivo de importacion."""

    row_number: int
    field: str
    value: str
    message: str

    def describe(self) -> str:
        """Describe el problema en una linea legible."""
        return f"Fila {self.row_number}: {self.message} ({self.field}: '{self.value}')"


class ImportValidationError(ValidationError):
    """Rechazo completo de una importacion con todas las filas invalidas."""

    def __init__(self, file_name: str, issues: Sequence[ImportIssue]) -> None:
        self.file_name = file_name
        self.issues: tuple[ImportIssue, ...] = tuple(issues)
        lines = [
            f"No se importo ninguna fila de '{file_name}'. "
            f"Se encontraron {len(self.issues)} problema(s):"
        ]
        lines.extend(f"- {issue.describe()}" for issue in self.issues)
        super().__init__("\n".join(lines))
