"""Dialogo con el historial de importaciones y exportaciones."""

from __future__ import annotations

from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from servidor.domain.models import ImportRecord


class ImportHistoryDialog(QDialog):
    """Lista de operaciones masivas, de la mas reciente a la mas antigua."""

    HEADERS = ("Fecha", "Operación", "Archivo", "Registros", "Estado", "Error")
    OPERATION_LABELS = {"import": "Importación", "export": "Exportación"}

    def __init__(self, records: list[ImportRecord], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._records = records

        self.setWindowTitle("Historial de importaciones")
        self.setModal(True)
        self.resize(860, 460)

        self._build_ui()
        self._apply_styles()

    def _build_ui(self) -> None:
        """Construye layout y widgets del dialogo."""
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(18, 18, 18, 18)
        root_layout.setSpacing(12)

        title_label = QLabel("Historial de importaciones", self)
        title_label.setObjectName("historyTitle")

        table = QTableWidget(len(self._records), len(self.HEADERS), self)
        table.setHorizontalHeaderLabels(self.HEADERS)
        table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        table.verticalHeader().setVisible(False)
        table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        table.horizontalHeader().setStretchLastSection(True)

        for row, record in enumerate(self._records):
            status_item = QTableWidgetItem("Exitosa" if record.is_success else "Error")
            status_item.setForeground(QColor("#15803d" if record.is_success else "#b91c1c"))
            values = (
                QTableWidgetItem(record.timestamp.replace("T", " ")),
                QTableWidgetItem(self.OPERATION_LABELS.get(record.operation, record.operation)),
                QTableWidgetItem(record.file_name),
                QTableWidgetItem(str(record.record_count)),
                status_item,
                QTableWidgetItem(record.error_message or ""),
            )
            for column, item in enumerate(values):
                table.setItem(row, column, item)

        empty_label = QLabel("No hay operaciones registradas.", self)
        empty_label.setObjectName("emptyLabel")
        empty_label.setVisible(not self._records)

        buttons_layout = QHBoxLayout()
        buttons_layout.addStretch(1)
        close_button = QPushButton("Cerrar", self)
        close_button.clicked.connect(self.accept)
        buttons_layout.addWidget(close_button)

        root_layout.addWidget(title_label)
        root_layout.addWidget(empty_label)
        root_layout.addWidget(table, 1)
        root_layout.addLayout(buttons_layout)

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            QDialog {
                background-color: #ffffff;
            }
            QLabel#historyTitle {
                color: #334155;
                font-family: "Segoe UI";
                font-size: 16px;
                font-weight: 600;
            }
            QLabel#emptyLabel {
                color: #64748b;
            }
            QTableWidget {
                border: 1px solid #d1d5db;
                border-radius: 8px;
                font-family: "Segoe UI";
                font-size: 13px;
            }
            QPushButton {
                background-color: #e5e7eb;
                border: none;
                border-radius: 10px;
                color: #1f2937;
                font-family: "Segoe UI";
                font-size: 13px;
                font-weight: 600;
                min-height: 36px;
                min-width: 100px;
            }
            QPushButton:hover {
                background-color: #d1d5db;
            }
            """
        )
