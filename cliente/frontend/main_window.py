"""Ventana principal de Control de Cápsulas."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from PyQt6.QtCore import QDate, Qt, QTimer
from PyQt6.QtGui import QColor, QFont, QGuiApplication
from PyQt6.QtWidgets import (
    QApplication,
    QCheckBox,
    QDateEdit,
    QFileDialog,
    QFrame,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from cliente.backend.controller import AppController
from cliente.frontend.calendar_page import CalendarPage
from cliente.frontend.cards_page import ReferenceCardsPage
from cliente.frontend.dialogs import ask_confirmation, show_error, show_info
from cliente.frontend.gantt_page import GanttPage
from cliente.frontend.history_dialog import ImportHistoryDialog
from cliente.frontend.reference_dialog import ReferenceDialog
from cliente.frontend.table_page import ReferenceTablePage
from parametros import CHANGE_POLL_INTERVAL_MS, DEFAULT_EXPORT_FILENAME_STEM, OUTPUT_DIR
from shared.errors import ServiceError, ValidationError


class MainWindow(QMainWindow):
    """Ventana principal con acciones de encabezado y pestañas de vistas."""

    def __init__(self, controller: AppController) -> None:
        super().__init__()
        self._controller = controller

        self._tabs: QTabWidget
        self._table_page: ReferenceTablePage
        self._cards_page: ReferenceCardsPage
        self._calendar_page: CalendarPage
        self._gantt_page: GanttPage

        self._launch_enabled_input: QCheckBox
        self._launch_date_input: QDateEdit
        self._new_button: QPushButton
        self._import_button: QPushButton
        self._export_button: QPushButton
        self._history_button: QPushButton
        self._exit_button: QPushButton
        self._change_timer: QTimer

        self.setWindowTitle("Control de Cápsulas")
        screen = QGuiApplication.primaryScreen()
        geo = screen.availableGeometry()  # tamaño usable (sin taskbar/dock)
        w = int(geo.width() * 0.85)
        h = int(geo.height() * 0.85)
        self.resize(w, h)
        self.setMinimumSize(int(w * 0.60), int(h * 0.60))
        self._build_ui()
        self._apply_styles()
        self._connect_signals()

        self._controller.add_listener(self._refresh_current_tab)
        self._start_change_timer()

    def _build_ui(self) -> None:
        """Construye encabezado y pestañas."""
        central = QWidget(self)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(24, 18, 24, 18)
        root_layout.setSpacing(12)

        root_layout.addWidget(self._build_header(central))

        card = QFrame(central)
        card.setObjectName("mainCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(18, 18, 18, 18)

        self._tabs = QTabWidget(card)
        self._table_page = ReferenceTablePage(
            controller=self._controller,
            on_edit=self._open_edit_dialog,
            on_delete=self._confirm_delete,
            parent=self._tabs,
        )
        self._cards_page = ReferenceCardsPage(
            controller=self._controller,
            on_edit=self._open_edit_dialog,
            parent=self._tabs,
        )
        self._calendar_page = CalendarPage(controller=self._controller, parent=self._tabs)
        self._gantt_page = GanttPage(controller=self._controller, parent=self._tabs)

        self._tabs.addTab(self._table_page, "Tabla")
        self._tabs.addTab(self._cards_page, "Tarjetas")
        self._tabs.addTab(self._calendar_page, "Calendario")
        self._tabs.addTab(self._gantt_page, "Cronología")
        card_layout.addWidget(self._tabs)

        shadow = QGraphicsDropShadowEffect(card)
        shadow.setBlurRadius(38)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(0, 0, 0, 38))
        card.setGraphicsEffect(shadow)

        root_layout.addWidget(card, 1)
        self.setCentralWidget(central)

    def _build_header(self, parent: QWidget) -> QWidget:
        header = QWidget(parent)
        layout = QHBoxLayout(header)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        title_label = QLabel("Control de Cápsulas", header)
        title_label.setObjectName("titleLabel")
        title_label.setFont(QFont("Segoe UI", 20, QFont.Weight.Bold))

        self._launch_enabled_input = QCheckBox("Lanzamiento", header)
        self._launch_enabled_input.setChecked(True)
        self._launch_date_input = QDateEdit(header)
        self._launch_date_input.setCalendarPopup(True)
        self._launch_date_input.setDisplayFormat("dd-MM-yyyy")
        self._launch_date_input.setDate(QDate.currentDate())
        self._launch_enabled_input.toggled.connect(self._launch_date_input.setEnabled)

        self._new_button = self._build_button("Nueva referencia")
        self._import_button = self._build_button("Importar")
        self._export_button = self._build_button("Exportar")
        self._history_button = self._build_button("Historial")
        self._exit_button = self._build_button("Salir")
        self._exit_button.setObjectName("exitButton")

        layout.addWidget(title_label)
        layout.addStretch(1)
        layout.addWidget(self._launch_enabled_input)
        layout.addWidget(self._launch_date_input)
        layout.addWidget(self._new_button)
        layout.addWidget(self._import_button)
        layout.addWidget(self._export_button)
        layout.addWidget(self._history_button)
        layout.addWidget(self._exit_button)
        return header

    def _apply_styles(self) -> None:
        """Aplica estilos QSS de la interfaz."""
        self.setStyleSheet(
            """
            QMainWindow {
                background-color: #eef1f4;
            }
            QFrame#mainCard {
                background-color: #ffffff;
                border-radius: 18px;
            }
            QLabel#titleLabel {
                color: #111827;
            }
            QPushButton {
                background-color: #C80202;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-family: "Segoe UI";
                font-size: 13px;
                font-weight: 600;
                min-height: 36px;
                padding: 6px 14px;
            }
            QPushButton:hover {
                background-color: #A30202;
            }
            QPushButton:pressed {
                background-color: #820101;
            }
            QPushButton:disabled {
                background-color: #d5a3a3;
                color: #f5e8e8;
            }
            QPushButton#exitButton, QPushButton#secondaryButton, QPushButton#pageButton {
                background-color: #e5e7eb;
                color: #1f2937;
            }
            QPushButton#exitButton:hover, QPushButton#secondaryButton:hover,
            QPushButton#pageButton:hover {
                background-color: #d1d5db;
            }
            QPushButton#pageButton {
                min-width: 32px;
                padding: 4px 8px;
            }
            QPushButton#pageButton:checked {
                background-color: #C80202;
                color: #ffffff;
            }
            QPushButton#linkButton, QPushButton#dangerLinkButton {
                background-color: transparent;
                color: #2563eb;
                min-height: 24px;
                padding: 2px 6px;
            }
            QPushButton#dangerLinkButton {
                color: #b91c1c;
            }
            QLineEdit, QComboBox, QDateEdit {
                background-color: #f8fafc;
                border: 1px solid #d1d5db;
                border-radius: 8px;
                color: #111827;
                font-family: "Segoe UI";
                font-size: 13px;
                padding: 6px;
            }
            QFrame#referenceCard {
                background-color: #f8fafc;
                border: 1px solid #e2e8f0;
                border-radius: 12px;
            }
            QLabel#cardTitle {
                font-size: 16px;
                font-weight: 700;
                color: #111827;
            }
            QLabel#statusUnlocked {
                color: #15803d;
                font-weight: 600;
            }
            QLabel#statusLocked {
                color: #b45309;
                font-weight: 600;
            }
            QLabel#calendarTitle {
                font-size: 16px;
                font-weight: 700;
            }
            QLabel#weekdayLabel {
                color: #64748b;
                font-weight: 600;
            }
            QFrame#dayCell {
                background-color: #f8fafc;
                border: 1px solid #e2e8f0;
                border-radius: 6px;
            }
            QFrame#todayCell {
                background-color: #fef2f2;
                border: 2px solid #C80202;
                border-radius: 6px;
            }
            QLabel#dayItem {
                background-color: #dbeafe;
                border-radius: 4px;
                color: #1e3a8a;
                font-size: 11px;
                padding: 1px 4px;
            }
            QLabel#dayMore {
                color: #64748b;
                font-size: 11px;
            }
            """
        )

    def _connect_signals(self) -> None:
        """Conecta botones de UI con acciones del controller."""
        self._new_button.clicked.connect(self._open_create_dialog)
        self._import_button.clicked.connect(self._on_import_clicked)
        self._export_button.clicked.connect(self._on_export_clicked)
        self._history_button.clicked.connect(self._on_history_clicked)
        self._exit_button.clicked.connect(self._on_exit_clicked)
        self._tabs.currentChanged.connect(lambda _index: self._refresh_current_tab())

    def _start_change_timer(self) -> None:
        """Drena el canal de cambios en el hilo de la interfaz."""
        self._change_timer = QTimer(self)
        self._change_timer.setInterval(CHANGE_POLL_INTERVAL_MS)
        self._change_timer.timeout.connect(self._controller.process_pending_changes)
        self._change_timer.start()

    def _refresh_current_tab(self) -> None:
        page = self._tabs.currentWidget()
        if page is not None:
            page.refresh()

    def _selected_launch_date(self) -> date | None:
        if not self._launch_enabled_input.isChecked():
            return None
        return self._launch_date_input.date().toPyDate()

    def _open_create_dialog(self, _checked: bool = False) -> None:
        dialog = ReferenceDialog(
            controller=self._controller,
            launch_date=self._selected_launch_date(),
            parent=self,
        )
        dialog.exec()

    def _open_edit_dialog(self, reference_id: str) -> None:
        reference = self._controller.get_reference(reference_id)
        if reference is None:
            show_error(self, "Referencia no encontrada", "La referencia ya no existe.")
            return

        dialog = ReferenceDialog(controller=self._controller, reference=reference, parent=self)
        dialog.exec()

    def _confirm_delete(self, reference_id: str) -> None:
        reference = self._controller.get_reference(reference_id)
        if reference is None:
            return
        if not ask_confirmation(
            self,
            "Eliminar referencia",
            f"¿Eliminar la referencia {reference.referencia}? Esta acción no se puede deshacer.",
        ):
            return

        try:
            self._controller.on_delete_reference(reference_id)
        except (ValidationError, ServiceError) as exc:
            show_error(self, "Error al eliminar", str(exc))

    def _on_import_clicked(self, _checked: bool = False) -> None:
        file_path, _filter = QFileDialog.getOpenFileName(
            self,
            "Importar referencias",
            str(Path.home()),
            "Planillas (*.xlsx *.csv *.txt)",
        )
        if not file_path:
            return

        try:
            response = self._controller.on_import_file(file_path)
        except (ValidationError, ServiceError) as exc:
            show_error(self, "Error de importacion", str(exc))
            return

        show_info(
            self,
            "Importacion completada",
            f"Se importaron {response.record_count} referencias desde {response.file_name}.",
        )

    def _on_export_clicked(self, _checked: bool = False) -> None:
        default_path = OUTPUT_DIR / f"{DEFAULT_EXPORT_FILENAME_STEM}.xlsx"
        file_path, _filter = QFileDialog.getSaveFileName(
            self,
            "Exportar referencias",
            str(default_path),
            "Excel (*.xlsx);;CSV (*.csv)",
        )
        if not file_path:
            return

        target = Path(file_path)
        file_format = "csv" if target.suffix.lower() == ".csv" else "xlsx"
        try:
            created_path = self._controller.on_export(
                output_dir=target.parent,
                filename_stem=target.stem,
                file_format=file_format,
            )
        except (ValidationError, ServiceError) as exc:
            show_error(self, "Error de exportacion", str(exc))
            return

        show_info(self, "Exportacion completada", f"Archivo creado:\n{created_path}")

    def _on_history_clicked(self, _checked: bool = False) -> None:
        try:
            records = self._controller.list_import_history()
        except (ValidationError, ServiceError) as exc:
            show_error(self, "Error de historial", str(exc))
            return

        ImportHistoryDialog(records=records, parent=self).exec()

    def _on_exit_clicked(self) -> None:
        """Solicita al controller el cierre de la app."""
        self._change_timer.stop()
        self._controller.on_exit(QApplication.instance())

    @staticmethod
    def _build_button(text: str) -> QPushButton:
        """Construye un boton estandar del encabezado."""
        button = QPushButton(text)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        return button
