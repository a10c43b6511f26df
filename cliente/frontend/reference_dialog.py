"""Dialogo para crear o editar una referencia."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from PyQt6.QtCore import QDate, Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDialog,
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from cliente.frontend.dialogs import show_error
from cliente.frontend.widgets.checkable_combo import CheckableComboBox
from servidor.domain.models import Reference
from servidor.services.distribucion import DistributionFormState, recompute_distribution_fields
from servidor.services.fechas import format_display_date, format_iso, parse_calendar_date
from shared.catalogos import (
    CANTIDAD_COLORES_OPTIONS,
    COLOR_OPTIONS,
    CURVA_OPTIONS,
    DOS_COLORES,
    build_color_value,
    curva_label,
    split_color_value,
)
from shared.errors import ServiceError, ValidationError
from shared.protocol import ReferenceDraft

if TYPE_CHECKING:
    from cliente.backend.controller import AppController


class OptionalDateInput(QWidget):
    """Fecha opcional: un checkbox indica si la fecha esta definida."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self._enabled_input = QCheckBox("Definida", self)
        self._date_input = QDateEdit(self)
        self._date_input.setCalendarPopup(True)
        self._date_input.setDisplayFormat("dd-MM-yyyy")
        self._date_input.setDate(QDate.currentDate())
        self._date_input.setEnabled(False)
        self._enabled_input.toggled.connect(self._date_input.setEnabled)

        layout.addWidget(self._enabled_input)
        layout.addWidget(self._date_input, 1)

    def value(self) -> date | None:
        if not self._enabled_input.isChecked():
            return None
        return self._date_input.date().toPyDate()

    def set_value(self, value: date | None) -> None:
        self._enabled_input.setChecked(value is not None)
        if value is not None:
            self._date_input.setDate(QDate(value.year, value.month, value.day))


class ReferenceDialog(QDialog):
    """Formulario modal de referencia.

    En modo creacion la fecha de lanzamiento viene del selector del
    encabezado y se muestra solo como lectura. En modo edicion todos los
    campos son editables. Cantidad y distribucion quedan en solo lectura
    mientras la curva y la cantidad de colores tengan entrada en la tabla.
    """

    def __init__(
        self,
        controller: AppController,
        reference: Reference | None = None,
        launch_date: date | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._reference = reference
        self._launch_date = launch_date
        self._auto_calculated = False

        self._referencia_input: QLineEdit
        self._curva_input: QComboBox
        self._colores_input: QComboBox
        self._color_input: CheckableComboBox
        self._cantidad_input: QSpinBox
        self._distribucion_input: QLineEdit
        self._ingreso_input: OptionalDateInput
        self._lanzamiento_input: OptionalDateInput
        self._imagen_input: QLineEdit
        self._ubicacion_input: QLineEdit
        self._auto_label: QLabel

        title = "Editar referencia" if reference is not None else "Nueva referencia"
        self.setWindowTitle(title)
        self.setModal(True)
        self.setMinimumSize(520, 560)

        self._build_ui(title)
        self._apply_styles()
        self._connect_signals()
        if reference is not None:
            self._load_reference(reference)
        self._on_distribution_inputs_changed()

    @property
    def is_edit_mode(self) -> bool:
        return self._reference is not None

    def _build_ui(self, title: str) -> None:
        """Construye widgets del dialogo."""
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(18, 18, 18, 18)

        card = QFrame(self)
        card.setObjectName("dialogCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(24, 24, 24, 24)
        card_layout.setSpacing(12)

        title_label = QLabel(title, card)
        title_label.setObjectName("titleLabel")
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        form_layout = QGridLayout()
        form_layout.setHorizontalSpacing(16)
        form_layout.setVerticalSpacing(10)
        form_layout.setColumnStretch(1, 1)

        self._referencia_input = QLineEdit(card)
        self._referencia_input.setPlaceholderText("ABC123")

        self._curva_input = QComboBox(card)
        for curva in CURVA_OPTIONS:
            self._curva_input.addItem(curva_label(curva), curva)

        self._colores_input = QComboBox(card)
        self._colores_input.addItem("Sin definir", None)
        for option in CANTIDAD_COLORES_OPTIONS:
            self._colores_input.addItem(option, option)

        self._color_input = CheckableComboBox(placeholder="Color", max_checked=1, parent=card)
        self._color_input.set_items(list(COLOR_OPTIONS))

        self._cantidad_input = QSpinBox(card)
        self._cantidad_input.setRange(1, 100000)

        self._distribucion_input = QLineEdit(card)
        self._distribucion_input.setPlaceholderText("3-4-4-4-3")

        self._auto_label = QLabel("Calculado automáticamente según curva y colores", card)
        self._auto_label.setObjectName("helpLabel")

        self._ingreso_input = OptionalDateInput(card)
        self._lanzamiento_input = OptionalDateInput(card)

        self._imagen_input = QLineEdit(card)
        self._imagen_input.setPlaceholderText("https://...")
        self._ubicacion_input = QLineEdit(card)

        row = 0
        row = self._add_form_row(form_layout, row, "Referencia", self._referencia_input)
        row = self._add_form_row(form_layout, row, "Curva", self._curva_input)
        row = self._add_form_row(form_layout, row, "Cantidad de colores", self._colores_input)
        row = self._add_form_row(form_layout, row, "Color", self._color_input)
        row = self._add_form_row(form_layout, row, "Cantidad", self._cantidad_input)
        row = self._add_form_row(form_layout, row, "Distribución", self._distribucion_input)
        form_layout.addWidget(self._auto_label, row, 1)
        row += 1
        row = self._add_form_row(form_layout, row, "Ingreso a bodega", self._ingreso_input)
        if self.is_edit_mode:
            row = self._add_form_row(form_layout, row, "Lanzamiento cápsula", self._lanzamiento_input)
        else:
            self._lanzamiento_input.hide()
            launch_label = QLabel(format_display_date(self._launch_date), card)
            launch_label.setObjectName("valueLabel")
            row = self._add_form_row(form_layout, row, "Lanzamiento cápsula", launch_label)
        row = self._add_form_row(form_layout, row, "Imagen (URL)", self._imagen_input)
        self._add_form_row(form_layout, row, "Ubicación", self._ubicacion_input)

        buttons_layout = QHBoxLayout()
        buttons_layout.addStretch(1)

        cancel_button = QPushButton("Cancelar", card)
        cancel_button.setObjectName("cancelButton")
        save_button = QPushButton("Guardar" if self.is_edit_mode else "Crear", card)

        cancel_button.clicked.connect(self.reject)
        save_button.clicked.connect(self._on_save_clicked)

        buttons_layout.addWidget(cancel_button)
        buttons_layout.addWidget(save_button)

        card_layout.addWidget(title_label)
        card_layout.addSpacing(4)
        card_layout.addLayout(form_layout)
        card_layout.addStretch(1)
        card_layout.addLayout(buttons_layout)

        shadow = QGraphicsDropShadowEffect(card)
        shadow.setBlurRadius(30)
        shadow.setOffset(0, 6)
        shadow.setColor(QColor(0, 0, 0, 35))
        card.setGraphicsEffect(shadow)

        root_layout.addWidget(card)
        self._referencia_input.setFocus()

    def _apply_styles(self) -> None:
        """Aplica estilos visuales consistentes con la app."""
        self.setStyleSheet(
            """
            QDialog {
                background-color: #eef1f4;
            }
            QFrame#dialogCard {
                background-color: #ffffff;
                border-radius: 16px;
            }
            QLabel#titleLabel {
                color: #20232a;
                font-family: "Segoe UI";
                font-size: 22px;
                font-weight: 700;
            }
            QLabel#formLabel {
                color: #334155;
                font-family: "Segoe UI";
                font-size: 13px;
                font-weight: 600;
            }
            QLabel#helpLabel {
                color: #2563eb;
                font-size: 11px;
            }
            QLabel#valueLabel {
                color: #111827;
                font-size: 13px;
                padding: 10px 0;
            }
            QLineEdit, QSpinBox, QComboBox, QDateEdit {
                background-color: #f8fafc;
                border: 1px solid #d1d5db;
                border-radius: 8px;
                color: #111827;
                font-family: "Segoe UI";
                font-size: 13px;
                padding: 8px;
            }
            QLineEdit:read-only, QSpinBox:read-only {
                background-color: #eef2ff;
                color: #475569;
            }
            QLineEdit:focus, QSpinBox:focus, QComboBox:focus, QDateEdit:focus {
                border: 1px solid #2563eb;
                background-color: #ffffff;
            }
            QPushButton {
                background-color: #2563eb;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-family: "Segoe UI";
                font-size: 13px;
                font-weight: 600;
                min-height: 40px;
                min-width: 100px;
                padding: 8px 12px;
            }
            QPushButton:hover {
                background-color: #1d4ed8;
            }
            QPushButton#cancelButton {
                background-color: #e5e7eb;
                color: #1f2937;
            }
            QPushButton#cancelButton:hover {
                background-color: #d1d5db;
            }
            """
        )

    def _connect_signals(self) -> None:
        """Curva y colores disparan el recalculo de cantidad y distribucion."""
        self._curva_input.currentIndexChanged.connect(self._on_distribution_inputs_changed)
        self._colores_input.currentIndexChanged.connect(self._on_distribution_inputs_changed)

    def _on_distribution_inputs_changed(self, *_args: object) -> None:
        """Aplica la tabla de distribucion al formulario."""
        cantidad_colores = self._colores_input.currentData()
        self._color_input.set_max_checked(2 if cantidad_colores == DOS_COLORES else 1)

        state = recompute_distribution_fields(
            DistributionFormState(
                curva=self._curva_input.currentData(),
                cantidad_colores=cantidad_colores,
                cantidad=self._cantidad_input.value(),
                distribucion=self._distribucion_input.text(),
                auto_calculated=self._auto_calculated,
            )
        )
        self._auto_calculated = state.auto_calculated

        if state.cantidad is not None:
            self._cantidad_input.setValue(state.cantidad)
        self._distribucion_input.setText(state.distribucion or "")
        self._cantidad_input.setReadOnly(state.auto_calculated)
        self._distribucion_input.setReadOnly(state.auto_calculated)
        self._auto_label.setVisible(state.auto_calculated)

    def _load_reference(self, reference: Reference) -> None:
        """Carga los valores guardados en los campos."""
        self._referencia_input.setText(reference.referencia)
        self._select_data(self._curva_input, reference.curva)
        self._select_data(self._colores_input, reference.cantidad_colores)
        self._color_input.set_max_checked(2 if reference.cantidad_colores == DOS_COLORES else 1)
        self._color_input.set_checked_items(split_color_value(reference.color))
        self._cantidad_input.setValue(max(1, reference.cantidad))
        self._distribucion_input.setText(reference.distribucion or "")
        self._ingreso_input.set_value(parse_calendar_date(reference.ingreso_a_bodega))
        self._lanzamiento_input.set_value(parse_calendar_date(reference.lanzamiento_capsula))
        self._imagen_input.setText(reference.imagen_url or "")
        self._ubicacion_input.setText(reference.ubicacion or "")

    def _collect_draft(self) -> ReferenceDraft:
        cantidad_colores = self._colores_input.currentData()
        colors = self._color_input.checked_items()
        launch = self._lanzamiento_input.value() if self.is_edit_mode else self._launch_date

        return ReferenceDraft(
            referencia=self._referencia_input.text().strip(),
            curva=self._curva_input.currentData(),
            cantidad=self._cantidad_input.value(),
            cantidad_colores=cantidad_colores,
            distribucion=self._distribucion_input.text().strip() or None,
            color=build_color_value(
                cantidad_colores,
                colors[0] if colors else None,
                colors[1] if len(colors) > 1 else None,
            ),
            ingreso_a_bodega=format_iso(self._ingreso_input.value()) or None,
            lanzamiento_capsula=format_iso(launch) or None,
            imagen_url=self._imagen_input.text().strip() or None,
            ubicacion=self._ubicacion_input.text().strip() or None,
        )

    def _on_save_clicked(self) -> None:
        """Valida y guarda usando el controller."""
        draft = self._collect_draft()
        try:
            if self._reference is None:
                self._controller.on_create_reference(draft, self._launch_date)
            else:
                self._controller.on_update_reference(self._reference.id, draft)
        except (ValidationError, ServiceError) as exc:
            show_error(self, "Error al guardar referencia", str(exc))
            return

        self.accept()

    @staticmethod
    def _select_data(combo: QComboBox, value: object) -> None:
        index = combo.findData(value)
        combo.setCurrentIndex(max(0, index))

    @staticmethod
    def _add_form_row(layout: QGridLayout, row: int, label_text: str, field: QWidget) -> int:
        """Agrega una fila al grid y retorna el siguiente indice de fila."""
        label = QLabel(label_text)
        label.setObjectName("formLabel")
        layout.addWidget(label, row, 0, alignment=Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
        layout.addWidget(field, row, 1)
        return row + 1
