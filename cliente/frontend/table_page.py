"""Pestaña de tabla: busqueda, filtros, orden por columna y paginacion."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from servidor.services.desbloqueo import is_unlocked
from servidor.services.fechas import MONTH_NAMES, format_display_date
from servidor.services.vistas import (
    DAY_RANGE_OPTIONS,
    STATUS_DAYS_FIELD,
    UNLOCK_DATE_FIELD,
    SortDirection,
    StatusFilter,
    page_window,
)
from shared.catalogos import curva_label

if TYPE_CHECKING:
    from cliente.backend.controller import AppController

# (titulo de columna, campo de orden); None no es ordenable.
COLUMNS: tuple[tuple[str, str | None], ...] = (
    ("Referencia", "referencia"),
    ("Curva", "curva"),
    ("Cantidad", "cantidad"),
    ("Colores", "cantidad_colores"),
    ("Distribución", "distribucion"),
    ("Color", "color"),
    ("Ingreso a Bodega", "ingreso_a_bodega"),
    ("Lanzamiento", "lanzamiento_capsula"),
    ("Fecha Desbloqueo", UNLOCK_DATE_FIELD),
    ("Estado", STATUS_DAYS_FIELD),
    ("Acciones", None),
)


class ReferenceTablePage(QWidget):
    """Tabla paginada de referencias con su estado de desbloqueo."""

    def __init__(
        self,
        controller: AppController,
        on_edit: Callable[[str], None],
        on_delete: Callable[[str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._on_edit = on_edit
        self._on_delete = on_delete

        self._search_input: QLineEdit
        self._status_input: QComboBox
        self._month_input: QComboBox
        self._day_range_input: QComboBox
        self._table: QTableWidget
        self._pagination_layout: QHBoxLayout
        self._summary_label: QLabel

        self._build_ui()

    def _build_ui(self) -> None:
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(0, 12, 0, 0)
        root_layout.setSpacing(10)

        filters_layout = QHBoxLayout()
        filters_layout.setSpacing(8)

        self._search_input = QLineEdit(self)
        self._search_input.setPlaceholderText("Buscar referencia...")
        self._search_input.textChanged.connect(self._controller.set_search)

        self._status_input = QComboBox(self)
        self._status_input.addItem("Todos los estados", StatusFilter.ALL)
        self._status_input.addItem("Desbloqueados", StatusFilter.UNLOCKED)
        self._status_input.addItem("Bloqueados", StatusFilter.LOCKED)
        self._status_input.currentIndexChanged.connect(self._on_status_changed)

        self._month_input = QComboBox(self)
        self._month_input.addItem("Todos los meses", 0)
        for index, name in enumerate(MONTH_NAMES, start=1):
            self._month_input.addItem(name.capitalize(), index)
        self._month_input.currentIndexChanged.connect(self._on_month_changed)

        self._day_range_input = QComboBox(self)
        self._day_range_input.addItem("Cualquier plazo", -1)
        for index, day_range in enumerate(DAY_RANGE_OPTIONS):
            self._day_range_input.addItem(day_range.label, index)
        self._day_range_input.currentIndexChanged.connect(self._on_day_range_changed)

        clear_button = QPushButton("Limpiar filtros", self)
        clear_button.setObjectName("secondaryButton")
        clear_button.clicked.connect(self._on_clear_clicked)

        filters_layout.addWidget(self._search_input, 2)
        filters_layout.addWidget(self._status_input, 1)
        filters_layout.addWidget(self._month_input, 1)
        filters_layout.addWidget(self._day_range_input, 1)
        filters_layout.addWidget(clear_button)

        self._table = QTableWidget(0, len(COLUMNS), self)
        self._table.setHorizontalHeaderLabels([title for title, _ in COLUMNS])
        self._table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self._table.horizontalHeader().setSectionsClickable(True)
        self._table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)

        footer_layout = QHBoxLayout()
        self._summary_label = QLabel(self)
        self._summary_label.setObjectName("summaryLabel")
        self._pagination_layout = QHBoxLayout()
        self._pagination_layout.setSpacing(4)
        footer_layout.addWidget(self._summary_label)
        footer_layout.addStretch(1)
        footer_layout.addLayout(self._pagination_layout)

        root_layout.addLayout(filters_layout)
        root_layout.addWidget(self._table, 1)
        root_layout.addLayout(footer_layout)

    def refresh(self) -> None:
        """Repinta la pagina actual con la proyeccion del controller."""
        page = self._controller.table_page()
        query = self._controller.query

        self._table.setRowCount(len(page.rows))
        for row_index, row in enumerate(page.rows):
            reference = row.reference
            values = (
                reference.referencia,
                curva_label(reference.curva),
                str(reference.cantidad),
                reference.cantidad_colores or "-",
                reference.distribucion or "-",
                reference.color or "-",
                format_display_date(reference.ingreso_a_bodega),
                format_display_date(reference.lanzamiento_capsula),
                format_display_date(row.status.unlock),
                row.label,
            )
            for column, value in enumerate(values):
                item = QTableWidgetItem(value)
                if column == len(values) - 1:
                    item.setForeground(QColor("#15803d" if is_unlocked(row.status) else "#b45309"))
                self._table.setItem(row_index, column, item)
            self._table.setCellWidget(row_index, len(values), self._build_actions(reference.id))

        for column, (title, sort_field) in enumerate(COLUMNS):
            if sort_field is not None and sort_field == query.sort_field:
                arrow = "▲" if query.sort_direction is SortDirection.ASC else "▼"
                title = f"{title} {arrow}"
            self._table.horizontalHeaderItem(column).setText(title)

        self._summary_label.setText(
            f"Mostrando {len(page.rows)} de {page.total_items} referencias"
        )
        self._rebuild_pagination(page.page, page.total_pages)

    def _build_actions(self, reference_id: str) -> QWidget:
        container = QWidget(self._table)
        layout = QHBoxLayout(container)
        layout.setContentsMargins(4, 0, 4, 0)
        layout.setSpacing(4)

        edit_button = QPushButton("Editar", container)
        edit_button.setObjectName("linkButton")
        edit_button.clicked.connect(lambda _checked=False: self._on_edit(reference_id))

        delete_button = QPushButton("Eliminar", container)
        delete_button.setObjectName("dangerLinkButton")
        delete_button.clicked.connect(lambda _checked=False: self._on_delete(reference_id))

        layout.addWidget(edit_button)
        layout.addWidget(delete_button)
        return container

    def _rebuild_pagination(self, current: int, total_pages: int) -> None:
        while self._pagination_layout.count():
            item = self._pagination_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        previous_button = QPushButton("‹", self)
        previous_button.setObjectName("pageButton")
        previous_button.setEnabled(current > 1)
        previous_button.clicked.connect(lambda _checked=False: self._controller.set_page(current - 1))
        self._pagination_layout.addWidget(previous_button)

        for number in page_window(current, total_pages):
            if number is None:
                self._pagination_layout.addWidget(QLabel("…", self))
                continue
            button = QPushButton(str(number), self)
            button.setObjectName("pageButton")
            button.setCheckable(True)
            button.setChecked(number == current)
            button.clicked.connect(lambda _checked=False, page=number: self._controller.set_page(page))
            self._pagination_layout.addWidget(button)

        next_button = QPushButton("›", self)
        next_button.setObjectName("pageButton")
        next_button.setEnabled(current < total_pages)
        next_button.clicked.connect(lambda _checked=False: self._controller.set_page(current + 1))
        self._pagination_layout.addWidget(next_button)

    def _on_header_clicked(self, column: int) -> None:
        sort_field = COLUMNS[column][1]
        if sort_field is not None:
            self._controller.set_sort(sort_field)

    def _on_status_changed(self, _index: int) -> None:
        self._controller.set_status_filter(self._status_input.currentData())

    def _on_month_changed(self, _index: int) -> None:
        month = self._month_input.currentData()
        self._controller.set_unlock_month(month or None)

    def _on_day_range_changed(self, _index: int) -> None:
        index = self._day_range_input.currentData()
        self._controller.set_day_range(DAY_RANGE_OPTIONS[index] if index >= 0 else None)

    def _on_clear_clicked(self) -> None:
        for widget in (self._search_input, self._status_input, self._month_input, self._day_range_input):
            widget.blockSignals(True)
        self._search_input.clear()
        self._status_input.setCurrentIndex(0)
        self._month_input.setCurrentIndex(0)
        self._day_range_input.setCurrentIndex(0)
        for widget in (self._search_input, self._status_input, self._month_input, self._day_range_input):
            widget.blockSignals(False)
        self._controller.clear_filters()
