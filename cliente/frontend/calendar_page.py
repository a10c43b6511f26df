"""Pestaña de calendario mensual por fecha de lanzamiento."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from servidor.services.calendario import CalendarDay, shift_month
from servidor.services.fechas import WEEKDAY_ABBREVIATIONS, format_month_title

if TYPE_CHECKING:
    from cliente.backend.controller import AppController


class CalendarPage(QWidget):
    """Grilla de semanas (domingo primero) con referencias por dia."""

    def __init__(self, controller: AppController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        current = controller.today()
        self._year = current.year
        self._month = current.month

        self._title_label: QLabel
        self._grid: QGridLayout
        self._build_ui()

    def _build_ui(self) -> None:
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(0, 12, 0, 0)
        root_layout.setSpacing(10)

        navigation_layout = QHBoxLayout()
        previous_button = QPushButton("‹", self)
        previous_button.setObjectName("pageButton")
        previous_button.clicked.connect(lambda _checked=False: self._shift(-1))
        next_button = QPushButton("›", self)
        next_button.setObjectName("pageButton")
        next_button.clicked.connect(lambda _checked=False: self._shift(1))
        today_button = QPushButton("Hoy", self)
        today_button.setObjectName("secondaryButton")
        today_button.clicked.connect(self._on_today_clicked)

        self._title_label = QLabel(self)
        self._title_label.setObjectName("calendarTitle")

        navigation_layout.addWidget(previous_button)
        navigation_layout.addWidget(self._title_label)
        navigation_layout.addWidget(next_button)
        navigation_layout.addStretch(1)
        navigation_layout.addWidget(today_button)

        self._grid = QGridLayout()
        self._grid.setSpacing(4)

        root_layout.addLayout(navigation_layout)
        root_layout.addLayout(self._grid, 1)

    def refresh(self) -> None:
        while self._grid.count():
            item = self._grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        self._title_label.setText(format_month_title(self._year, self._month).capitalize())
        for column, name in enumerate(WEEKDAY_ABBREVIATIONS):
            header = QLabel(name, self)
            header.setObjectName("weekdayLabel")
            header.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self._grid.addWidget(header, 0, column)

        weeks = self._controller.calendar_month(self._year, self._month)
        for week_index, week in enumerate(weeks, start=1):
            self._grid.setRowStretch(week_index, 1)
            for column, day in enumerate(week):
                self._grid.addWidget(self._build_day_cell(day), week_index, column)

    def _build_day_cell(self, day: CalendarDay | None) -> QFrame:
        cell = QFrame(self)
        cell.setObjectName("dayCell" if day is not None else "emptyDayCell")
        if day is None:
            return cell

        if day.is_today:
            cell.setObjectName("todayCell")

        layout = QVBoxLayout(cell)
        layout.setContentsMargins(6, 4, 6, 4)
        layout.setSpacing(2)

        number_label = QLabel(str(day.day.day), cell)
        number_label.setObjectName("dayNumber")
        layout.addWidget(number_label)

        for reference in day.visible:
            item_label = QLabel(reference.referencia, cell)
            item_label.setObjectName("dayItem")
            item_label.setToolTip(reference.color or reference.referencia)
            layout.addWidget(item_label)

        if day.overflow:
            more_label = QLabel(f"+{day.overflow} más", cell)
            more_label.setObjectName("dayMore")
            more_label.setToolTip(", ".join(reference.referencia for reference in day.references))
            layout.addWidget(more_label)

        layout.addStretch(1)
        return cell

    def _shift(self, delta: int) -> None:
        self._year, self._month = shift_month(self._year, self._month, delta)
        self.refresh()

    def _on_today_clicked(self) -> None:
        current = self._controller.today()
        self._year, self._month = current.year, current.month
        self.refresh()
