"""Pestaña de cronologia: barras por referencia sobre un eje de dias."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QColor, QPainter, QPaintEvent, QPen
from PyQt6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QScrollArea, QVBoxLayout, QWidget

from servidor.services.cronologia import (
    GanttBar,
    GanttMode,
    build_timeline,
    timeline_position,
    timeline_ticks,
)
from servidor.services.fechas import format_short_date

if TYPE_CHECKING:
    from cliente.backend.controller import AppController


class GanttCanvas(QWidget):
    """Dibuja las barras con su progreso y la linea del dia actual."""

    LABEL_WIDTH = 140
    ROW_HEIGHT = 30
    AXIS_HEIGHT = 28
    MARGIN = 12

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._bars: list[GanttBar] = []
        self._timeline: list[date] = []
        self._today = date.today()

    def set_data(self, bars: list[GanttBar], timeline: list[date], today: date) -> None:
        self._bars = bars
        self._timeline = timeline
        self._today = today
        self.setMinimumHeight(self.AXIS_HEIGHT + self.MARGIN * 2 + self.ROW_HEIGHT * max(1, len(bars)))
        self.update()

    def _x_for(self, day: date) -> float:
        chart_width = max(1, self.width() - self.LABEL_WIDTH - self.MARGIN * 2)
        return self.LABEL_WIDTH + self.MARGIN + chart_width * timeline_position(self._timeline, day) / 100

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor("#ffffff"))

        axis_pen = QPen(QColor("#94a3b8"))
        painter.setPen(axis_pen)
        for tick in timeline_ticks(self._timeline):
            x = self._x_for(tick)
            painter.drawLine(int(x), self.AXIS_HEIGHT, int(x), self.height() - self.MARGIN)
            painter.drawText(int(x) - 20, self.MARGIN + 8, format_short_date(tick))

        if not self._bars:
            painter.setPen(QColor("#64748b"))
            painter.drawText(
                self.rect(),
                Qt.AlignmentFlag.AlignCenter,
                "No hay referencias con fechas para mostrar.",
            )
            painter.end()
            return

        for index, bar in enumerate(self._bars):
            top = self.AXIS_HEIGHT + self.MARGIN + index * self.ROW_HEIGHT
            painter.setPen(QColor("#1f2937"))
            painter.drawText(
                QRectF(self.MARGIN, top, self.LABEL_WIDTH - self.MARGIN, self.ROW_HEIGHT),
                Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft,
                bar.label,
            )

            start_x = self._x_for(bar.start)
            end_x = max(self._x_for(bar.end), start_x + 4)
            rect = QRectF(start_x, top + 6, end_x - start_x, self.ROW_HEIGHT - 12)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QColor("#cbd5e1"))
            painter.drawRoundedRect(rect, 4, 4)

            done = QRectF(rect.left(), rect.top(), rect.width() * bar.progress_percent / 100, rect.height())
            painter.setBrush(QColor("#16a34a" if bar.progress_percent >= 100 else "#2563eb"))
            painter.drawRoundedRect(done, 4, 4)

        if self._timeline and self._timeline[0] <= self._today <= self._timeline[-1]:
            today_x = self._x_for(self._today)
            painter.setPen(QPen(QColor("#dc2626"), 2))
            painter.drawLine(int(today_x), self.AXIS_HEIGHT, int(today_x), self.height() - self.MARGIN)

        painter.end()


class GanttPage(QWidget):
    """Selector de modo y lienzo de la cronologia."""

    MODE_LABELS = (
        ("Desbloqueo (base → desbloqueo)", GanttMode.BASE_TO_UNLOCK),
        ("Ingreso a bodega → lanzamiento", GanttMode.INTAKE_TO_LAUNCH),
    )

    def __init__(self, controller: AppController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller

        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(0, 12, 0, 0)
        root_layout.setSpacing(10)

        mode_layout = QHBoxLayout()
        self._mode_input = QComboBox(self)
        for label, mode in self.MODE_LABELS:
            self._mode_input.addItem(label, mode)
        self._mode_input.currentIndexChanged.connect(lambda _index: self.refresh())
        mode_layout.addWidget(QLabel("Vista:", self))
        mode_layout.addWidget(self._mode_input)
        mode_layout.addStretch(1)

        self._canvas = GanttCanvas(self)
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._canvas)

        root_layout.addLayout(mode_layout)
        root_layout.addWidget(scroll, 1)

    def refresh(self) -> None:
        today = self._controller.today()
        bars = self._controller.gantt(self._mode_input.currentData())
        self._canvas.set_data(bars, build_timeline(bars, today), today)
