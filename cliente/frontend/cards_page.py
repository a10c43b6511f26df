"""Pestaña de tarjetas ordenadas por fecha de lanzamiento."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from servidor.services.vistas import ReferenceCard

if TYPE_CHECKING:
    from cliente.backend.controller import AppController


class ReferenceCardsPage(QWidget):
    """Grilla de tarjetas con imagen, datos clave y estado."""

    COLUMNS = 3

    def __init__(
        self,
        controller: AppController,
        on_edit: Callable[[str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._on_edit = on_edit
        self._grid: QGridLayout

        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(0, 12, 0, 0)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)

        content = QWidget(scroll)
        self._grid = QGridLayout(content)
        self._grid.setSpacing(14)
        self._grid.setAlignment(Qt.AlignmentFlag.AlignTop)
        scroll.setWidget(content)

        root_layout.addWidget(scroll)

    def refresh(self) -> None:
        while self._grid.count():
            item = self._grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        cards = self._controller.cards()
        if not cards:
            empty_label = QLabel("No hay referencias registradas.", self)
            empty_label.setObjectName("emptyLabel")
            self._grid.addWidget(empty_label, 0, 0)
            return

        for index, card in enumerate(cards):
            row, column = divmod(index, self.COLUMNS)
            self._grid.addWidget(self._build_card(card), row, column)

    def _build_card(self, card: ReferenceCard) -> QFrame:
        frame = QFrame(self)
        frame.setObjectName("referenceCard")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(6)

        header_layout = QHBoxLayout()
        title_label = QLabel(card.referencia, frame)
        title_label.setObjectName("cardTitle")
        status_label = QLabel(card.status_label, frame)
        status_label.setObjectName("statusUnlocked" if card.unlocked else "statusLocked")
        header_layout.addWidget(title_label)
        header_layout.addStretch(1)
        header_layout.addWidget(status_label)
        layout.addLayout(header_layout)

        if card.imagen_url:
            image_label = QLabel(f'<a href="{card.imagen_url}">Ver imagen</a>', frame)
            image_label.setOpenExternalLinks(True)
            layout.addWidget(image_label)

        for caption, value in (
            ("Color", card.color or "-"),
            ("Curva", card.curva),
            ("Distribución", card.distribucion),
            ("Ubicación", card.ubicacion),
            ("Lanzamiento", card.launch_label),
            ("Desbloqueo", card.unlock_label),
        ):
            line = QLabel(f"<b>{caption}:</b> {value}", frame)
            line.setObjectName("cardLine")
            layout.addWidget(line)

        edit_button = QPushButton("Editar", frame)
        edit_button.setObjectName("linkButton")
        edit_button.clicked.connect(lambda _checked=False, reference_id=card.id: self._on_edit(reference_id))
        layout.addWidget(edit_button, alignment=Qt.AlignmentFlag.AlignRight)
        return frame
