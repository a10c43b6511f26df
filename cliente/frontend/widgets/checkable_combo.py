"""ComboBox checkeable para elegir uno o dos colores de una referencia."""

from __future__ import annotations

from PyQt6.QtCore import QEvent, Qt, pyqtSignal
from PyQt6.QtGui import QStandardItem, QStandardItemModel
from PyQt6.QtWidgets import QComboBox, QWidget


class CheckableComboBox(QComboBox):
    """ComboBox con items checkeables y un maximo de elementos marcados."""

    checked_items_changed = pyqtSignal()

    def __init__(
        self,
        placeholder: str = "Colores",
        max_checked: int = 1,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._placeholder = placeholder
        self._max_checked = max(1, max_checked)
        self._checked_order: list[str] = []
        self._model = QStandardItemModel(self)
        self.setModel(self._model)
        self.setEditable(True)
        self.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        self.lineEdit().setReadOnly(True)
        self.lineEdit().setPlaceholderText(self._placeholder)
        self.setCurrentIndex(-1)
        self.view().viewport().installEventFilter(self)
        self.view().installEventFilter(self)
        self._update_summary_text()

    @property
    def max_checked(self) -> int:
        return self._max_checked

    def set_max_checked(self, max_checked: int) -> None:
        """Cambia el limite; si sobran marcas se conservan las primeras."""
        self._max_checked = max(1, max_checked)
        if len(self._checked_order) > self._max_checked:
            self.set_checked_items(self._checked_order[: self._max_checked])

    def set_items(self, items: list[str]) -> None:
        """Define los elementos disponibles, todos inicialmente desmarcados."""
        self._model.clear()
        self._checked_order = []
        for label in items:
            text = label.strip()
            if not text:
                continue
            item = QStandardItem(text)
            item.setEditable(False)
            item.setFlags(
                Qt.ItemFlag.ItemIsEnabled
                | Qt.ItemFlag.ItemIsSelectable
                | Qt.ItemFlag.ItemIsUserCheckable
            )
            item.setData(Qt.CheckState.Unchecked, Qt.ItemDataRole.CheckStateRole)
            self._model.appendRow(item)

        self._update_summary_text()
        self.checked_items_changed.emit()

    def checked_items(self) -> list[str]:
        """Elementos marcados en el orden en que se eligieron."""
        return list(self._checked_order)

    def set_checked_items(self, items: list[str]) -> None:
        """Marca los elementos indicados (hasta el maximo) y desmarca el resto."""
        available = {self._model.item(row).text() for row in range(self._model.rowCount())}
        desired: list[str] = []
        for value in items:
            text = value.strip()
            if text and text in available and text not in desired:
                desired.append(text)
        self._checked_order = desired[: self._max_checked]
        self._sync_check_states()

    def eventFilter(self, watched: object, event: QEvent) -> bool:
        """Permite marcar items sin cerrar la lista desplegable."""
        if watched is self.view().viewport() and event.type() == QEvent.Type.MouseButtonRelease:
            index = self.view().indexAt(event.position().toPoint())
            if index.isValid():
                self._toggle_item(index.row())
                return True

        if watched is self.view() and event.type() == QEvent.Type.KeyPress:
            if event.key() in (Qt.Key.Key_Space, Qt.Key.Key_Return, Qt.Key.Key_Enter):
                index = self.view().currentIndex()
                if index.isValid():
                    self._toggle_item(index.row())
                    return True

        return super().eventFilter(watched, event)

    def _toggle_item(self, row: int) -> None:
        """Alterna un item; al superar el maximo se suelta el mas antiguo."""
        item = self._model.item(row)
        if item is None:
            return

        text = item.text()
        if text in self._checked_order:
            self._checked_order.remove(text)
        else:
            self._checked_order.append(text)
            if len(self._checked_order) > self._max_checked:
                self._checked_order.pop(0)
        self._sync_check_states()

    def _sync_check_states(self) -> None:
        for row in range(self._model.rowCount()):
            item = self._model.item(row)
            check_state = (
                Qt.CheckState.Checked
                if item.text() in self._checked_order
                else Qt.CheckState.Unchecked
            )
            item.setCheckState(check_state)

        self._update_summary_text()
        self.checked_items_changed.emit()

    def _update_summary_text(self) -> None:
        """Actualiza texto mostrado en el combo sin cambiar seleccion visible."""
        summary = ", ".join(self._checked_order)
        self.setCurrentIndex(-1)
        self.lineEdit().setText(summary)
        self.lineEdit().setCursorPosition(0)
        self.setToolTip(summary or self._placeholder)
