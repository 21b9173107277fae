"""
History picker dialog.

A line edit over a result list. Every edit re-queries the open search
session; Enter or a double-click picks the highlighted url.
"""
from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from core.logging import get_logger
from history.exceptions import HistSiftError
from history.normalize import HistoryEntry
from history.session import CandidateSource

LOGGER = get_logger("app.picker")

URL_ROLE = Qt.UserRole


class HistoryPickerDialog(QDialog):
    """Incremental search over one browser's history."""

    def __init__(
        self,
        candidates: CandidateSource,
        title: str = "Browser History",
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle(title)
        self._candidates = candidates
        self.selected_url: Optional[str] = None
        self.error: Optional[HistSiftError] = None

        layout = QVBoxLayout()

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search title or URL…")
        self.search_edit.textChanged.connect(self.refresh)
        self.search_edit.returnPressed.connect(self._accept_current)
        layout.addWidget(self.search_edit)

        self.list_widget = QListWidget()
        self.list_widget.itemActivated.connect(self._accept_item)
        layout.addWidget(self.list_widget)

        self.status_label = QLabel()
        layout.addWidget(self.status_label)

        self.setLayout(layout)
        self.resize(720, 480)

    def refresh(self, text: str = "") -> None:
        """Re-run the search for ``text`` and repopulate the list."""
        try:
            entries = self._candidates(text)
        except HistSiftError as e:
            LOGGER.warning("Search failed: %s", e)
            self.error = e
            self.reject()
            return
        self._populate(entries)

    def _populate(self, entries: List[HistoryEntry]) -> None:
        self.list_widget.clear()
        for entry in entries:
            label = f"{entry.title}\n{entry.url}" if entry.title else entry.url
            item = QListWidgetItem(label)
            item.setData(URL_ROLE, entry.url)
            item.setToolTip(entry.url)
            self.list_widget.addItem(item)
        if entries:
            self.list_widget.setCurrentRow(0)
        self.status_label.setText(f"{len(entries)} result(s)")

    def _accept_current(self) -> None:
        item = self.list_widget.currentItem()
        if item is not None:
            self._accept_item(item)

    def _accept_item(self, item: QListWidgetItem) -> None:
        self.selected_url = item.data(URL_ROLE)
        self.accept()

    def keyPressEvent(self, event) -> None:
        # Up/Down move through results while focus stays in the line edit
        if event.key() in (Qt.Key_Up, Qt.Key_Down) and self.list_widget.count():
            row = self.list_widget.currentRow()
            step = -1 if event.key() == Qt.Key_Up else 1
            row = max(0, min(self.list_widget.count() - 1, row + step))
            self.list_widget.setCurrentRow(row)
            return
        super().keyPressEvent(event)


def _ensure_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def pick_with_dialog(
    candidates: CandidateSource,
    title: str = "Browser History",
    initial_text: str = "",
) -> Optional[str]:
    """
    Show the picker and return the chosen url, or None when cancelled.

    Raises:
        HistSiftError: A search inside the dialog failed
    """
    _ensure_app()
    dialog = HistoryPickerDialog(candidates, title=title)
    if initial_text:
        # textChanged triggers the first search
        dialog.search_edit.setText(initial_text)
    else:
        dialog.refresh("")
    if dialog.error is None:
        dialog.exec()
    if dialog.error is not None:
        raise dialog.error
    return dialog.selected_url


def open_url(url: str) -> bool:
    """Hand a url to the desktop's default browser."""
    _ensure_app()
    return QDesktopServices.openUrl(QUrl(url))


def show_error(message: str, parent: Optional[QWidget] = None) -> None:
    _ensure_app()
    QMessageBox.warning(parent, "HistSift", message)
