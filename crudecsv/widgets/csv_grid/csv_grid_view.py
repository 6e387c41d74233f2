#!/usr/bin/env python3
"""
CSV Grid View - Editable grid for one open CSV document

Shows the document as a table of line edits with row numbers and a small
toolbar for adding and removing rows and columns. Edits are written back to
the vault through a debounced save.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem,
    QPushButton, QLabel, QStatusBar, QAbstractItemView
)
from PyQt6.QtCore import Qt, pyqtSignal, QTimer, QFileSystemWatcher
from PyQt6.QtGui import QKeySequence, QShortcut

from ...utils.vault import Vault
from .csv_grid_model import CsvGridModel

logger = logging.getLogger(__name__)

SAVE_DELAY_MS = 500
NOTICE_TIMEOUT_MS = 4000


class ViewState(Enum):
    """Lifecycle of an open document view"""
    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"
    EDITED = "edited"
    CLOSED = "closed"


class CsvGridView(QWidget):
    """Grid editor bound to a single CSV document"""

    notice = pyqtSignal(str)        # Emitted for short user-facing messages
    data_changed = pyqtSignal()     # Emitted when the grid is modified
    saved = pyqtSignal(str)         # Emitted with the vault path after a write

    def __init__(self, vault: Optional[Vault] = None, file_path: Optional[str] = None,
                 parent=None, save_delay_ms: int = SAVE_DELAY_MS):
        super().__init__(parent)
        self.vault = vault
        self.file_path = file_path
        self.model = CsvGridModel(notify=self.show_notice)
        self.state = ViewState.UNINITIALIZED
        self._refreshing = False
        self._last_written: Optional[str] = None

        self._save_timer = QTimer(self)
        self._save_timer.setSingleShot(True)
        self._save_timer.setInterval(save_delay_ms)
        self._save_timer.timeout.connect(self.save)

        self.watcher = QFileSystemWatcher(self)
        self.watcher.fileChanged.connect(self._on_file_changed)

        self.init_ui()
        self.update_ui_state()

    def init_ui(self):
        """Initialize the user interface"""
        layout = QVBoxLayout(self)
        layout.setSpacing(5)

        self.create_toolbar(layout)

        self.table = QTableWidget()
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setAlternatingRowColors(True)
        self.table.setWordWrap(False)
        self.table.horizontalHeader().setVisible(False)
        self.table.verticalHeader().setVisible(True)  # Row numbers
        self.table.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.table)

        self.status_bar = QStatusBar()
        self.status_label = QLabel("")
        self.status_bar.addPermanentWidget(self.status_label)
        layout.addWidget(self.status_bar)

        self.setup_shortcuts()

    def create_toolbar(self, layout):
        """Create toolbar with row and column operations"""
        toolbar_layout = QHBoxLayout()

        buttons = [
            ("+R", "Add row", self.add_row),
            ("-R", "Remove last row", self.remove_row),
            ("+C", "Add column", self.add_column),
            ("-C", "Remove last column", self.remove_column),
        ]
        self.toolbar_buttons = {}
        for text, tooltip, handler in buttons:
            btn = QPushButton(text)
            btn.setObjectName("csv-btn")
            btn.setToolTip(tooltip)
            btn.setMaximumWidth(40)
            btn.clicked.connect(handler)
            toolbar_layout.addWidget(btn)
            self.toolbar_buttons[text] = btn

        toolbar_layout.addStretch()
        layout.addLayout(toolbar_layout)

    def setup_shortcuts(self):
        """Setup keyboard shortcuts"""
        QShortcut(QKeySequence("Ctrl+S"), self, self.save)
        QShortcut(QKeySequence("Ctrl+Shift+R"), self, self.add_row)
        QShortcut(QKeySequence("Ctrl+Shift+C"), self, self.add_column)

    def get_display_text(self) -> str:
        if self.file_path:
            return self.file_path.rsplit('/', 1)[-1]
        return "CSV"

    # --- Document lifecycle ---

    def load_file(self) -> bool:
        """Read the bound document from the vault and show it"""
        if not self.vault or not self.file_path:
            return False
        try:
            text = self.vault.read(self.file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {self.file_path}: {e}")
            self.show_notice(f"Failed to open {self.get_display_text()}")
            return False

        self.set_view_data(text, True)
        absolute = str(self.vault.absolute(self.file_path))
        if absolute not in self.watcher.files():
            self.watcher.addPath(absolute)
        return True

    def set_view_data(self, data: str, clear: bool = False):
        """Show new raw text for the document"""
        if self.state == ViewState.CLOSED:
            logger.debug("Ignoring data for a closed view")
            return
        if clear:
            self.clear()
        self.model.load_text(data)
        self.state = ViewState.LOADED
        self.refresh()

    def get_view_data(self) -> str:
        """Current grid as raw text"""
        return self.model.to_text()

    def clear(self):
        self.model.clear()
        self._refreshing = True
        try:
            self.table.clear()
            self.table.setRowCount(0)
            self.table.setColumnCount(0)
        finally:
            self._refreshing = False

    def close_view(self):
        """Flush pending edits and tear the view down"""
        if self.state == ViewState.CLOSED:
            return
        if self._save_timer.isActive():
            self.save()
        self._save_timer.stop()
        if self.watcher.files():
            self.watcher.removePaths(self.watcher.files())
        self.clear()
        self.state = ViewState.CLOSED
        self.update_ui_state()

    # --- Rendering ---

    def refresh(self):
        """Rebuild the table from the grid"""
        rows = self.model.rows
        width = max((len(row) for row in rows), default=0)

        self._refreshing = True
        try:
            self.table.clear()
            self.table.setRowCount(len(rows))
            self.table.setColumnCount(width)
            self.table.setVerticalHeaderLabels([str(r + 1) for r in range(len(rows))])

            for r, row in enumerate(rows):
                for c in range(width):
                    if c < len(row):
                        item = QTableWidgetItem(row[c])
                    else:
                        # Short row from ragged input; nothing to edit here
                        item = QTableWidgetItem("")
                        item.setFlags(Qt.ItemFlag.NoItemFlags)
                    self.table.setItem(r, c, item)
        finally:
            self._refreshing = False

        self.update_ui_state()

    def update_ui_state(self):
        """Update buttons and status text from the grid"""
        is_open = self.state != ViewState.CLOSED
        for btn in self.toolbar_buttons.values():
            btn.setEnabled(is_open)

        if is_open and self.model.rows:
            info = self.model.get_structure_info()
            changes_text = " (modified)" if info['has_changes'] else ""
            self.status_label.setText(f"{info['rows']} rows × {info['columns']} columns{changes_text}")
        else:
            self.status_label.setText("")

    def show_notice(self, message: str):
        self.status_bar.showMessage(message, NOTICE_TIMEOUT_MS)
        self.notice.emit(message)

    # --- Edits ---

    def _apply_structural(self, operation: Callable[[], bool]) -> bool:
        if self.state == ViewState.CLOSED:
            logger.debug("Ignoring edit on a closed view")
            return False
        if not operation():
            return False
        self.state = ViewState.EDITED
        self.refresh()
        self.request_save()
        self.data_changed.emit()
        return True

    def add_row(self) -> bool:
        return self._apply_structural(self.model.add_row)

    def remove_row(self) -> bool:
        return self._apply_structural(self.model.remove_row)

    def add_column(self) -> bool:
        return self._apply_structural(self.model.add_column)

    def remove_column(self) -> bool:
        return self._apply_structural(self.model.remove_column)

    def _on_item_changed(self, item: QTableWidgetItem):
        """Cell edits update the grid and save, without a re-render"""
        if self._refreshing or self.state == ViewState.CLOSED:
            return
        if self.model.set_cell(item.row(), item.column(), item.text()):
            self.state = ViewState.EDITED
            self.update_ui_state()
            self.request_save()
            self.data_changed.emit()

    # --- Saving ---

    def request_save(self):
        """Schedule a save; bursts of edits collapse into one write"""
        if self.vault and self.file_path:
            self._save_timer.start()

    def save(self) -> bool:
        """Write the grid to the vault now"""
        self._save_timer.stop()
        if not self.vault or not self.file_path or self.state == ViewState.CLOSED:
            return False

        text = self.get_view_data()
        try:
            self.vault.write(self.file_path, text)
        except OSError as e:
            logger.error(f"Failed to save {self.file_path}: {e}")
            self.show_notice(f"Failed to save {self.get_display_text()}")
            return False

        self._last_written = text
        self.model.has_changes = False
        self.update_ui_state()
        self.saved.emit(self.file_path)
        return True

    def _on_file_changed(self, path: str):
        """Reload when the document changes on disk, except for our own writes"""
        if self.state == ViewState.CLOSED or not self.vault or not self.file_path:
            return

        absolute = str(self.vault.absolute(self.file_path))
        try:
            text = self.vault.read(self.file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not reload {self.file_path}: {e}")
            return
        finally:
            # Editors that replace the file drop it from the watcher
            if absolute not in self.watcher.files() and self.vault.exists(self.file_path):
                self.watcher.addPath(absolute)

        if text == self._last_written or text == self.get_view_data():
            return

        logger.info(f"{self.file_path} changed on disk, reloading")
        self.set_view_data(text, False)
