"""Main application widget."""

import logging
from typing import Dict, Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QSplitter,
    QTreeView, QTabWidget, QMenu, QStatusBar, QDialog
)
from PyQt6.QtGui import QFileSystemModel
from PyQt6.QtCore import Qt, QDir

from ..utils.config import Config
from ..utils.csv_creator import CsvFileCreator, INVALID_FOLDER_NOTICE
from ..utils.template_resolver import TemplateResolver
from ..utils.vault import Vault, CSV_EXTENSIONS, is_csv_path
from .csv_grid import CsvGridView
from .file_name_dialog import FileNameDialog
from .settings_dialog import SettingsDialog

logger = logging.getLogger(__name__)


class MainWidget(QWidget):
    def __init__(self, vault: Vault, config: Optional[Config] = None, parent=None):
        """Initialize the main widget"""
        super().__init__(parent)
        self.vault = vault
        self.config = config or Config()
        self.views: Dict[str, CsvGridView] = {}  # Open views by vault path

        self.setWindowTitle(f"Crude CSV - {self.vault.root.name}")
        self.resize(1100, 700)
        self.init_ui()

    def init_ui(self):
        """Initialize the user interface"""
        layout = QVBoxLayout(self)

        toolbar_layout = QHBoxLayout()
        self.new_csv_btn = QPushButton("New CSV")
        self.new_csv_btn.setToolTip("Create a new CSV file next to the active file")
        self.new_csv_btn.clicked.connect(lambda: self.create_new_csv())
        toolbar_layout.addWidget(self.new_csv_btn)

        self.settings_btn = QPushButton("Settings")
        self.settings_btn.clicked.connect(self.show_settings)
        toolbar_layout.addWidget(self.settings_btn)
        toolbar_layout.addStretch()
        layout.addLayout(toolbar_layout)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Left panel - vault tree
        self.fs_model = QFileSystemModel()
        self.fs_model.setRootPath(str(self.vault.root))
        self.fs_model.setFilter(QDir.Filter.AllDirs | QDir.Filter.Files | QDir.Filter.NoDotAndDotDot)
        self.fs_model.setNameFilters([f"*.{ext}" for ext in CSV_EXTENSIONS])
        self.fs_model.setNameFilterDisables(False)

        self.tree = QTreeView()
        self.tree.setModel(self.fs_model)
        self.tree.setRootIndex(self.fs_model.index(str(self.vault.root)))
        for column in range(1, self.fs_model.columnCount()):
            self.tree.hideColumn(column)
        self.tree.setHeaderHidden(True)
        self.tree.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.tree.customContextMenuRequested.connect(self._show_tree_menu)
        self.tree.doubleClicked.connect(self._on_tree_double_clicked)
        splitter.addWidget(self.tree)

        # Right panel - open documents
        self.tabs = QTabWidget()
        self.tabs.setTabsClosable(True)
        self.tabs.tabCloseRequested.connect(self.close_tab)
        splitter.addWidget(self.tabs)

        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 3)
        layout.addWidget(splitter)

        self.status_bar = QStatusBar()
        layout.addWidget(self.status_bar)

    def show_notice(self, message: str):
        self.status_bar.showMessage(message, 4000)

    def active_file(self) -> Optional[str]:
        """Vault path of the document in the current tab"""
        view = self.tabs.currentWidget()
        if isinstance(view, CsvGridView):
            return view.file_path
        return None

    # --- Tree ---

    def _vault_path_for_index(self, index) -> Optional[str]:
        if not index.isValid():
            return None
        return self.vault.relative(self.fs_model.filePath(index))

    def _show_tree_menu(self, pos):
        """Folder context menu with a New CSV entry"""
        index = self.tree.indexAt(pos)
        if index.isValid() and not self.fs_model.isDir(index):
            return
        folder = self._vault_path_for_index(index) or ''

        menu = QMenu(self)
        action = menu.addAction("New CSV")
        action.triggered.connect(lambda: self.create_new_csv(folder or '/'))
        menu.exec(self.tree.viewport().mapToGlobal(pos))

    def _on_tree_double_clicked(self, index):
        path = self._vault_path_for_index(index)
        if path and is_csv_path(path) and not self.fs_model.isDir(index):
            self.open_file(path)

    # --- Documents ---

    def open_file(self, path: str) -> Optional[CsvGridView]:
        """Open a CSV document in a tab, reusing an existing tab"""
        if path in self.views:
            self.tabs.setCurrentWidget(self.views[path])
            return self.views[path]

        view = CsvGridView(self.vault, path)
        view.notice.connect(self.show_notice)
        if not view.load_file():
            view.deleteLater()
            return None

        view.data_changed.connect(lambda: self._mark_tab(view, True))
        view.saved.connect(lambda _path: self._on_view_saved(view))

        self.views[path] = view
        self.tabs.addTab(view, view.get_display_text())
        self.tabs.setTabToolTip(self.tabs.indexOf(view), path)
        self.tabs.setCurrentWidget(view)
        return view

    def _mark_tab(self, view: CsvGridView, modified: bool):
        """Trailing '*' on the tab title while edits are unsaved"""
        index = self.tabs.indexOf(view)
        if index < 0:
            return
        title = view.get_display_text()
        self.tabs.setTabText(index, f"{title} *" if modified else title)

    def _on_view_saved(self, view: CsvGridView):
        self._mark_tab(view, False)
        self.status_bar.showMessage(f"Saved {view.get_display_text()}", 2000)

    def close_tab(self, index: int):
        view = self.tabs.widget(index)
        self.tabs.removeTab(index)
        if isinstance(view, CsvGridView):
            view.close_view()
            self.views.pop(view.file_path, None)
            view.deleteLater()

    def _make_creator(self) -> CsvFileCreator:
        """Creator using the current template path setting"""
        resolver = TemplateResolver.for_vault(self.vault, self.config.get_template_path())
        return CsvFileCreator(self.vault, resolver)

    def create_new_csv(self, folder_path: Optional[str] = None):
        """Ask for a name and create a CSV in the given or active folder"""
        creator = self._make_creator()
        target_folder = creator.resolve_target_folder(folder_path, self.active_file())
        if target_folder is None:
            self.show_notice(INVALID_FOLDER_NOTICE)
            return

        dialog = FileNameDialog(self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return

        path, message = creator.create_csv(dialog.get_file_name(), target_folder)
        self.show_notice(message)
        if path:
            self.open_file(path)

    def show_settings(self):
        SettingsDialog(self.config, self).exec()

    def closeEvent(self, event):
        """Flush and close every open document"""
        for index in reversed(range(self.tabs.count())):
            self.close_tab(index)
        super().closeEvent(event)
