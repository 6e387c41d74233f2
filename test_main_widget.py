#!/usr/bin/env python3
"""
Test script for the main window

Drives the vault window offscreen with a stand-in name dialog, and checks
file creation, tab bookkeeping and the settings path.
"""

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

sys.path.insert(0, str(Path(__file__).parent))

from PyQt6.QtWidgets import QApplication, QDialog

import crudecsv.widgets.main_widget as main_widget_module
from crudecsv.utils.config import Config
from crudecsv.utils.csv_creator import INVALID_FOLDER_NOTICE
from crudecsv.utils.template_resolver import DEFAULT_CSV_CONTENT
from crudecsv.utils.vault import Vault
from crudecsv.widgets.main_widget import MainWidget
from crudecsv.widgets.settings_dialog import SettingsDialog


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def name_dialog_returning(name, accepted=True):
    """Stand-in for FileNameDialog that answers without user input"""

    class ScriptedDialog:
        def __init__(self, parent=None):
            pass

        def exec(self):
            if accepted:
                return QDialog.DialogCode.Accepted
            return QDialog.DialogCode.Rejected

        def get_file_name(self):
            return name

    return ScriptedDialog


@pytest.fixture
def window(qapp, tmp_path):
    root = tmp_path / "vault"
    (root / "notes").mkdir(parents=True)
    (root / "templates").mkdir()
    (root / "templates" / "template.csv").write_text("id,title\n", encoding='utf-8')
    (root / "notes" / "todo.csv").write_text("task,done\nwrite,no\n", encoding='utf-8')
    widget = MainWidget(Vault(root), Config(tmp_path / "config"))
    yield widget
    widget.close()


def test_create_new_csv_opens_a_tab(window, monkeypatch):
    monkeypatch.setattr(main_widget_module, "FileNameDialog", name_dialog_returning("report"))
    window.create_new_csv()

    assert window.vault.read("report.csv") == DEFAULT_CSV_CONTENT
    assert "report.csv" in window.views
    assert window.active_file() == "report.csv"
    assert window.status_bar.currentMessage() == "Created report.csv"


def test_create_next_to_active_file_with_configured_template(window, monkeypatch):
    window.config.set_template_path("templates")
    window.open_file("notes/todo.csv")
    monkeypatch.setattr(main_widget_module, "FileNameDialog", name_dialog_returning("ideas"))
    window.create_new_csv()

    assert window.vault.read("notes/ideas.csv") == "id,title\n"
    assert window.active_file() == "notes/ideas.csv"


def test_cancelled_name_creates_nothing(window, monkeypatch):
    monkeypatch.setattr(main_widget_module, "FileNameDialog",
                        name_dialog_returning("unused", accepted=False))
    window.create_new_csv()
    assert not window.vault.exists("unused.csv")
    assert window.views == {}


def test_missing_folder_shows_notice_without_asking(window, monkeypatch):
    def fail_if_asked(parent=None):
        raise AssertionError("name dialog should not open")

    monkeypatch.setattr(main_widget_module, "FileNameDialog", fail_if_asked)
    window.create_new_csv("nowhere")
    assert window.status_bar.currentMessage() == INVALID_FOLDER_NOTICE


def test_tab_title_tracks_unsaved_edits(window):
    view = window.open_file("notes/todo.csv")
    index = window.tabs.indexOf(view)
    assert window.tabs.tabText(index) == "todo.csv"

    view.add_row()
    assert window.tabs.tabText(index) == "todo.csv *"

    assert view.save()
    assert window.tabs.tabText(index) == "todo.csv"
    assert window.status_bar.currentMessage() == "Saved todo.csv"


def test_open_same_file_reuses_tab(window):
    first = window.open_file("notes/todo.csv")
    assert window.open_file("notes/todo.csv") is first
    assert window.tabs.count() == 1


def test_close_tab_flushes_edits(window):
    view = window.open_file("notes/todo.csv")
    view.add_column()
    window.close_tab(window.tabs.indexOf(view))
    assert window.views == {}
    assert window.vault.read("notes/todo.csv").splitlines()[0] == "task,done,"


def test_settings_panel_changes_template_for_next_file(window, monkeypatch):
    dialog = SettingsDialog(window.config, window)
    dialog.template_path_input.setText("templates/template.csv")
    dialog.save_config()

    monkeypatch.setattr(main_widget_module, "FileNameDialog", name_dialog_returning("fresh"))
    window.create_new_csv("/")
    assert window.vault.read("fresh.csv") == "id,title\n"
