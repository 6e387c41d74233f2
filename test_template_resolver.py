#!/usr/bin/env python3
"""
Test script for template resolution

Builds small vaults on disk with the host's plugin configuration laid out the
way Obsidian stores it, and checks which template a new CSV file would get.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from crudecsv.utils.template_resolver import (
    DEFAULT_CSV_CONTENT,
    CoreTemplatesSource,
    ExplicitFileSource,
    ExplicitFolderSource,
    PluginFolderSource,
    TemplateResolver,
    TemplateSource,
)
from crudecsv.utils.vault import PluginRegistry, Vault


def write_file(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


def enable_templater(root: Path, folder: str, enabled: bool = True):
    """Install the Templater plugin with a templates folder"""
    write_file(root, '.obsidian/plugins/templater-obsidian/data.json',
               json.dumps({'templates_folder': folder, 'trigger_on_file_creation': False}))
    write_file(root, '.obsidian/community-plugins.json',
               json.dumps(['templater-obsidian'] if enabled else ['dataview']))


def enable_core_templates(root: Path, folder: str, enabled: bool = True, as_map: bool = False):
    """Switch on the built-in templates feature with a folder"""
    if as_map:
        core = {'file-explorer': True, 'templates': enabled}
    else:
        core = ['file-explorer'] + (['templates'] if enabled else [])
    write_file(root, '.obsidian/core-plugins.json', json.dumps(core))
    write_file(root, '.obsidian/templates.json', json.dumps({'folder': folder}))


def resolve(root: Path, template_path: str = "") -> str:
    return TemplateResolver.for_vault(Vault(root), template_path).resolve_template_content()


@pytest.fixture
def vault_root(tmp_path):
    root = tmp_path / "vault"
    root.mkdir()
    return root


def test_fallback_without_any_source(vault_root):
    assert resolve(vault_root) == "A,B\n0,0\n1,1"
    assert resolve(vault_root) == DEFAULT_CSV_CONTENT


def test_explicit_file_wins_over_everything(vault_root):
    write_file(vault_root, 'mine/people.csv', "name,age\n")
    write_file(vault_root, 'mine/template.csv', "folder-form")
    write_file(vault_root, 'tpl/template.csv', "templater")
    write_file(vault_root, 'core/template.csv', "core")
    enable_templater(vault_root, 'tpl')
    enable_core_templates(vault_root, 'core')

    assert resolve(vault_root, 'mine/people.csv') == "name,age\n"


def test_template_line_endings_are_kept(vault_root):
    (vault_root / "t.csv").write_bytes(b"a,b\r\n1,2\r\n")
    assert resolve(vault_root, "t.csv") == "a,b\r\n1,2\r\n"


def test_explicit_path_is_trimmed(vault_root):
    write_file(vault_root, 'people.csv', "x,y")
    assert resolve(vault_root, '  people.csv  ') == "x,y"


def test_explicit_folder_uses_template_csv(vault_root):
    write_file(vault_root, 'templates/template.csv', "from,folder")
    assert resolve(vault_root, 'templates') == "from,folder"
    assert resolve(vault_root, 'templates/') == "from,folder"


def test_explicit_folder_without_template_falls_through(vault_root):
    (vault_root / 'empty').mkdir()
    write_file(vault_root, 'tpl/template.csv', "templater")
    enable_templater(vault_root, 'tpl')
    assert resolve(vault_root, 'empty') == "templater"


def test_missing_explicit_path_falls_through(vault_root):
    assert resolve(vault_root, 'does/not/exist.csv') == DEFAULT_CSV_CONTENT


def test_templater_folder_used_when_enabled(vault_root):
    write_file(vault_root, 'Templates/template.csv', "t1,t2")
    enable_templater(vault_root, 'Templates')
    assert resolve(vault_root) == "t1,t2"


def test_templater_installed_but_disabled_is_ignored(vault_root):
    write_file(vault_root, 'Templates/template.csv', "t1,t2")
    enable_templater(vault_root, 'Templates', enabled=False)
    assert resolve(vault_root) == DEFAULT_CSV_CONTENT


def test_templater_wins_over_core_templates(vault_root):
    write_file(vault_root, 'tpl/template.csv', "templater")
    write_file(vault_root, 'core/template.csv', "core")
    enable_templater(vault_root, 'tpl')
    enable_core_templates(vault_root, 'core')
    assert resolve(vault_root) == "templater"


@pytest.mark.parametrize("as_map", [False, True])
def test_core_templates_used_when_enabled(vault_root, as_map):
    write_file(vault_root, 'core/template.csv', "core")
    enable_core_templates(vault_root, 'core', as_map=as_map)
    assert resolve(vault_root) == "core"


@pytest.mark.parametrize("as_map", [False, True])
def test_core_templates_disabled_is_ignored(vault_root, as_map):
    write_file(vault_root, 'core/template.csv', "core")
    enable_core_templates(vault_root, 'core', enabled=False, as_map=as_map)
    assert resolve(vault_root) == DEFAULT_CSV_CONTENT


def test_corrupt_plugin_config_falls_through(vault_root):
    write_file(vault_root, 'core/template.csv', "core")
    write_file(vault_root, '.obsidian/plugins/templater-obsidian/data.json', "{not json")
    write_file(vault_root, '.obsidian/community-plugins.json', '["templater-obsidian"]')
    enable_core_templates(vault_root, 'core')
    assert resolve(vault_root) == "core"


def test_failing_source_is_skipped(vault_root):
    class BrokenSource(TemplateSource):
        name = "broken"

        def fetch(self, vault):
            raise OSError("disk on fire")

    class FixedSource(TemplateSource):
        name = "fixed"

        def fetch(self, vault):
            return "fixed"

    resolver = TemplateResolver(Vault(vault_root), [BrokenSource(), FixedSource()])
    assert resolver.resolve_template_content() == "fixed"


def test_sources_are_tried_in_order_and_stop_at_first_hit(vault_root):
    calls = []

    class RecordingSource(TemplateSource):
        def __init__(self, name, result):
            self.name = name
            self.result = result

        def fetch(self, vault):
            calls.append(self.name)
            return self.result

    resolver = TemplateResolver(Vault(vault_root), [
        RecordingSource("first", None),
        RecordingSource("second", "hit"),
        RecordingSource("third", "never"),
    ])
    assert resolver.resolve_template_content() == "hit"
    assert calls == ["first", "second"]


def test_sources_are_not_cached(vault_root):
    resolver = TemplateResolver.for_vault(Vault(vault_root), 'tpl.csv')
    assert resolver.resolve_template_content() == DEFAULT_CSV_CONTENT
    write_file(vault_root, 'tpl.csv', "appeared")
    assert resolver.resolve_template_content() == "appeared"


def test_individual_sources_decline_on_blank_path(vault_root):
    vault = Vault(vault_root)
    registry = PluginRegistry(vault)
    assert ExplicitFileSource("  ").fetch(vault) is None
    assert ExplicitFolderSource("").fetch(vault) is None
    assert PluginFolderSource(registry).fetch(vault) is None
    assert CoreTemplatesSource(registry).fetch(vault) is None


def test_folder_source_declines_when_path_is_a_file(vault_root):
    write_file(vault_root, 'tpl.csv', "file")
    assert ExplicitFolderSource('tpl.csv').fetch(Vault(vault_root)) is None
