"""Filesystem-backed access to the documents of a vault."""

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = ['csv']
HOST_CONFIG_DIR = '.obsidian'


class VaultError(Exception):
    """Raised when a vault operation is misused or cannot be carried out."""
    pass


class PathKind(Enum):
    """What a vault path resolves to"""
    FILE = "file"
    FOLDER = "folder"
    ABSENT = "absent"


def join_path(folder: str, name: str) -> str:
    """Join a vault folder and a name with a single '/'."""
    if not folder or folder == "/":
        return name
    return f"{folder.rstrip('/')}/{name.lstrip('/')}"


def is_csv_path(path: str) -> bool:
    return '.' in path and path.rsplit('.', 1)[-1].lower() in CSV_EXTENSIONS


def parent_path(path: str) -> str:
    """Vault-relative parent folder of a path ('' for the root)"""
    path = path.strip('/')
    if '/' not in path:
        return ''
    return path.rsplit('/', 1)[0]


class Vault:
    """Documents under one root folder, addressed by '/'-separated relative paths.

    This is the only place that touches the disk for document content.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            raise VaultError(f"Vault root is not a folder: {self.root}")

    def absolute(self, path: str) -> Path:
        """Map a vault path onto the filesystem, refusing escapes from the root.

        A leading '/' names the vault root, as in the host's own paths.
        Drive-qualified paths and '..' escapes raise VaultError.
        """
        path = (path or '').strip()
        if os.path.isabs(path) and not path.startswith('/'):
            raise VaultError(f"Absolute paths are not vault paths: {path}")
        relative = path.strip('/')
        target = (self.root / relative).resolve() if relative else self.root
        if target != self.root and self.root not in target.parents:
            raise VaultError(f"Path escapes the vault: {path}")
        return target

    def relative(self, path: Union[str, Path]) -> str:
        """Vault path for a filesystem path inside the vault"""
        target = Path(path).resolve()
        if target == self.root:
            return ''
        try:
            return target.relative_to(self.root).as_posix()
        except ValueError:
            raise VaultError(f"Not inside the vault: {path}")

    def kind(self, path: str) -> PathKind:
        try:
            target = self.absolute(path)
        except VaultError as e:
            logger.debug(f"Treating {path!r} as absent: {e}")
            return PathKind.ABSENT
        if target.is_file():
            return PathKind.FILE
        if target.is_dir():
            return PathKind.FOLDER
        return PathKind.ABSENT

    def exists(self, path: str) -> bool:
        return self.kind(path) != PathKind.ABSENT

    def read(self, path: str) -> str:
        """Read the full text of a file"""
        with open(self.absolute(path), 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def write(self, path: str, text: str) -> None:
        """Replace the full text of a file"""
        target = self.absolute(path)
        with open(target, 'w', encoding='utf-8', newline='') as f:
            f.write(text)

    def create(self, path: str, text: str) -> str:
        """Create a new file; fails if anything already lives at the path."""
        if self.exists(path):
            raise VaultError(f"Already exists: {path}")
        target = self.absolute(path)
        if not target.parent.is_dir():
            raise VaultError(f"Folder does not exist: {parent_path(path)}")
        with open(target, 'x', encoding='utf-8', newline='') as f:
            f.write(text)
        return self.relative(target)

    def rename(self, source: str, destination: str) -> str:
        if self.exists(destination):
            raise VaultError(f"Already exists: {destination}")
        target = self.absolute(destination)
        self.absolute(source).rename(target)
        return self.relative(target)

    def delete(self, path: str) -> None:
        self.absolute(path).unlink()


class PluginRegistry:
    """Read-only view of the host's plugin configuration inside a vault.

    Uses the Obsidian layout: community plugins live in plugins/<id>/ and are
    enabled by community-plugins.json; core plugins are switched on in
    core-plugins.json and keep their options in <name>.json.
    """

    def __init__(self, vault: Vault, config_dir: str = HOST_CONFIG_DIR):
        self.vault = vault
        self.config_dir = config_dir

    def _load_json(self, name: str) -> Any:
        path = join_path(self.config_dir, name)
        if self.vault.kind(path) != PathKind.FILE:
            return None
        return json.loads(self.vault.read(path))

    def is_plugin_enabled(self, plugin_id: str) -> bool:
        enabled = self._load_json('community-plugins.json')
        return isinstance(enabled, list) and plugin_id in enabled

    def get_plugin_settings(self, plugin_id: str) -> Optional[Dict[str, Any]]:
        """Settings of an installed, enabled community plugin, else None"""
        plugin_dir = join_path(join_path(self.config_dir, 'plugins'), plugin_id)
        if self.vault.kind(plugin_dir) != PathKind.FOLDER:
            return None
        if not self.is_plugin_enabled(plugin_id):
            logger.debug(f"Plugin {plugin_id} is installed but not enabled")
            return None
        data = self._load_json(f"plugins/{plugin_id}/data.json")
        return data if isinstance(data, dict) else {}

    def is_core_plugin_enabled(self, name: str) -> bool:
        """Core plugins are listed either as a list of names or a name -> bool map"""
        enabled = self._load_json('core-plugins.json')
        if isinstance(enabled, dict):
            return bool(enabled.get(name))
        if isinstance(enabled, list):
            return name in enabled
        return False

    def get_core_plugin_options(self, name: str) -> Dict[str, Any]:
        options = self._load_json(f"{name}.json")
        return options if isinstance(options, dict) else {}
