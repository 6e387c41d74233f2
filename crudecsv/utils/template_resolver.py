"""
Template Resolver - Decide the initial content of a new CSV document

Template sources are tried in order and the first one that yields text wins.
A source that is missing, disabled or unreadable simply declines; when every
source declines the built-in default is used.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .vault import PathKind, PluginRegistry, Vault, join_path

logger = logging.getLogger(__name__)

DEFAULT_CSV_CONTENT = "A,B\n0,0\n1,1"
TEMPLATE_FILE_NAME = "template.csv"
TEMPLATER_PLUGIN_ID = "templater-obsidian"
CORE_TEMPLATES_PLUGIN = "templates"


def read_template_file(vault: Vault, path: str) -> Optional[str]:
    """Text of a vault file, or None if there is no file there"""
    if vault.kind(path) != PathKind.FILE:
        return None
    return vault.read(path)


class TemplateSource(ABC):
    """A place that may provide template text"""

    name = "template source"

    @abstractmethod
    def fetch(self, vault: Vault) -> Optional[str]:
        """Return template text, or None to decline"""
        pass


class ExplicitFileSource(TemplateSource):
    """The configured template path, when it names a file"""

    name = "configured template file"

    def __init__(self, template_path: str):
        self.template_path = (template_path or "").strip()

    def fetch(self, vault: Vault) -> Optional[str]:
        if not self.template_path:
            return None
        return read_template_file(vault, self.template_path)


class ExplicitFolderSource(TemplateSource):
    """template.csv inside the configured template path, when it is not a file"""

    name = "configured template folder"

    def __init__(self, template_path: str):
        self.template_path = (template_path or "").strip()

    def fetch(self, vault: Vault) -> Optional[str]:
        if not self.template_path:
            return None
        if vault.kind(self.template_path) == PathKind.FILE:
            return None
        return read_template_file(vault, join_path(self.template_path, TEMPLATE_FILE_NAME))


class PluginFolderSource(TemplateSource):
    """template.csv inside the templates folder declared by a community plugin"""

    def __init__(self, registry: PluginRegistry,
                 plugin_id: str = TEMPLATER_PLUGIN_ID,
                 folder_setting: str = "templates_folder"):
        self.registry = registry
        self.plugin_id = plugin_id
        self.folder_setting = folder_setting
        self.name = f"{plugin_id} templates folder"

    def fetch(self, vault: Vault) -> Optional[str]:
        settings = self.registry.get_plugin_settings(self.plugin_id)
        if not settings:
            return None
        folder = settings.get(self.folder_setting)
        if not folder or not isinstance(folder, str):
            return None
        return read_template_file(vault, join_path(folder, TEMPLATE_FILE_NAME))


class CoreTemplatesSource(TemplateSource):
    """template.csv inside the folder of the host's built-in templates feature"""

    name = "core templates folder"

    def __init__(self, registry: PluginRegistry, plugin_name: str = CORE_TEMPLATES_PLUGIN):
        self.registry = registry
        self.plugin_name = plugin_name

    def fetch(self, vault: Vault) -> Optional[str]:
        if not self.registry.is_core_plugin_enabled(self.plugin_name):
            return None
        folder = self.registry.get_core_plugin_options(self.plugin_name).get("folder")
        if not folder or not isinstance(folder, str):
            return None
        return read_template_file(vault, join_path(folder, TEMPLATE_FILE_NAME))


def build_default_sources(registry: PluginRegistry, template_path: str = "") -> List[TemplateSource]:
    """Sources in priority order: configured file, configured folder, plugin, core"""
    return [
        ExplicitFileSource(template_path),
        ExplicitFolderSource(template_path),
        PluginFolderSource(registry),
        CoreTemplatesSource(registry),
    ]


class TemplateResolver:
    """Walks template sources in order and falls back to the default content"""

    def __init__(self, vault: Vault, sources: List[TemplateSource],
                 fallback: str = DEFAULT_CSV_CONTENT):
        self.vault = vault
        self.sources = list(sources)
        self.fallback = fallback

    @classmethod
    def for_vault(cls, vault: Vault, template_path: str = "",
                  registry: Optional[PluginRegistry] = None) -> 'TemplateResolver':
        registry = registry or PluginRegistry(vault)
        return cls(vault, build_default_sources(registry, template_path))

    def resolve_template_content(self) -> str:
        """Content for a new CSV document; never fails"""
        for source in self.sources:
            try:
                content = source.fetch(self.vault)
            except Exception as e:
                logger.info(f"Could not read {source.name}: {e}")
                continue

            if content is not None:
                logger.debug(f"Using template from {source.name}")
                return content
            logger.debug(f"No template from {source.name}")

        return self.fallback
