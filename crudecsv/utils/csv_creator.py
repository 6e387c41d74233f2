"""
CSV Creator - Create new CSV documents seeded from a template

The new file is first written under a temporary name and then renamed to the
requested name, so a half-written file never appears under the final name.
"""

import logging
import time
from typing import Optional, Tuple

from .template_resolver import TemplateResolver
from .vault import PathKind, Vault, join_path, parent_path

logger = logging.getLogger(__name__)

INVALID_FOLDER_NOTICE = "Invalid folder. Could not create CSV."
CREATE_FAILED_NOTICE = "Failed to create CSV file."


def normalize_file_name(file_name: str) -> str:
    """Trimmed name with a .csv extension"""
    file_name = (file_name or "").strip()
    return file_name if file_name.endswith('.csv') else f"{file_name}.csv"


class CsvFileCreator:
    """Creates CSV files in a vault"""

    def __init__(self, vault: Vault, resolver: TemplateResolver):
        self.vault = vault
        self.resolver = resolver

    def resolve_target_folder(self, folder_path: Optional[str] = None,
                              active_file: Optional[str] = None) -> Optional[str]:
        """Pick the folder for a new file.

        An explicit folder must exist. Otherwise use the active file's folder,
        falling back to the vault root ('').
        """
        if folder_path:
            if self.vault.kind(folder_path) == PathKind.FOLDER:
                return folder_path.strip('/')
            return None

        if active_file:
            folder = parent_path(active_file)
            if self.vault.kind(folder) == PathKind.FOLDER:
                return folder

        return ''

    def create_csv(self, file_name: str, target_folder: str) -> Tuple[Optional[str], str]:
        """Create <target_folder>/<file_name>.csv.

        Returns (path, message); path is None when nothing was created.
        """
        if not (file_name or "").strip():
            return None, "Please enter a filename"

        final_name = normalize_file_name(file_name)
        final_path = join_path(target_folder, final_name)

        if self.vault.exists(final_path):
            return None, f'File "{final_name}" already exists.'

        temp_path = None
        try:
            content = self.resolver.resolve_template_content()
            temp_path = join_path(target_folder, f"temp-csv-{int(time.time() * 1000)}.csv")
            self.vault.create(temp_path, content)
            created = self.vault.rename(temp_path, final_path)
        except Exception as e:
            logger.error(f"Failed to create CSV {final_path}: {e}")
            self._abandon(temp_path)
            return None, CREATE_FAILED_NOTICE

        logger.info(f"Created {created}")
        return created, f"Created {final_name}"

    def create_new_csv(self, file_name: str, folder_path: Optional[str] = None,
                       active_file: Optional[str] = None) -> Tuple[Optional[str], str]:
        """Creation entry point: resolve the folder, then create the file"""
        target_folder = self.resolve_target_folder(folder_path, active_file)
        if target_folder is None:
            return None, INVALID_FOLDER_NOTICE
        return self.create_csv(file_name, target_folder)

    def _abandon(self, temp_path: Optional[str]):
        """Remove a leftover temporary file, if one was written"""
        if temp_path and self.vault.kind(temp_path) == PathKind.FILE:
            try:
                self.vault.delete(temp_path)
            except OSError as e:
                logger.warning(f"Could not remove temporary file {temp_path}: {e}")
