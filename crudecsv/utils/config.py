"""Configuration settings for the application."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Default configuration structure
DEFAULT_CONFIG = {
    'template_path': ''  # Template file, or a folder containing template.csv
}


class Config:
    """Configuration manager."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration."""
        self.config_dir = Path(config_dir) if config_dir else Path.home() / '.config' / 'crudecsv'
        self.config_file = self.config_dir / 'config.json'
        self.config = {}  # Start empty, load will merge with defaults
        self.load_config()
        self._ensure_defaults()

    def _ensure_defaults(self):
        """Ensure all default keys exist in the loaded config."""
        missing = [key for key in DEFAULT_CONFIG if key not in self.config]
        for key in missing:
            self.config[key] = DEFAULT_CONFIG[key]
        if missing:
            self.save_config()

    def load_config(self):
        """Load configuration from file."""
        try:
            if self.config_file.exists():
                with open(self.config_file, 'r') as f:
                    loaded = json.load(f)
                self.config = loaded if isinstance(loaded, dict) else dict(DEFAULT_CONFIG)
            else:
                # If no config file, start with defaults
                self.config = dict(DEFAULT_CONFIG)
                self.save_config()
        except json.JSONDecodeError:
            logger.warning("Error decoding config file. Starting with defaults.")
            self.config = dict(DEFAULT_CONFIG)
        except OSError as e:
            # No save here to avoid overwriting a potentially recoverable file
            logger.warning(f"Error loading config: {e}. Starting with defaults.")
            self.config = dict(DEFAULT_CONFIG)

    def save_config(self):
        """Save configuration to file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=4)
        except OSError as e:
            logger.error(f"Error saving config: {e}")

    def get_template_path(self) -> str:
        """Get the configured template path, or '' if none."""
        value = self.config.get('template_path', '')
        return value if isinstance(value, str) else ''

    def set_template_path(self, path: str):
        """Set the template path and persist it."""
        self.config['template_path'] = path or ''
        self.save_config()
