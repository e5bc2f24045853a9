"""
Configuration management for treefs.

Handles loading and saving user configuration from:
- $TREEFS_CONFIG, if set
- XDG config directory: ~/.config/treefs/config.json
- Fallback: ~/.treefs/config.json
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TREEFS_CONFIG"


@dataclass
class ShellConfig:
    """Interactive shell options."""
    verbose: bool = False
    history: bool = True
    history_file: Optional[str] = None
    prompt_style: str = "ansicyan bold"


@dataclass
class StorageConfig:
    """Saved tree settings."""
    default_save_path: Optional[str] = None


@dataclass
class TreefsConfig:
    """Main treefs configuration."""
    shell: ShellConfig = field(default_factory=ShellConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "shell": asdict(self.shell),
            "storage": asdict(self.storage),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TreefsConfig':
        """Create from dictionary."""
        shell_data = data.get("shell", {})
        storage_data = data.get("storage", {})
        return cls(
            shell=ShellConfig(**shell_data),
            storage=StorageConfig(**storage_data),
        )

    def history_path(self) -> Optional[Path]:
        """Path of the shell history file, or None if history is off."""
        if not self.shell.history:
            return None
        if self.shell.history_file:
            return Path(self.shell.history_file).expanduser()
        return get_config_path().parent / "history"


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. $TREEFS_CONFIG if set
    2. $XDG_CONFIG_HOME/treefs/config.json (usually ~/.config/treefs/config.json)
    3. Fallback: ~/.treefs/config.json

    Returns:
        Path to config file
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()

    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "treefs"
    else:
        config_dir = Path.home() / ".treefs"

    return config_dir / "config.json"


def load_config() -> TreefsConfig:
    """
    Load configuration from file.

    Returns:
        TreefsConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return TreefsConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return TreefsConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError, AttributeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Using default configuration")
        return TreefsConfig()


def save_config(config: TreefsConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.debug(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(TreefsConfig())
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    shell_verbose: Optional[bool] = None,
    shell_history: Optional[bool] = None,
    shell_history_file: Optional[str] = None,
    shell_prompt_style: Optional[str] = None,
    storage_default_save_path: Optional[str] = None,
) -> TreefsConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Returns:
        The updated configuration
    """
    config = load_config()

    if shell_verbose is not None:
        config.shell.verbose = shell_verbose
    if shell_history is not None:
        config.shell.history = shell_history
    if shell_history_file is not None:
        config.shell.history_file = shell_history_file
    if shell_prompt_style is not None:
        config.shell.prompt_style = shell_prompt_style

    if storage_default_save_path is not None:
        config.storage.default_save_path = storage_default_save_path

    save_config(config)
    return config
