"""
Configuration for gitup.

Settings come from an optional YAML file, then environment variables,
then command-line flags (applied by the CLI).
"""
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


COLOR_MODES = ('auto', 'always', 'never')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigError(ValueError):
    """Raised when a settings file or environment value is invalid."""
    pass


def default_config_path(environ: Optional[Dict[str, str]] = None) -> Path:
    """Location of the per-user settings file."""
    if environ is None:
        environ = os.environ
    config_home = environ.get('XDG_CONFIG_HOME')
    base = Path(config_home) if config_home else Path.home() / '.config'
    return base / 'gitup' / 'config.yaml'


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('1', 'true', 'yes', 'on'):
        return True
    if isinstance(value, str) and value.strip().lower() in ('0', 'false', 'no', 'off'):
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


@dataclass
class GitupConfig:
    """Runtime settings for one gitup invocation."""
    default_remote: str = 'origin'
    search_depth: int = 3
    commit_message_template: str = 'Auto-commit: {timestamp}'
    stash_message_template: str = 'Auto-stashed by gitup {timestamp}'
    color: str = 'auto'
    interactive: bool = True
    auto_stash: bool = False
    auto_publish: bool = False
    git_executable: str = 'git'
    log_level: str = 'WARNING'

    def __post_init__(self):
        self.validate()

    def validate(self):
        """
        Check value ranges and normalise types.

        Raises:
            ConfigError: If any value is out of range
        """
        if not isinstance(self.default_remote, str) or not self.default_remote.strip():
            raise ConfigError("default_remote must be a non-empty string")

        if not isinstance(self.git_executable, str) or not self.git_executable.strip():
            raise ConfigError(f"git_executable must be a non-empty string, got {self.git_executable!r}")

        try:
            self.search_depth = int(self.search_depth)
        except (TypeError, ValueError):
            raise ConfigError(f"search_depth must be an integer, got {self.search_depth!r}")
        if self.search_depth < 1:
            raise ConfigError(f"search_depth must be at least 1, got {self.search_depth}")

        for key in ('commit_message_template', 'stash_message_template'):
            template = getattr(self, key)
            if not isinstance(template, str) or not template.strip():
                raise ConfigError(f"{key} must be a non-empty string")
            try:
                template.format(timestamp='')
            except (KeyError, IndexError, ValueError) as e:
                raise ConfigError(f"{key} may only use the {{timestamp}} placeholder: {e}")

        self.color = str(self.color).lower()
        if self.color not in COLOR_MODES:
            raise ConfigError(f"color must be one of {', '.join(COLOR_MODES)}, got {self.color!r}")

        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")

        for key in ('interactive', 'auto_stash', 'auto_publish'):
            setattr(self, key, _as_bool(key, getattr(self, key)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = 'config') -> 'GitupConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown settings in {source}: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> 'GitupConfig':
        """
        Load settings from a YAML file.

        Args:
            yaml_path: Path to the YAML settings file

        Returns:
            GitupConfig instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigError: If the file is malformed or holds invalid values
        """
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{yaml_path} must contain a mapping of settings")

        return cls.from_dict(data, source=str(yaml_path))

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> 'GitupConfig':
        """Override settings from GITUP_* environment variables and NO_COLOR."""
        if environ is None:
            environ = os.environ

        if environ.get('GITUP_REMOTE'):
            self.default_remote = environ['GITUP_REMOTE']
        if environ.get('GITUP_SEARCH_DEPTH'):
            self.search_depth = environ['GITUP_SEARCH_DEPTH']
        if environ.get('GITUP_COLOR'):
            self.color = environ['GITUP_COLOR']
        elif environ.get('NO_COLOR'):
            # https://no-color.org
            self.color = 'never'
        if environ.get('GITUP_LOG_LEVEL'):
            self.log_level = environ['GITUP_LOG_LEVEL']
        if environ.get('GITUP_GIT'):
            self.git_executable = environ['GITUP_GIT']

        self.validate()
        return self

    def use_color(self, is_tty: bool) -> bool:
        if self.color == 'always':
            return True
        if self.color == 'never':
            return False
        return is_tty


def load_config(config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> GitupConfig:
    """
    Resolve settings for this run.

    Lookup order for the file: explicit path, $GITUP_CONFIG, the per-user
    default location if it exists. Environment overrides are applied on top.

    Raises:
        FileNotFoundError: If an explicitly requested file doesn't exist
        ConfigError: If any setting is invalid
    """
    if environ is None:
        environ = os.environ

    if config_path is None and environ.get('GITUP_CONFIG'):
        config_path = Path(environ['GITUP_CONFIG']).expanduser()

    if config_path is not None:
        config = GitupConfig.from_yaml(config_path)
    elif default_config_path(environ).exists():
        config = GitupConfig.from_yaml(default_config_path(environ))
    else:
        config = GitupConfig()

    return config.apply_env(environ)
