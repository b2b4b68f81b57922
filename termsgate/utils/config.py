"""
Configuration Management Module

Handles loading and validating deployment configuration from config.json.
Merges the file over defaults and freezes the result into an AppConfig that
is passed explicitly to every component.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from termsgate.core.errors import ConfigError
from termsgate.utils import constants

logger = logging.getLogger("termsgate")


def default_config() -> dict:
    return {
        "organization": {
            "name": "Contoso",
        },
        "terms": {
            "version": constants.DEFAULT_TERMS_VERSION,
            "file": "TERMS_OF_USE.md",
        },
        "store": {
            "root": "state",
        },
        "prompt": {
            "ui": constants.UI_CONSOLE,
            "block_input": False,
            "max_dismissals": constants.DEFAULT_MAX_DISMISSALS,
            "reminder_hours": constants.DEFAULT_REMINDER_HOURS,
        },
        "schedule": {
            "task_name": constants.DEFAULT_TASK_NAME,
            "triggers": [
                constants.TRIGGER_LOGON,
                constants.TRIGGER_STARTUP,
                constants.TRIGGER_REMINDER,
            ],
            "file": "configs/schedule_config.json",
            "autostart_dir": "autostart",
        },
        "logging": {
            "dir": "outputs/logs",
        },
    }


def resolve_config_file(config_file=None) -> Path:
    """Pick the config path: explicit argument, then environment, then default."""
    if config_file:
        return Path(config_file).expanduser().resolve()
    env_path = os.environ.get(constants.CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser().resolve()
    return constants.CONFIG_FILE


def load_config(config_file=None) -> dict:
    """
    Load configuration from config.json with sensible defaults

    Returns:
        dict: Configuration dictionary
    """
    config_path = resolve_config_file(config_file)
    defaults = default_config()

    if not config_path.exists():
        _save_config(config_path, defaults)
        return defaults

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ValueError("top-level JSON value must be an object")
        return _deep_merge(defaults, config)
    except json.JSONDecodeError as e:
        logger.error(f"Config file corrupted: {e}. Using defaults.")
        return defaults
    except (OSError, ValueError) as e:
        logger.error(f"Error loading config: {e}. Using defaults.")
        return defaults


def _deep_merge(defaults: dict, override: dict) -> dict:
    """
    Deep merge override config into defaults, preserving new defaults

    Args:
        defaults: Default configuration
        override: User-provided configuration

    Returns:
        dict: Merged configuration
    """
    result = defaults.copy()
    for key, value in override.items():
        if key in defaults and isinstance(defaults[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(defaults[key], value)
        else:
            result[key] = value
    return result


def _save_config(config_file: Path, config: dict):
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=4)
    except OSError as e:
        # Unprivileged agents may not own the config directory
        logger.error(f"Failed to save config: {e}")


@dataclass(frozen=True)
class AppConfig:
    """Immutable deployment settings shared by every component."""
    organization: str
    terms_version: str
    terms_file: Path
    store_root: Path
    ui: str
    block_input: bool
    max_dismissals: int
    reminder_hours: int
    task_name: str
    triggers: Tuple[str, ...]
    schedule_file: Path
    autostart_dir: Path
    log_dir: Path
    config_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, raw: dict, base_dir: Optional[Path] = None,
                  config_file: Optional[Path] = None) -> 'AppConfig':
        base = Path(base_dir) if base_dir else constants.BASE_DIR

        def section(name):
            value = raw.get(name, {})
            if not isinstance(value, dict):
                raise ConfigError(f"'{name}' section must be an object")
            return value

        def path_value(value, label):
            if not value:
                raise ConfigError(f"{label} must be set")
            path = Path(str(value)).expanduser()
            return path if path.is_absolute() else base / path

        def int_value(value, label):
            if isinstance(value, bool):
                raise ConfigError(f"{label} must be an integer")
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise ConfigError(f"{label} must be an integer, got {value!r}")
            if number < 0:
                raise ConfigError(f"{label} must be >= 0, got {number}")
            return number

        def bool_value(value, label):
            if not isinstance(value, bool):
                raise ConfigError(f"{label} must be true or false, got {value!r}")
            return value

        org = section('organization')
        terms = section('terms')
        store = section('store')
        prompt = section('prompt')
        schedule = section('schedule')
        log_cfg = section('logging')

        organization = str(org.get('name') or '').strip()
        if not organization:
            raise ConfigError("organization.name must be set")
        terms_version = str(terms.get('version') or '').strip()
        if not terms_version:
            raise ConfigError("terms.version must be set")

        ui = str(prompt.get('ui', constants.UI_CONSOLE)).lower()
        if ui not in constants.VALID_UIS:
            raise ConfigError(f"prompt.ui must be one of {', '.join(constants.VALID_UIS)}")

        reminder_hours = int_value(prompt.get('reminder_hours', constants.DEFAULT_REMINDER_HOURS),
                                   'prompt.reminder_hours')
        if reminder_hours == 0:
            raise ConfigError("prompt.reminder_hours must be at least 1")

        triggers = schedule.get('triggers', [])
        if isinstance(triggers, str):
            triggers = [triggers]

        return cls(
            organization=organization,
            terms_version=terms_version,
            terms_file=path_value(terms.get('file'), 'terms.file'),
            store_root=path_value(store.get('root'), 'store.root'),
            ui=ui,
            block_input=bool_value(prompt.get('block_input', False), 'prompt.block_input'),
            max_dismissals=int_value(prompt.get('max_dismissals', constants.DEFAULT_MAX_DISMISSALS),
                                     'prompt.max_dismissals'),
            reminder_hours=reminder_hours,
            task_name=str(schedule.get('task_name') or constants.DEFAULT_TASK_NAME),
            triggers=tuple(str(t).lower() for t in triggers),
            schedule_file=path_value(schedule.get('file'), 'schedule.file'),
            autostart_dir=path_value(schedule.get('autostart_dir'), 'schedule.autostart_dir'),
            log_dir=path_value(log_cfg.get('dir'), 'logging.dir'),
            config_file=config_file,
        )


def get_app_config(config_file=None) -> AppConfig:
    """Load config.json and freeze it; paths resolve against the project root."""
    config_path = resolve_config_file(config_file)
    raw = load_config(config_path)
    # configs/config.json -> project root
    base_dir = config_path.parent.parent if config_path.parent.name == 'configs' else config_path.parent
    return AppConfig.from_dict(raw, base_dir=base_dir, config_file=config_path)
