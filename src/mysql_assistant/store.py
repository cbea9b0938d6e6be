from __future__ import annotations

import json
import logging
import os
from typing import Union

from pydantic import ValidationError as ModelValidationError

from .config import Defaults

logger = logging.getLogger(__name__)

APP_DIR_NAME = "mysql-assistant"
STORE_FILENAME = "config.json"
ENV_CONFIG_PATH = "MYSQL_ASSISTANT_CONFIG"


class ConfigError(RuntimeError):
    pass


class ConfigMissing(FileNotFoundError):
    pass


class ConfigWriteError(ConfigError):
    pass


class ConfigKeyError(ConfigError):
    pass


def _user_config_base() -> str:
    """%APPDATA% on Windows, $XDG_CONFIG_HOME or ~/.config elsewhere."""
    if os.name == "nt":
        return os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
    return os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")


def store_path() -> str:
    """Where the defaults live; $MYSQL_ASSISTANT_CONFIG names the file directly."""
    override = os.environ.get(ENV_CONFIG_PATH)
    if override:
        return os.path.expanduser(override)
    return os.path.join(_user_config_base(), APP_DIR_NAME, STORE_FILENAME)


def load() -> Defaults:
    """
    Read the persisted defaults.

    Raises ConfigMissing when no configuration file exists yet and ConfigError
    when the file is not valid JSON or holds values the model rejects.
    """
    path = store_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, NotADirectoryError):
        raise ConfigMissing(f"No configuration file at {path}")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    try:
        return Defaults.model_validate(data)
    except ModelValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}")


def load_or_default() -> Defaults:
    try:
        return load()
    except ConfigMissing:
        logger.debug("No configuration at %s, using built-in defaults", store_path())
        return Defaults()


def save(defaults: Defaults) -> None:
    path = store_path()
    try:
        cfgdir = os.path.dirname(path)
        if cfgdir:
            os.makedirs(cfgdir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(defaults.model_dump(by_alias=True), f, ensure_ascii=False, indent=2)
    except OSError as e:
        raise ConfigWriteError(f"Could not write {path}: {e}")
    logger.debug("Saved defaults to %s", path)


def coerce_value(raw: str) -> Union[str, bool]:
    """Turn the literal strings "true"/"false" into booleans, leave anything else alone."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    return raw


def set_default(key: str, value: str, defaults: Defaults | None = None) -> Defaults:
    """
    Update one default and write the whole set back to disk.

    Boolean settings receive the coerced value; string settings keep the raw
    string so that e.g. a password of "false" survives. Returns the updated
    defaults.
    """
    name = Defaults.field_for_key(key)
    if name is None:
        raise ConfigKeyError(
            f"Unknown setting: {key} (expected one of: {', '.join(Defaults.key_names())})"
        )
    if defaults is None:
        defaults = load_or_default()

    coerced = coerce_value(value)
    field_type = Defaults.model_fields[name].annotation
    new_value = coerced if field_type is bool else value

    data = defaults.model_dump()
    data[name] = new_value
    try:
        updated = Defaults.model_validate(data)
    except ModelValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {value!r}\n{e}")
    save(updated)
    return updated
