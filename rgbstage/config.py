import contextlib
import copy
import toml
import os
from .cli_logger import logger
from .errors import ConfigurationError

CONFIG_FILE = "rgbstage.toml"

DEFAULTS = {
    "sdk": {
        "project_dir": os.path.join("..", "..", "librgb"),
        "library_name": "rgb",
        "header": "librgb.h",
        "cargo": "cargo",
        "profile": "release",
    },
    "staging": {
        "lib_dir": "lib",
        "include_dir": "include",
    },
    "module": {
        "target_name": "rgb",
        "sources": [os.path.join("src", "rgb_wrap.cxx")],
        "module_dir": os.path.join("build", "Release"),
    },
    "platforms": {},
}


def load_config(path="."):
    """Read rgbstage.toml as a dict; an absent file is an empty config."""
    config_path = os.path.join(path, CONFIG_FILE)
    logger.debug(f"Loading configuration from {config_path}")
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r") as f:
            return toml.load(f)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(
            f"Error decoding TOML file at {config_path}: {e}. Please check the file's format for syntax errors.",
            path=config_path,
        ) from e
    except IOError as e:
        raise ConfigurationError(
            f"Error reading configuration file at {config_path}: {e}. Please check file permissions.",
            path=config_path,
        ) from e

def save_config(config, path="."):
    config_path = os.path.join(path, CONFIG_FILE)
    logger.info(f"Saving configuration to {config_path}")
    temp_path = config_path + ".tmp"
    try:
        with open(temp_path, "w") as f:
            toml.dump(config, f)
        os.replace(temp_path, config_path)
    except IOError as e:
        with contextlib.suppress(OSError):
            os.remove(temp_path)
        raise ConfigurationError(
            f"Error saving configuration to {config_path}: {e}. "
            "Please check file permissions and ensure the directory is writable.",
            path=config_path,
        ) from e
    return config_path

def _default_for(keys):
    value = DEFAULTS
    for k in keys:
        if not isinstance(value, dict) or k not in value:
            # platforms.<key>.target is the only value below a free-form table
            return "" if keys[0] == "platforms" and keys[-1] == "target" else None
        value = value[k]
    return value

def coerce_value(key, raw):
    """Turn a command-line string into the type the setting expects.

    TOML literals (``'["a.cxx", "b.cxx"]'``, ``true``, ``3``) are accepted;
    list settings also take a comma-separated string.
    """
    try:
        parsed = toml.loads(f"value = {raw}")["value"]
    except (ValueError, IndexError):
        # not a TOML literal (TomlDecodeError is a ValueError); keep the plain string
        parsed = raw
    default = _default_for(key.split("."))

    if isinstance(default, list):
        if isinstance(parsed, str):
            return [item.strip() for item in parsed.split(",") if item.strip()]
        if isinstance(parsed, list) and all(isinstance(item, str) for item in parsed):
            return parsed
        raise ConfigurationError(f"'{key}' expects a list of strings, got {raw!r}")
    if isinstance(default, str):
        return parsed if isinstance(parsed, str) else raw
    if isinstance(default, dict):
        raise ConfigurationError(f"'{key}' is a table; set one of its keys instead")
    return parsed

def set_value(config, key, raw):
    keys = key.split(".")
    value = coerce_value(key, raw)
    d = config
    for i, k in enumerate(keys[:-1]):
        default = _default_for(keys[:i + 1])
        d = d.setdefault(k, {})
        if not isinstance(d, dict) or (default is not None and not isinstance(default, dict)):
            raise ConfigurationError(f"Cannot set '{key}': '{'.'.join(keys[:i + 1])}' is not a table")
    d[keys[-1]] = value
    return value

def get_value(config, key):
    value = config
    try:
        for k in key.split("."):
            value = value[k]
    except (KeyError, TypeError):
        raise ConfigurationError(f"Key '{key}' not found in {CONFIG_FILE}") from None
    return value

def unset_value(config, key):
    keys = key.split(".")
    d = config
    try:
        for k in keys[:-1]:
            d = d[k]
        del d[keys[-1]]
    except (KeyError, TypeError):
        raise ConfigurationError(f"Key '{key}' not found in {CONFIG_FILE}") from None

def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged

def _validate(settings):
    for section, defaults in DEFAULTS.items():
        if not isinstance(settings[section], dict):
            raise ConfigurationError(f"[{section}] in {CONFIG_FILE} must be a table")
        for key, default in defaults.items():
            value = settings[section][key]
            if not isinstance(value, type(default)):
                raise ConfigurationError(
                    f"{section}.{key} in {CONFIG_FILE} must be a {type(default).__name__}, got {value!r}"
                )
    if not all(isinstance(source, str) for source in settings["module"]["sources"]):
        raise ConfigurationError(f"module.sources in {CONFIG_FILE} must be a list of strings")
    for name, table in settings["platforms"].items():
        if not isinstance(table, dict) or not isinstance(table.get("target", ""), str):
            raise ConfigurationError(f"[platforms.{name}] in {CONFIG_FILE} must be a table with a string 'target'")

def load_settings(path="."):
    """Load rgbstage.toml over the defaults, with paths made absolute against ``path``."""
    settings = _merge(DEFAULTS, load_config(path))
    _validate(settings)
    root = os.path.abspath(path)
    settings["root"] = root
    settings["sdk"]["project_dir"] = os.path.normpath(os.path.join(root, settings["sdk"]["project_dir"]))
    for key in ("lib_dir", "include_dir"):
        settings["staging"][key] = os.path.normpath(os.path.join(root, settings["staging"][key]))
    return settings
