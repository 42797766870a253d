"""Render the node-gyp ``binding.gyp`` that compiles the FFI wrapper.

Each registered platform gets its own ``OS=='<key>'`` condition carrying
the library search path, the library to link and the runtime search path,
all taken from the resolver so the module build and the staging layout can
never disagree.
"""
import json
import os

from .cli_logger import logger
from .errors import ConfigurationError
from .platforms import PlatformKey
from .resolver import LINK_RECIPES, resolve_link_configuration

MODULE_ROOT = "<(module_root_dir)"


def _relative(path, base_dir):
    return os.path.relpath(path, base_dir).replace(os.sep, "/")


def _platform_condition(link_config, base_dir, module_dir):
    libraries = [f"-L{MODULE_ROOT}/{_relative(path, base_dir)}" for path in sorted(link_config.library_dirs)]
    libraries += [f"-l{name}" for name in sorted(link_config.library_names)]

    origin = os.path.join(base_dir, module_dir)
    rpath_flags = [
        link_config.recipe.rpath_flag.format(path=path.replace(os.sep, "/"))
        for path in link_config.runtime_search_paths(origin=origin)
    ]

    settings = {"libraries": libraries}
    if link_config.platform is PlatformKey.MAC:
        settings["xcode_settings"] = {"OTHER_LDFLAGS": rpath_flags}
    else:
        # make expands "$", so the loader token has to reach ld as "$$ORIGIN".
        settings["ldflags"] = [flag.replace("$", "$$") for flag in rpath_flags]
    return [f"OS=='{link_config.platform.value}'", settings]


def render_binding_gyp(layout, sources, target_name="rgb", library_name="rgb",
                       base_dir=".", module_dir=os.path.join("build", "Release")):
    """Build the binding.gyp document as a dict."""
    if isinstance(sources, str) or not all(isinstance(source, str) for source in sources):
        raise ConfigurationError(f"Module sources must be a list of file paths, got {sources!r}")
    base_dir = os.path.abspath(base_dir)
    conditions = []
    for platform in LINK_RECIPES:
        link_config = resolve_link_configuration(
            platform, layout, library_name=library_name, warn_missing=False
        )
        conditions.append(_platform_condition(link_config, base_dir, module_dir))

    return {
        "targets": [
            {
                "target_name": target_name,
                "sources": [source.replace(os.sep, "/") for source in sources],
                "include_dirs": [_relative(layout.include_root, base_dir)],
                "conditions": conditions,
            }
        ]
    }


def write_binding_gyp(path, description):
    logger.info(f"Writing module build description to {path}")
    with open(path, "w") as f:
        json.dump(description, f, indent=2)
        f.write("\n")
    return path
