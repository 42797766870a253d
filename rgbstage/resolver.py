"""Derive compiler, linker and runtime-loader settings from the staging layout.

Resolution is a pure function of the platform and the layout. The only
filesystem access is a warning when the platform has not been provisioned
yet, which is the usual reason a module build later fails to link.
"""
import os
from dataclasses import dataclass

from .cli_logger import logger
from .errors import UnsupportedPlatformError
from .platforms import PlatformKey, detect_platform


@dataclass(frozen=True)
class LinkRecipe:
    """How one OS spells a loader-relative runtime search path."""

    origin_token: str
    rpath_flag: str = "-Wl,-rpath,{path}"


# One entry per supported OS; platforms missing here fail to resolve.
LINK_RECIPES = {
    PlatformKey.LINUX: LinkRecipe(origin_token="$ORIGIN"),
    PlatformKey.MAC: LinkRecipe(origin_token="@loader_path"),
}


@dataclass(frozen=True)
class LinkConfiguration:
    platform: PlatformKey
    include_dirs: frozenset
    library_dirs: frozenset
    library_names: frozenset
    runtime_paths: frozenset

    @property
    def recipe(self):
        return get_recipe(self.platform)

    def compile_flags(self):
        return [f"-I{path}" for path in sorted(self.include_dirs)]

    def runtime_search_paths(self, origin=None):
        """Runtime paths, rewritten relative to ``origin`` with the loader token when given."""
        paths = sorted(self.runtime_paths)
        if origin is None:
            return paths
        token = self.recipe.origin_token
        relative = []
        for path in paths:
            rel = os.path.relpath(path, origin)
            relative.append(token if rel == os.curdir else f"{token}/{rel}")
        return relative

    def link_flags(self, origin=None):
        flags = [f"-L{path}" for path in sorted(self.library_dirs)]
        flags += [f"-l{name}" for name in sorted(self.library_names)]
        flags += [self.recipe.rpath_flag.format(path=path) for path in self.runtime_search_paths(origin)]
        return flags

    def to_dict(self):
        return {
            "platform": self.platform.value,
            "include_dirs": sorted(self.include_dirs),
            "library_dirs": sorted(self.library_dirs),
            "library_names": sorted(self.library_names),
            "runtime_paths": sorted(self.runtime_paths),
        }


def get_recipe(platform):
    key = PlatformKey.parse(platform)
    try:
        return LINK_RECIPES[key]
    except KeyError:
        raise UnsupportedPlatformError(
            f"No link configuration registered for platform '{key}'.", platform=key
        ) from None


def resolve_link_configuration(platform, layout, library_name="rgb", warn_missing=True):
    """Resolve the LinkConfiguration for ``platform`` (host platform when None)."""
    key = detect_platform() if platform is None else PlatformKey.parse(platform)
    get_recipe(key)

    library_dir = layout.platform_lib_dir(key)
    if warn_missing and not os.path.isdir(library_dir):
        logger.warning(
            f"Library directory {library_dir} does not exist. "
            f"Run 'rgbstage provision {key}' before building the module."
        )

    library_dirs = frozenset({library_dir})
    return LinkConfiguration(
        platform=key,
        include_dirs=frozenset({layout.include_root}),
        library_dirs=library_dirs,
        library_names=frozenset({library_name}),
        runtime_paths=library_dirs,
    )
