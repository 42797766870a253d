import sys
from dataclasses import dataclass
from enum import Enum

from .errors import UnsupportedPlatformError


class PlatformKey(str, Enum):
    """Operating systems the RGB SDK is staged and linked for.

    Values double as the ``OS`` names node-gyp evaluates in conditions.
    """

    LINUX = "linux"
    MAC = "mac"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            supported = ", ".join(key.value for key in cls)
            raise UnsupportedPlatformError(
                f"Unsupported platform '{value}'. Supported platforms are: {supported}.",
                platform=value,
            ) from None


@dataclass(frozen=True)
class PlatformTarget:
    triple: str
    library_pattern: str

    def library_file(self, library_name):
        return self.library_pattern.format(name=library_name)


TARGETS = {
    PlatformKey.LINUX: PlatformTarget("x86_64-unknown-linux-gnu", "lib{name}.so"),
    PlatformKey.MAC: PlatformTarget("x86_64-apple-darwin", "lib{name}.dylib"),
}

_HOST_PREFIXES = {
    "linux": PlatformKey.LINUX,
    "darwin": PlatformKey.MAC,
}


def detect_platform(host=None):
    """Map the running interpreter's ``sys.platform`` to a PlatformKey."""
    host = host or sys.platform
    for prefix, key in _HOST_PREFIXES.items():
        if host.startswith(prefix):
            return key
    raise UnsupportedPlatformError(f"Host platform '{host}' is not supported.", platform=host)


def get_target(platform, overrides=None):
    """Return the build target for ``platform``, applying a configured triple override."""
    key = PlatformKey.parse(platform)
    if key not in TARGETS:
        raise UnsupportedPlatformError(f"No build target registered for '{key}'.", platform=key)
    target = TARGETS[key]
    triple = (overrides or {}).get(key.value, {}).get("target")
    if triple:
        target = PlatformTarget(triple, target.library_pattern)
    return target
