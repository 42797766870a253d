"""On-disk staging layout shared with the downstream module build.

::

    <lib_root>/<platform>/lib<name>.<ext>
    <include_root>/<header>

The relative paths are an external contract: binding.gyp and any packaging
step refer to them directly.
"""
import os
from dataclasses import dataclass

from .errors import MissingDependencyError
from .platforms import PlatformKey


@dataclass(frozen=True)
class ArtifactBundle:
    library_path: str
    header_path: str

    def verify(self):
        """Raise MissingDependencyError unless both files exist and are readable."""
        for path in (self.library_path, self.header_path):
            if not os.path.isfile(path) or not os.access(path, os.R_OK):
                raise MissingDependencyError(f"Artifact not found or unreadable: {path}", path=path)
        return self


@dataclass(frozen=True)
class StagingLayout:
    lib_root: str
    include_root: str

    @classmethod
    def from_settings(cls, settings):
        staging = settings["staging"]
        return cls(lib_root=staging["lib_dir"], include_root=staging["include_dir"])

    def platform_lib_dir(self, platform):
        return os.path.join(self.lib_root, PlatformKey.parse(platform).value)

    def staged_bundle(self, platform, library_file, header_name):
        return ArtifactBundle(
            library_path=os.path.join(self.platform_lib_dir(platform), library_file),
            header_path=os.path.join(self.include_root, header_name),
        )

    def is_provisioned(self, platform, library_file, header_name):
        try:
            self.staged_bundle(platform, library_file, header_name).verify()
        except MissingDependencyError:
            return False
        return True
