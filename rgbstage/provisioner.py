"""Build the RGB SDK with cargo and stage its library and header.

One ``provision`` call handles exactly one platform. It writes only to that
platform's library directory and to the shared include directory, so runs
for different platforms never touch each other's files. Two runs for the
same platform at once are not guarded against; serialize them in the caller.
"""
import os
import shutil

from .cli_logger import logger
from .errors import ExternalBuildFailureError, MissingDependencyError
from .layout import ArtifactBundle
from .platforms import PlatformKey, get_target
from .utils import ensure_dir, run_command, sync_file

MANIFEST = "Cargo.toml"
PROFILE = "release"

# cargo writes the built-in "dev" profile to target/<triple>/debug
PROFILE_DIRS = {"dev": "debug"}


class Provisioner:
    def __init__(self, sdk_project_dir, layout, library_name="rgb", header_name="librgb.h",
                 cargo="cargo", profile=PROFILE, target_overrides=None):
        self.sdk_project_dir = sdk_project_dir
        self.layout = layout
        self.library_name = library_name
        self.header_name = header_name
        self.cargo = cargo
        self.profile = profile
        self.target_overrides = target_overrides or {}

    @classmethod
    def from_settings(cls, settings, layout):
        sdk = settings["sdk"]
        return cls(
            sdk["project_dir"],
            layout,
            library_name=sdk["library_name"],
            header_name=sdk["header"],
            cargo=sdk["cargo"],
            profile=sdk["profile"],
            target_overrides=settings.get("platforms", {}),
        )

    @property
    def manifest_path(self):
        return os.path.join(self.sdk_project_dir, MANIFEST)

    def check_preconditions(self):
        """Fail before any directory is created or any process is started."""
        if not os.path.isdir(self.sdk_project_dir):
            raise MissingDependencyError(
                f"RGB SDK (Rust) project directory ({self.sdk_project_dir}) not found; aborting build",
                path=self.sdk_project_dir,
            )
        if not os.path.isfile(self.manifest_path):
            raise MissingDependencyError(
                f"Cargo manifest not found at {self.manifest_path}; aborting build",
                path=self.manifest_path,
            )
        if shutil.which(self.cargo) is None:
            raise MissingDependencyError(
                f"Build tool '{self.cargo}' not found on PATH; install the Rust toolchain first",
                path=self.cargo,
            )

    def build_command(self, target):
        return [
            self.cargo, "build",
            "--target", target.triple,
        ] + (["--release"] if self.profile == PROFILE else ["--profile", self.profile]) + [
            "--manifest-path", self.manifest_path,
        ]

    def built_bundle(self, target):
        """Where cargo leaves the artifacts for ``target``."""
        return ArtifactBundle(
            library_path=os.path.join(
                self.sdk_project_dir, "target", target.triple, PROFILE_DIRS.get(self.profile, self.profile),
                target.library_file(self.library_name),
            ),
            header_path=os.path.join(self.sdk_project_dir, self.header_name),
        )

    def _build(self, platform, target, verbose):
        logger.info(f"  - Building RGB SDK for {platform} ({target.triple})...")
        echo = (lambda line: logger.step_info(line, indent=4)) if verbose else None
        result = run_command(self.build_command(target), cwd=self.sdk_project_dir, echo=echo)
        if not result.ok:
            raise ExternalBuildFailureError(
                f"cargo build for {platform} ({target.triple}) exited with status {result.returncode}",
                returncode=result.returncode,
                output=result.output,
                echoed=verbose,
            )

        bundle = self.built_bundle(target)
        try:
            bundle.verify()
        except MissingDependencyError as e:
            raise ExternalBuildFailureError(
                f"cargo build for {platform} succeeded but produced no artifact at {e.path}",
                output=result.output,
                echoed=verbose,
            ) from e
        logger.success(f"  - RGB SDK built for {platform}.")
        return bundle

    def provision(self, platform, verbose=False):
        """Build and stage the SDK for ``platform``; returns the staged ArtifactBundle."""
        platform = PlatformKey.parse(platform)
        target = get_target(platform, self.target_overrides)
        logger.info(f"Provisioning RGB SDK for {platform}...")

        self.check_preconditions()

        platform_dir = ensure_dir(self.layout.platform_lib_dir(platform))
        ensure_dir(self.layout.include_root)

        built = self._build(platform, target, verbose)

        logger.info("  - Staging artifacts...")
        library_path, _ = sync_file(built.library_path, platform_dir)
        header_path, _ = sync_file(built.header_path, self.layout.include_root)

        staged = ArtifactBundle(library_path=library_path, header_path=header_path)
        logger.success(f"RGB SDK staged for {platform}: {library_path}")
        return staged
