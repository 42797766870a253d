"""Failure taxonomy for provisioning and link resolution.

Every error is fatal for the operation that raised it. Each one knows the
stage it came from and the process exit status the CLI should use, so a
pipeline log shows at a glance which step broke.
"""


class ProvisioningError(Exception):
    """Base class for all rgbstage failures."""

    stage = "provisioning"
    exit_code = 1

    def __init__(self, message, stage=None):
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage

    def __str__(self):
        return f"[{self.stage}] {self.message}"


class MissingDependencyError(ProvisioningError):
    """A required external project, file or tool is absent."""

    stage = "precondition"
    exit_code = 2

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class ExternalBuildFailureError(ProvisioningError):
    """The external cargo build of the native library failed."""

    stage = "build"

    def __init__(self, message, returncode=1, output="", echoed=False):
        super().__init__(message)
        self.returncode = returncode
        self.output = output
        # True when the output was already streamed to the console.
        self.echoed = echoed

    @property
    def exit_code(self):
        # Statuses outside 1..255 (signals, spawn failures) collapse to 1.
        if 0 < self.returncode < 256:
            return self.returncode
        return 1


class StagingIOError(ProvisioningError):
    """Creating a staging directory or copying an artifact failed."""

    stage = "staging"
    exit_code = 3

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class UnsupportedPlatformError(ProvisioningError):
    """No provisioning target or link recipe is registered for a platform."""

    stage = "platform"
    exit_code = 4

    def __init__(self, message, platform=None):
        super().__init__(message)
        self.platform = platform


class ConfigurationError(ProvisioningError):
    """rgbstage.toml cannot be read, parsed, updated or holds a value of the wrong type."""

    stage = "config"
    exit_code = 5

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path
