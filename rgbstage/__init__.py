from .build_description import render_binding_gyp, write_binding_gyp
from .errors import (
    ExternalBuildFailureError,
    MissingDependencyError,
    ProvisioningError,
    StagingIOError,
    UnsupportedPlatformError,
)
from .layout import ArtifactBundle, StagingLayout
from .platforms import PlatformKey, detect_platform
from .provisioner import Provisioner
from .resolver import LinkConfiguration, resolve_link_configuration
