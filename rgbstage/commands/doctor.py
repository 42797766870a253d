import os
import shutil
import sys
import click
from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..layout import StagingLayout
from ..platforms import TARGETS, get_target

@click.command()
@click.pass_context
@handle_exceptions
def doctor(ctx):
    """Check the build toolchain, the SDK project and what has been staged."""
    logger.info("Running environment check...")
    settings = config_module.load_settings(path=ctx.obj["path"])
    sdk = settings["sdk"]
    healthy = True

    cargo_path = shutil.which(sdk["cargo"])
    if cargo_path:
        logger.success(f"cargo: {cargo_path}")
    else:
        logger.error(f"cargo: '{sdk['cargo']}' not found on PATH")
        healthy = False

    if os.path.isfile(os.path.join(sdk["project_dir"], "Cargo.toml")):
        logger.success(f"RGB SDK project: {sdk['project_dir']}")
    else:
        logger.error(f"RGB SDK project: no Cargo.toml under {sdk['project_dir']}")
        healthy = False

    layout = StagingLayout.from_settings(settings)
    for platform in TARGETS:
        library_file = get_target(platform, settings["platforms"]).library_file(sdk["library_name"])
        if layout.is_provisioned(platform, library_file, sdk["header"]):
            logger.success(f"{platform}: provisioned ({layout.platform_lib_dir(platform)})")
        else:
            logger.warning(f"{platform}: not provisioned")

    if healthy:
        logger.success("Environment check completed successfully.")
    else:
        logger.error("Environment check found issues. Please review the errors above.")
        sys.exit(1)
