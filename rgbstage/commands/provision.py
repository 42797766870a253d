import click
from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..layout import StagingLayout
from ..platforms import PlatformKey, detect_platform
from ..provisioner import Provisioner

@click.command()
@click.pass_context
@click.argument("platform", required=False)
@click.option("--verbose", "-v", is_flag=True, help="Stream the cargo build output.")
@handle_exceptions
def provision(ctx, platform, verbose):
    """Build the RGB SDK and stage it for a platform.

    PLATFORM: The target platform (linux, mac). Defaults to the host.
    """
    key = PlatformKey.parse(platform) if platform else detect_platform()
    settings = config_module.load_settings(path=ctx.obj["path"])
    layout = StagingLayout.from_settings(settings)

    bundle = Provisioner.from_settings(settings, layout).provision(key, verbose=verbose)
    logger.step_info(f"library: {bundle.library_path}", indent=2)
    logger.step_info(f"header:  {bundle.header_path}", indent=2)
