import click
import importlib.metadata
from .. import config as config_module
from ..decorators import handle_exceptions
from ..platforms import TARGETS, get_target

@click.command()
@click.pass_context
@handle_exceptions
def version(ctx):
    """Print the rgbstage version and the SDK build it is configured for."""
    try:
        ver = importlib.metadata.version("rgbstage")
    except importlib.metadata.PackageNotFoundError:
        ver = "unknown (not installed)"
    settings = config_module.load_settings(path=ctx.obj["path"])
    sdk = settings["sdk"]

    click.echo(f"rgbstage {ver}")
    click.echo(f"RGB SDK project: {sdk['project_dir']}")
    click.echo(f"library: {sdk['library_name']} ({sdk['header']})")
    for platform in TARGETS:
        target = get_target(platform, settings["platforms"])
        click.echo(f"{platform}: {target.triple} -> {target.library_file(sdk['library_name'])}")
