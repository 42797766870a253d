import json
import os
import click
from .. import config as config_module
from ..decorators import handle_exceptions
from ..layout import StagingLayout
from ..resolver import resolve_link_configuration

@click.command()
@click.pass_context
@click.argument("platform", required=False)
@click.option("--format", "output_format", type=click.Choice(["json", "flags"]), default="json",
              help="Print the configuration as JSON or as compiler/linker flags.")
@click.option("--origin", default=None, type=click.Path(),
              help="Directory the built module will live in; makes runtime paths loader-relative.")
@handle_exceptions
def resolve(ctx, platform, output_format, origin):
    """Print the link configuration for a platform (defaults to the host)."""
    settings = config_module.load_settings(path=ctx.obj["path"])
    layout = StagingLayout.from_settings(settings)
    if origin is not None:
        origin = os.path.join(settings["root"], origin)
    link_config = resolve_link_configuration(
        platform, layout, library_name=settings["sdk"]["library_name"]
    )

    if output_format == "flags":
        click.echo(" ".join(link_config.compile_flags()))
        click.echo(" ".join(link_config.link_flags(origin=origin)))
        return

    data = link_config.to_dict()
    if origin is not None:
        data["rpath"] = link_config.runtime_search_paths(origin=origin)
    click.echo(json.dumps(data, indent=4))
