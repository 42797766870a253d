import os
import click
from .. import config as config_module
from ..build_description import render_binding_gyp, write_binding_gyp
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..layout import StagingLayout

@click.command()
@click.pass_context
@click.option("--output", "-o", default=None, type=click.Path(),
              help="Where to write the description (default: binding.gyp in the project directory).")
@handle_exceptions
def gyp(ctx, output):
    """Generate the binding.gyp that compiles and links the FFI wrapper."""
    settings = config_module.load_settings(path=ctx.obj["path"])
    module = settings["module"]
    layout = StagingLayout.from_settings(settings)

    description = render_binding_gyp(
        layout,
        module["sources"],
        target_name=module["target_name"],
        library_name=settings["sdk"]["library_name"],
        base_dir=settings["root"],
        module_dir=module["module_dir"],
    )
    output = output or os.path.join(settings["root"], "binding.gyp")
    write_binding_gyp(output, description)
    logger.success(f"Wrote {output}")
