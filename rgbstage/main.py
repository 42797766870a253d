import click
from .commands import config, doctor, gyp, log, provision, resolve, version


@click.group()
@click.option("--path", "-p", default=".", help="Path to the bindings project directory.")
@click.pass_context
def cli(ctx, path):
    """Stage the RGB SDK native library and configure module builds against it."""
    ctx.obj = {"path": path}

cli.add_command(provision)
cli.add_command(resolve)
cli.add_command(gyp)
cli.add_command(doctor)
cli.add_command(config)
cli.add_command(log)
cli.add_command(version)

if __name__ == '__main__':
    cli()
