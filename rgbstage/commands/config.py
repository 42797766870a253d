import click
import os
import json
from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..errors import ConfigurationError


def _require_config(path):
    conf = config_module.load_config(path=path)
    if not conf:
        raise ConfigurationError(
            f"No {config_module.CONFIG_FILE} found in {path}. Please run 'rgbstage config init' first.",
            path=os.path.join(path, config_module.CONFIG_FILE),
        )
    return conf


@click.group()
@click.pass_context
def config(ctx):
    """View or edit the rgbstage.toml configuration file."""
    pass

@config.command()
@click.option("--force", is_flag=True, help="Overwrite an existing rgbstage.toml.")
@click.pass_context
@handle_exceptions
def init(ctx, force):
    """Write an rgbstage.toml holding the default settings."""
    config_file_path = os.path.join(ctx.obj["path"], config_module.CONFIG_FILE)
    if os.path.exists(config_file_path) and not force:
        logger.warning(f"{config_file_path} already exists. Use --force to overwrite it.")
        return
    config_module.save_config(config_module.DEFAULTS, path=ctx.obj["path"])
    logger.success(f"Created {config_file_path}")

@config.command()
@click.pass_context
@handle_exceptions
def view(ctx):
    """Print rgbstage.toml as written, even when it no longer parses."""
    config_file_path = os.path.join(ctx.obj["path"], config_module.CONFIG_FILE)
    if not os.path.exists(config_file_path):
        raise ConfigurationError(
            f"No {config_module.CONFIG_FILE} found in {ctx.obj['path']}. Please run 'rgbstage config init' first.",
            path=config_file_path,
        )
    try:
        with open(config_file_path, 'r') as f:
            click.echo(f.read())
    except IOError as e:
        raise ConfigurationError(f"Error reading {config_file_path}: {e}", path=config_file_path) from e

@config.command(name="list")
@click.option("--effective", is_flag=True, help="Show the settings after defaults and path resolution.")
@click.pass_context
@handle_exceptions
def list_(ctx, effective):
    """List all configuration keys and values."""
    if effective:
        click.echo(json.dumps(config_module.load_settings(path=ctx.obj["path"]), indent=4))
        return
    click.echo(json.dumps(_require_config(ctx.obj["path"]), indent=4))

@config.command()
@click.argument('key')
@click.pass_context
@handle_exceptions
def get(ctx, key):
    """Get a value from rgbstage.toml using a dotted key (e.g. sdk.project_dir)."""
    value = config_module.get_value(_require_config(ctx.obj["path"]), key)
    click.echo(json.dumps(value) if isinstance(value, (list, dict)) else value)

@config.command(name="set")
@click.argument('key')
@click.argument('value')
@click.pass_context
@handle_exceptions
def set_(ctx, key, value):
    """Set a value in rgbstage.toml.

    VALUE may be a TOML literal. List settings such as module.sources also
    take a comma-separated string.
    """
    conf = config_module.load_config(path=ctx.obj["path"])
    stored = config_module.set_value(conf, key, value)
    config_module.save_config(conf, path=ctx.obj["path"])
    logger.info(f"Set '{key}' to {stored!r}")

@config.command()
@click.argument('key')
@click.pass_context
@handle_exceptions
def unset(ctx, key):
    """Remove a key from rgbstage.toml, restoring its default."""
    conf = _require_config(ctx.obj["path"])
    config_module.unset_value(conf, key)
    config_module.save_config(conf, path=ctx.obj["path"])
    logger.info(f"Unset '{key}'")
