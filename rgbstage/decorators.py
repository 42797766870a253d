import functools
import click
import sys # Import sys for sys.exc_info()
from .cli_logger import logger
from .errors import ExternalBuildFailureError, ProvisioningError

def handle_exceptions(func):
    """Turn failures into a stage diagnostic on stderr and a non-zero exit status."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.Abort:
            logger.warning("\nCommand aborted by user.")
            sys.exit(1)
        except click.ClickException:
            raise
        except ExternalBuildFailureError as e:
            logger.error(f"Stage '{e.stage}' failed: {e.message}")
            if e.output and not e.echoed:
                # cargo's diagnostic, verbatim
                click.echo(e.output.rstrip("\n"), err=True)
            sys.exit(e.exit_code)
        except ProvisioningError as e:
            logger.error(f"Stage '{e.stage}' failed: {e.message}")
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"\nAn unexpected error occurred: {e}")
            logger.exception(*sys.exc_info())
            sys.exit(1)
    return wrapper
