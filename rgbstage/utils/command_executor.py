import shlex
import subprocess
from dataclasses import dataclass
from ..cli_logger import logger


@dataclass
class CommandResult:
    returncode: int
    output: str

    @property
    def ok(self):
        return self.returncode == 0


def run_command(command, cwd=None, env=None, echo=None):
    """
    Runs a command to completion, streaming its combined stdout/stderr.

    Args:
        command (list): The command to execute as a list of strings.
        cwd (str, optional): The working directory for the command.
        env (dict, optional): A dictionary of environment variables.
        echo (callable, optional): Called with each output line as it arrives.

    Returns:
        CommandResult with the exit status and the full captured output.
        A command that cannot be started reports a return code of -1.
    """
    logger.debug(f"Running: {shlex.join(command)}")
    lines = []
    try:
        process = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            bufsize=1,
            universal_newlines=True,
            env=env,
            cwd=cwd
        )
    except FileNotFoundError as e:
        logger.error(f"Command not found: {e.filename}")
        return CommandResult(-1, str(e))
    except OSError as e:
        logger.error(f"Could not start {command[0]}: {e}")
        return CommandResult(-1, str(e))

    with process:
        for line in process.stdout:
            lines.append(line)
            if echo is not None:
                echo(line.rstrip("\n"))
        process.wait()
    return CommandResult(process.returncode, "".join(lines))
