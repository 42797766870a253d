from .command_executor import CommandResult, run_command
from .file_manager import ensure_dir, is_up_to_date, sync_file
