import os
from rgbstage.utils import CommandResult

HEADER = b"/* librgb.h */\nint rgb_version(void);\n"


def make_sdk_project(root, header=HEADER):
    """Create a minimal RGB SDK checkout under ``root`` and return its path."""
    sdk_dir = os.path.join(root, "librgb")
    os.makedirs(sdk_dir, exist_ok=True)
    with open(os.path.join(sdk_dir, "Cargo.toml"), "w") as f:
        f.write('[package]\nname = "rgb"\nversion = "0.1.0"\n')
    with open(os.path.join(sdk_dir, "librgb.h"), "wb") as f:
        f.write(header)
    return sdk_dir


def fake_cargo(sdk_dir, payload=b"\x7fELF fake librgb", output="Finished release [optimized] target(s)\n"):
    """Stand-in for run_command that lays out artifacts the way cargo does."""
    calls = []

    def _run(command, cwd=None, env=None, echo=None):
        calls.append(command)
        triple = command[command.index("--target") + 1]
        filename = "librgb.dylib" if "apple" in triple else "librgb.so"
        out_dir = os.path.join(sdk_dir, "target", triple, "release")
        os.makedirs(out_dir, exist_ok=True)
        path = os.path.join(out_dir, filename)
        # cargo leaves an unchanged artifact alone
        if not os.path.exists(path):
            with open(path, "wb") as f:
                f.write(payload)
        if echo is not None:
            echo(output.rstrip("\n"))
        return CommandResult(0, output)

    _run.calls = calls
    return _run


def snapshot(root):
    """Map every file under ``root`` to its bytes and mtime."""
    state = {}
    for dirpath, _, files in os.walk(root):
        for name in files:
            path = os.path.join(dirpath, name)
            with open(path, "rb") as f:
                state[os.path.relpath(path, root)] = (f.read(), os.stat(path).st_mtime_ns)
    return state
