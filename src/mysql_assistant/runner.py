from __future__ import annotations
import logging
import os
import shutil
import subprocess
import sys
from typing import Optional
from .command import Command

logger = logging.getLogger(__name__)


class ExecutionError(RuntimeError):
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def find_binary(name: str) -> str:
    """Locate mysql / mysqldump on PATH."""
    path = shutil.which(name)
    if path:
        return path
    raise ExecutionError(f"{name} executable not found. Install the MySQL client tools or add them to PATH.")


def _relay(stream) -> str:
    """Copy the child's stderr to ours as it arrives and keep the text."""
    lines: list[str] = []
    for raw in stream:
        line = raw.decode("utf-8", errors="replace")
        sys.stderr.write(line)
        sys.stderr.flush()
        lines.append(line)
    return "".join(lines)


def run_command(command: Command) -> str:
    """
    Run the command synchronously with the .sql file as stdin (import) or
    stdout (export). The child's stderr is shown live; the collected text is
    returned.

    Raises ExecutionError when the binary is missing, the file cannot be
    opened, or the child exits non-zero.
    """
    binary = find_binary(command.binary)
    argv = [binary, *command.argv[1:]]
    path = os.path.expanduser(command.path)
    logger.debug("Running: %s", command.masked())

    try:
        f = open(path, "rb" if command.is_import else "wb")
    except OSError as e:
        raise ExecutionError(f"Cannot open {path}: {e}")
    with f:
        io_kwargs = {"stdin": f} if command.is_import else {"stdout": f}
        try:
            proc = subprocess.Popen(argv, stderr=subprocess.PIPE, **io_kwargs)
        except OSError as e:
            raise ExecutionError(f"{command.binary} could not be started: {e}")
        stderr = _relay(proc.stderr)
        proc.stderr.close()
        returncode = proc.wait()

    logger.debug("%s exited with %s", command.binary, returncode)
    if returncode != 0:
        raise ExecutionError(
            f"{command.binary} failed (exit {returncode}).\n"
            f"CMD: {command.masked()}\n"
            f"STDERR:\n{stderr}",
            returncode=returncode,
            stderr=stderr,
        )
    return stderr
