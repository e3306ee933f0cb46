"""Pre- and post-generation commands.

Commands are argument lists in the Docker Compose style, e.g.
``['npx', 'prettier', '--write', '.']``: the first element is the executable and
no shell is involved. They run in the client's output directory with their output
forwarded to the console.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from sdkgen.exceptions import HookError

logger = logging.getLogger(__name__)

__all__ = ['run_command']


def run_command(
    command: Sequence[str] | None, cwd: str | Path, label: str = 'command'
) -> None:
    """Run a hook command.

    An empty or missing command is a no-op.

    Args:
        command: The argument list.
        cwd: Working directory, normally the client's output directory.
        label: Name used in messages, e.g. 'pre-command'.

    Raises:
        HookError: If the executable cannot be started or exits non-zero.
    """
    if not command:
        return

    command = list(command)
    logger.info(f'Running {label}: {" ".join(command)}')
    try:
        result = subprocess.run(command, cwd=str(cwd), check=False)
    except OSError as e:
        raise HookError(label, command, cause=e)

    if result.returncode != 0:
        raise HookError(label, command, returncode=result.returncode)
