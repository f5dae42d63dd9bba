"""Interactive child processes attached to the controlling terminal."""

import logging
import subprocess
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


class AttachedProcess:
    """A child process that inherits stdin, stdout and stderr.

    Used for the interactive login flows of wrapped CLIs. Only the exit
    status is exposed; callers decide whether it means anything.
    """

    def __init__(self, argv: Sequence[str], env: Mapping[str, str]) -> None:
        self.argv = list(argv)
        self.env = dict(env)

    def run(self) -> int:
        """Run the process to completion and return its exit code.

        Raises FileNotFoundError if the executable disappeared, or another
        OSError if it could not be started.
        """
        logger.debug("Launching attached process: %s", " ".join(self.argv))
        result = subprocess.run(self.argv, env=self.env, check=False)
        logger.debug("Attached process exited with %d", result.returncode)
        return result.returncode
