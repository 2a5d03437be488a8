"""External process launching for node servers and cluster tooling."""
import logging
import subprocess
from typing import Iterable, List, Optional, Sequence

from rrctl.config import Config
from rrctl.errors import SpawnError

logger = logging.getLogger("rrctl.launcher")

class ProcessLauncher:
    """Starts the four external programs the cluster runtime relies on.

    Everything except the health check is fire-and-forget: the child is
    started with its output discarded and only its pid is kept.
    """

    def __init__(
        self,
        server_binary: Optional[str] = None,
        cli_binary: Optional[str] = None,
        kill_binary: Optional[str] = None,
    ):
        self.server_binary = server_binary or Config.SERVER_BINARY
        self.cli_binary = cli_binary or Config.CLI_BINARY
        self.kill_binary = kill_binary or Config.KILL_BINARY

    def _spawn_detached(self, cmd: List[str]) -> int:
        logger.debug(f"Spawning: {' '.join(cmd)}")
        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise SpawnError(f"Failed to spawn {cmd[0]}: {e}") from e
        return process.pid

    def spawn_server(self, conf_path: str) -> int:
        """Start a node server with its configuration file as the only argument."""
        return self._spawn_detached([self.server_binary, str(conf_path)])

    def spawn_formation(self, endpoints: Sequence[str]) -> int:
        """Start the cluster-formation command over the given host:port endpoints."""
        return self._spawn_detached([self.cli_binary, "--cluster", "create", *endpoints])

    def spawn_terminate(self, pids: Iterable[int]) -> int:
        """Issue one bulk termination request for every pid."""
        return self._spawn_detached([self.kill_binary, *(str(pid) for pid in pids)])

    def run_health_check(self, endpoint: str) -> int:
        """Run the cluster check against endpoint and wait for it to exit.

        The check's output goes straight to the operator's terminal.

        Returns:
            The process exit status

        Raises:
            SpawnError: If the check cannot be started or waited on
        """
        cmd = [self.cli_binary, "--cluster", "check", endpoint]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd)
        except OSError as e:
            raise SpawnError(f"Failed to spawn check process: {e}") from e
        return result.returncode
