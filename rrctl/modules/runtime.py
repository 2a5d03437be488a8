"""Cluster lifecycle: start, stop and health check against the PID registry.

The registry's occupancy is the whole state machine. start moves it from
empty to occupied, stop from occupied to empty, and check only reads it.
start on an occupied registry, or stop/check on an empty one, are rejected
without launching anything.
"""
import logging
from functools import reduce
from pathlib import Path
from typing import Iterable, List, Optional, Set

from rrctl.errors import (
    AlreadyRunning,
    ConfigSourceError,
    FormationLaunchFailed,
    HealthCheckFailed,
    IndeterminateState,
    NoValidConfigs,
    NotRunning,
    RegistryIOError,
    SpawnError,
    TerminationLaunchFailed,
)
from rrctl.modules import confsource
from rrctl.modules.launcher import ProcessLauncher
from rrctl.modules.models import (
    HealthReport,
    LaunchOutcome,
    NodeConfig,
    PIDEntry,
    StartReport,
)
from rrctl.registry import PIDRegistry

logger = logging.getLogger("rrctl.runtime")

def select_captain(entries: Iterable[PIDEntry]) -> Optional[PIDEntry]:
    """Pick the health check target: lowest port, then lowest pid."""
    return min(entries, key=PIDEntry.sort_key, default=None)

def collect_node_configs(conf_files: Iterable[str]) -> List[NodeConfig]:
    """Turn discovered paths into NodeConfigs, dropping unusable files.

    Files that no longer exist, cannot be parsed, or declare no port are
    skipped so one bad file does not block the rest.
    """
    nodes: List[NodeConfig] = []
    for conf_file in conf_files:
        path = Path(conf_file)
        if not path.exists():
            logger.debug(f"Skipping vanished configuration file {path}")
            continue
        try:
            settings = confsource.read(path)
        except ConfigSourceError as e:
            logger.debug(f"Skipping unreadable configuration file {path}: {e}")
            continue
        port = settings.get("port")
        if port is None:
            logger.debug(f"Skipping {path}: no port setting")
            continue
        nodes.append(NodeConfig(path=path, port=port))
    return nodes

class ClusterRuntime:
    """Drives cluster operations with an injected registry and launcher."""

    def __init__(
        self,
        registry: Optional[PIDRegistry] = None,
        launcher: Optional[ProcessLauncher] = None,
    ):
        self.registry = registry or PIDRegistry()
        self.launcher = launcher or ProcessLauncher()

    def _running_entries(self) -> Set[PIDEntry]:
        try:
            return self.registry.load()
        except RegistryIOError as e:
            raise IndeterminateState(
                "Failed to assess current run state of system. Either manually delete "
                f"{self.registry.path} or ensure all processes are stopped."
            ) from e

    def _launch_node(self, outcome: LaunchOutcome, node: NodeConfig) -> LaunchOutcome:
        try:
            pid = self.launcher.spawn_server(str(node.path))
        except SpawnError as e:
            logger.error(f"Process with conf {node.path} failed to spawn: {e}")
            return outcome.record_failure(node, str(e))
        logger.info(f"Process with conf {node.path} successfully started with PID: {pid}.")
        return outcome.record_success(PIDEntry(port=node.port, pid=pid))

    def start(self, cluster_host: str, conf_files: Iterable[str]) -> StartReport:
        """Launch one server per usable config file and form them into a cluster.

        Nodes already launched are left running if a later step fails.

        Args:
            cluster_host: Address the nodes are reachable at
            conf_files: Discovered configuration file paths

        Raises:
            AlreadyRunning: If the registry is not empty
            IndeterminateState: If the registry cannot be read
            NoValidConfigs: If no node could be launched
            FormationLaunchFailed: If the formation command fails to start
        """
        with self.registry.locked():
            if self._running_entries():
                raise AlreadyRunning(
                    "Servers are already running. If you wish to restart, first stop the cluster."
                )

            nodes = collect_node_configs(conf_files)
            outcome = reduce(self._launch_node, nodes, LaunchOutcome())
            if not outcome.launched:
                raise NoValidConfigs("No valid configuration files were found.")

            registry_saved = True
            try:
                self.registry.save(outcome.launched)
            except RegistryIOError as e:
                logger.error(str(e))
                registry_saved = False

            endpoints = [entry.endpoint(cluster_host) for entry in outcome.launched]
            try:
                formation_pid = self.launcher.spawn_formation(endpoints)
            except SpawnError as e:
                raise FormationLaunchFailed("Failed to spawn main process for cluster.") from e
            logger.info("Primary cluster node started.")

        return StartReport(
            launched=outcome.launched,
            failed=outcome.failed,
            formation_pid=formation_pid,
            registry_saved=registry_saved,
        )

    def stop(self) -> List[int]:
        """Request termination of every tracked node and clear the registry.

        Only the launch of the kill command is observed; processes that
        survive it are no longer tracked.

        Returns:
            The pids termination was requested for

        Raises:
            NotRunning: If the registry is empty
            IndeterminateState: If the registry cannot be read
            TerminationLaunchFailed: If the kill command fails to start
        """
        with self.registry.locked():
            entries = self._running_entries()
            if not entries:
                raise NotRunning("No servers are running.")

            pids = sorted(entry.pid for entry in entries)
            try:
                self.launcher.spawn_terminate(pids)
            except SpawnError as e:
                raise TerminationLaunchFailed("Failed to kill all server processes.") from e

            self.registry.clear()
        logger.info(f"Termination requested for {len(pids)} server processes.")
        return pids

    def check(self, cluster_host: str) -> HealthReport:
        """Run a blocking cluster health check against the captain node.

        Raises:
            NotRunning: If the registry is empty
            IndeterminateState: If the registry cannot be read
            HealthCheckFailed: If the check cannot run or exits non-zero
        """
        captain = select_captain(self._running_entries())
        if captain is None:
            raise NotRunning("There are no currently running server processes.")

        endpoint = captain.endpoint(cluster_host)
        logger.info(f"Checking cluster health via {endpoint}")
        try:
            returncode = self.launcher.run_health_check(endpoint)
        except SpawnError as e:
            raise HealthCheckFailed(f"Failed to run check command: {e}") from e
        if returncode != 0:
            raise HealthCheckFailed(
                f"Health check against {endpoint} failed with exit status {returncode}."
            )
        return HealthReport(endpoint=endpoint, returncode=returncode, captain=captain)

    def status(self) -> List[PIDEntry]:
        """Return the registry entries ordered by port."""
        return sorted(self._running_entries(), key=PIDEntry.sort_key)
