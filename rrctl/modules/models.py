"""
Data models for local cluster management.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

@dataclass(frozen=True)
class NodeConfig:
    """A node configuration file together with the port it declares."""
    path: Path
    port: str

@dataclass(frozen=True)
class PIDEntry:
    """A node process this tool started.

    Identity is the pid alone: two entries with the same port but different
    pids are distinct members of a registry set.
    """
    port: str = field(compare=False)
    pid: int

    def endpoint(self, host: str) -> str:
        """Return the host:port address of this node on the given host."""
        return f"{host}:{self.port}"

    def to_line(self) -> str:
        return f"{self.port} {self.pid}\n"

    def sort_key(self) -> Tuple[int, int, str, int]:
        """Order numeric ports numerically, then other ports by string, then pid."""
        if self.port.isdecimal():
            return (0, int(self.port), "", self.pid)
        return (1, 0, self.port, self.pid)

@dataclass
class LaunchOutcome:
    """Partition of node launch attempts into successes and failures."""
    launched: List[PIDEntry] = field(default_factory=list)
    failed: List[Tuple[NodeConfig, str]] = field(default_factory=list)

    def record_success(self, entry: PIDEntry) -> "LaunchOutcome":
        self.launched.append(entry)
        return self

    def record_failure(self, node: NodeConfig, reason: str) -> "LaunchOutcome":
        self.failed.append((node, reason))
        return self

@dataclass
class StartReport:
    """Result of a successful cluster start."""
    launched: List[PIDEntry]
    failed: List[Tuple[NodeConfig, str]]
    formation_pid: int
    registry_saved: bool = True

@dataclass
class HealthReport:
    """Result of a cluster health check."""
    endpoint: str
    returncode: int
    captain: Optional[PIDEntry] = None
