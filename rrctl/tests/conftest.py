from pathlib import Path

import pytest

from rrctl.errors import SpawnError
from rrctl.modules.runtime import ClusterRuntime
from rrctl.registry import PIDRegistry


class FakeLauncher:
    """Records launch requests instead of starting real processes."""

    def __init__(self, fail_confs=(), fail_formation=False, fail_terminate=False,
                 health_returncode=0, fail_health=False):
        self.fail_confs = set(fail_confs)
        self.fail_formation = fail_formation
        self.fail_terminate = fail_terminate
        self.health_returncode = health_returncode
        self.fail_health = fail_health
        self.calls = []
        self.next_pid = 1000

    def spawn_server(self, conf_path):
        self.calls.append(("server", conf_path))
        if Path(conf_path).name in self.fail_confs:
            raise SpawnError(f"Failed to spawn redis-server: {conf_path}")
        self.next_pid += 1
        return self.next_pid

    def spawn_formation(self, endpoints):
        self.calls.append(("formation", list(endpoints)))
        if self.fail_formation:
            raise SpawnError("Failed to spawn redis-cli")
        return 9000

    def spawn_terminate(self, pids):
        self.calls.append(("terminate", list(pids)))
        if self.fail_terminate:
            raise SpawnError("Failed to spawn kill")
        return 9001

    def run_health_check(self, endpoint):
        self.calls.append(("check", endpoint))
        if self.fail_health:
            raise SpawnError("Failed to spawn check process")
        return self.health_returncode

    def kinds(self):
        return [kind for kind, _ in self.calls]


@pytest.fixture
def config_dir(tmp_path):
    path = tmp_path / ".rr"
    path.mkdir()
    return path


@pytest.fixture
def registry(config_dir):
    return PIDRegistry(config_dir=config_dir, lock_timeout=0)


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def runtime(registry, launcher):
    return ClusterRuntime(registry=registry, launcher=launcher)


@pytest.fixture
def conf_dir(tmp_path):
    """Directory with three node configs on ports 7000-7002."""
    base = tmp_path / "confs"
    for port in (7000, 7001, 7002):
        node_dir = base / str(port)
        node_dir.mkdir(parents=True)
        (node_dir / f"node-{port}.conf").write_text(
            f"port {port}\ncluster-enabled yes\nappendonly yes\n"
        )
    return base


@pytest.fixture
def make_runtime(registry):
    """Build a runtime around a FakeLauncher configured for the test."""
    def _make(**launcher_kwargs):
        fake = FakeLauncher(**launcher_kwargs)
        return ClusterRuntime(registry=registry, launcher=fake), fake
    return _make
