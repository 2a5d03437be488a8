import logging

import pytest
from typer.testing import CliRunner

from rrctl.cli import app
from rrctl.commands import cluster as cluster_commands
from rrctl.modules.models import PIDEntry

cli_runner = CliRunner()


def run_cli_command(cmd):
    return cli_runner.invoke(app, cmd.split())


@pytest.fixture(autouse=True)
def patched_runtime(monkeypatch, runtime):
    monkeypatch.setattr(cluster_commands, "get_runtime", lambda: runtime)
    return runtime


def test_help():
    result = run_cli_command("--help")
    assert "Usage" in result.stdout
    assert "cluster" in result.stdout
    assert "config" in result.stdout


def test_cluster_commands_exist():
    result = run_cli_command("cluster --help")
    for name in ("start", "stop", "check", "status"):
        assert name in result.stdout


def test_config_ls(conf_dir):
    result = run_cli_command(f"config ls --base-dir {conf_dir}")
    assert result.exit_code == 0
    assert "node-7001.conf" in result.stdout
    assert "Found 3 configuration files." in result.stdout


def test_config_ls_missing_base_dir(tmp_path, caplog):
    result = run_cli_command(f"config ls -b {tmp_path / 'missing'}")
    assert result.exit_code == 0
    assert "The given base_dir does not exist." in caplog.text


def test_cluster_start(conf_dir, launcher, registry):
    result = run_cli_command(f"cluster start --base-dir {conf_dir} --cluster-host 10.1.1.1")
    assert result.exit_code == 0
    assert "Cluster started with 3 nodes." in result.stdout
    assert "10.1.1.1:7000" in result.stdout
    assert len(registry.load()) == 3
    assert launcher.kinds()[-1] == "formation"


def test_cluster_start_empty_dir(tmp_path, launcher, caplog):
    result = run_cli_command(f"cluster start -b {tmp_path}")
    assert result.exit_code == 0
    assert "No configuration files found in path" in caplog.text
    assert launcher.calls == []


def test_cluster_start_twice(conf_dir, caplog):
    run_cli_command(f"cluster start -b {conf_dir}")
    result = run_cli_command(f"cluster start -b {conf_dir}")
    assert result.exit_code == 0
    assert "Servers are already running" in caplog.text


def test_cluster_stop_not_running(caplog):
    with caplog.at_level(logging.ERROR):
        result = run_cli_command("cluster stop")
    assert result.exit_code == 0
    assert "No servers are running." in caplog.text


def test_cluster_stop(registry, launcher):
    registry.save({PIDEntry(port="7000", pid=11), PIDEntry(port="7001", pid=12)})
    result = run_cli_command("cluster stop")
    assert "Termination requested for 2 server processes." in result.stdout
    assert launcher.calls == [("terminate", [11, 12])]
    assert registry.load() == set()


def test_cluster_check(registry, launcher):
    registry.save({PIDEntry(port="7000", pid=1234)})
    result = run_cli_command("cluster check")
    assert result.exit_code == 0
    assert launcher.calls == [("check", "127.0.0.1:7000")]
    assert "127.0.0.1:7000 is healthy" in result.stdout


def test_cluster_status(registry):
    result = run_cli_command("cluster status")
    assert "No servers are running." in result.stdout

    registry.save({PIDEntry(port="7001", pid=12), PIDEntry(port="7000", pid=11)})
    result = run_cli_command("cluster status")
    assert result.stdout.splitlines() == ["7000\t11", "7001\t12"]


def test_invalid_configuration_stops_command(monkeypatch, launcher, caplog):
    monkeypatch.setattr(cluster_commands.Config, "CONF_SUFFIX", "")
    result = run_cli_command("cluster status")
    assert result.exit_code == 0
    assert "RRCTL_CONF_SUFFIX cannot be empty" in caplog.text
    assert result.stdout == ""
