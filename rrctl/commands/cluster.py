import logging
from pathlib import Path
from typing import Optional

import typer

from rrctl.config import Config
from rrctl.errors import ConfigSourceError, RRError
from rrctl.modules import confsource
from rrctl.modules.runtime import ClusterRuntime

app = typer.Typer(help="Start, stop and check the local cluster.")
logger = logging.getLogger("rrctl.commands.cluster")

def get_runtime() -> ClusterRuntime:
    return ClusterRuntime()

@app.command("start")
def start_cluster(
    base_dir: Optional[Path] = typer.Option(
        None, "--base-dir", "-b", help="Directory holding node .conf files (default: current directory)"
    ),
    cluster_host: str = typer.Option(
        Config.DEFAULT_CLUSTER_HOST, "--cluster-host", "-h", help="Host the nodes are reachable at"
    ),
):
    """Launch one server per configuration file and create the cluster."""
    base_path = confsource.resolve_base_dir(base_dir)
    try:
        conf_files = confsource.discover(base_path)
        if not conf_files:
            raise ConfigSourceError(f"No configuration files found in path: {base_path}")
        report = get_runtime().start(cluster_host, [str(f) for f in conf_files])
    except RRError as e:
        logger.error(f"❌ {e}")
        return

    for entry in report.launched:
        typer.echo(f"🚀 {entry.endpoint(cluster_host)} (pid {entry.pid})")
    for node, reason in report.failed:
        typer.echo(f"⚠️  {node.path}: {reason}")
    if not report.registry_saved:
        typer.echo("⚠️  Servers are running but the PID registry could not be written.")
    typer.echo(f"✅ Cluster started with {len(report.launched)} nodes.")

@app.command("stop")
def stop_cluster():
    """Terminate every server started by rrctl."""
    try:
        pids = get_runtime().stop()
    except RRError as e:
        logger.error(f"❌ {e}")
        return
    typer.echo(f"✅ Termination requested for {len(pids)} server processes.")

@app.command("check")
def check_cluster(
    cluster_host: str = typer.Option(
        Config.DEFAULT_CLUSTER_HOST, "--cluster-host", "-h", help="Host the nodes are reachable at"
    ),
):
    """Run a cluster health check against one running node."""
    try:
        report = get_runtime().check(cluster_host)
    except RRError as e:
        logger.error(f"❌ {e}")
        return
    typer.echo(f"✅ Cluster at {report.endpoint} is healthy.")

@app.command("status")
def cluster_status():
    """Show the servers recorded in the PID registry."""
    try:
        entries = get_runtime().status()
    except RRError as e:
        logger.error(f"❌ {e}")
        return
    if not entries:
        typer.echo("No servers are running.")
        return
    for entry in entries:
        typer.echo(f"{entry.port}\t{entry.pid}")
