"""
rrctl - local orchestrator for a multi-node server cluster.

Discovers node configuration files, launches one server process per node,
forms them into a cluster, and tracks what it started in a PID registry
under the user's home directory so later runs can stop or check it.

Key modules:
- registry: PID registry persisted in ~/.rr/servers.pid
- modules.confsource: discovery and parsing of node .conf files
- modules.launcher: external process launching
- modules.runtime: ClusterRuntime start/stop/check
- cli: Typer command line entry point
- api.main: FastAPI application
"""

__version__ = "0.1.0"
