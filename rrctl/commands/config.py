import logging
from pathlib import Path
from typing import Optional

import typer

from rrctl.errors import RRError
from rrctl.modules import confsource

app = typer.Typer(help="Inspect node configuration files.")
logger = logging.getLogger("rrctl.commands.config")

@app.command("ls")
def list_configs(
    base_dir: Optional[Path] = typer.Option(
        None, "--base-dir", "-b", help="Directory to search (default: current directory)"
    ),
):
    """List node configuration files found under the base directory."""
    try:
        files = confsource.list_conf_files(base_dir)
    except RRError as e:
        logger.error(f"❌ {e}")
        return

    for f in files:
        typer.echo(str(f))
    typer.echo(f"✅ Found {len(files)} configuration files.")
