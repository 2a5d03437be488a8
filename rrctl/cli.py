import logging

import typer

from rrctl.commands import cluster, config
from rrctl.config import Config

app = typer.Typer(help="rrctl - local multi-node cluster runner.")

# Configure logging
def setup_logging(debug: bool = False):
    """Configure logging based on debug mode."""
    log_level = logging.DEBUG if debug else getattr(logging, Config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=Config.LOG_FORMAT,
        handlers=[
            logging.StreamHandler()
        ]
    )

# Add all command groups
app.add_typer(config.app, name="config")
app.add_typer(cluster.app, name="cluster")

@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Address to bind the API server to"),
    port: int = typer.Option(8000, "--port", help="Port to bind the API server to"),
):
    """Serve the rrctl HTTP API."""
    import uvicorn
    uvicorn.run("rrctl.api.main:app", host=host, port=port)

# Global options callback
@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """rrctl - run a local multi-node cluster from a directory of .conf files."""
    setup_logging(debug)
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Debug mode enabled")

    try:
        Config.validate()
    except ValueError as e:
        logging.getLogger("rrctl.cli").error(f"❌ {e}")
        raise typer.Exit()

if __name__ == "__main__":
    app()
