"""Configuration management for the rrctl application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

class Config:
    """Application configuration with sensible defaults."""

    # Local state
    CONFIG_DIR_NAME: str = os.getenv("RRCTL_CONFIG_DIR_NAME", ".rr")
    PID_FILE_NAME: str = os.getenv("RRCTL_PID_FILE", "servers.pid")
    LOCK_FILE_NAME: str = os.getenv("RRCTL_LOCK_FILE", "servers.pid.lock")
    LOCK_TIMEOUT: float = float(os.getenv("RRCTL_LOCK_TIMEOUT", "10"))

    # Node configuration discovery
    CONF_SUFFIX: str = os.getenv("RRCTL_CONF_SUFFIX", "conf")
    DEFAULT_CLUSTER_HOST: str = os.getenv("RRCTL_CLUSTER_HOST", "127.0.0.1")

    # External programs
    SERVER_BINARY: str = os.getenv("RRCTL_SERVER_BIN", "redis-server")
    CLI_BINARY: str = os.getenv("RRCTL_CLI_BIN", "redis-cli")
    KILL_BINARY: str = os.getenv("RRCTL_KILL_BIN", "kill")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # API
    API_KEY: str = os.getenv("RRCTL_API_KEY", "rrctl-secret")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values that cannot be defaulted."""
        problems = []
        if not cls.CONFIG_DIR_NAME or os.sep in cls.CONFIG_DIR_NAME:
            problems.append("RRCTL_CONFIG_DIR_NAME must be a single directory name")
        if not cls.CONF_SUFFIX:
            problems.append("RRCTL_CONF_SUFFIX cannot be empty")
        if cls.LOCK_TIMEOUT < 0:
            problems.append("RRCTL_LOCK_TIMEOUT cannot be negative")
        if problems:
            raise ValueError(f"Invalid configuration: {', '.join(problems)}")

# Don't validate on import to allow for dynamic configuration
# Call Config.validate() explicitly when needed
