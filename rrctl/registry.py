"""PID registry of node processes started by rrctl.

The registry lives in a hidden per-user directory (``$HOME/.rr`` by default)
as a plain text file with one ``<port> <pid>`` line per running node. It is
the only record of what this tool started: it is never cross-checked against
the process table, and every save overwrites the whole file.
"""
import fcntl
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

from rrctl.config import Config
from rrctl.errors import ConfigDirUnavailable, RegistryBusy, RegistryIOError
from rrctl.modules.models import PIDEntry

logger = logging.getLogger("rrctl.registry")

MAX_PID = 2 ** 32 - 1
LOCK_POLL_INTERVAL = 0.1

def get_home_dir() -> Optional[str]:
    """Return $HOME, or None when it is not set."""
    return os.environ.get("HOME")

def get_or_create_config_dir() -> Path:
    """Get the path for, and create if needed, the home config directory.

    Raises:
        ConfigDirUnavailable: If $HOME is unset or the directory cannot be created
    """
    home = get_home_dir()
    if not home:
        raise ConfigDirUnavailable("No value found for $HOME, cannot create CLI context.")

    config_dir = Path(home) / Config.CONFIG_DIR_NAME
    if not config_dir.exists():
        try:
            config_dir.mkdir()
        except OSError as e:
            raise ConfigDirUnavailable(
                f"Failed to create non-existent config directory {config_dir}: {e}"
            ) from e
        logger.debug(f"Created config directory {config_dir}")
    return config_dir

def parse_line(line: str) -> Optional[PIDEntry]:
    """Parse one ``port pid`` line, returning None for anything malformed."""
    parts = line.split()
    if len(parts) != 2:
        return None
    port, raw_pid = parts
    digits = raw_pid[1:] if raw_pid.startswith("+") else raw_pid
    if not (digits.isascii() and digits.isdecimal()):
        return None
    pid = int(digits)
    if pid > MAX_PID:
        return None
    return PIDEntry(port=port, pid=pid)

class PIDRegistry:
    """File-backed set of PIDEntry for the nodes currently believed running.

    Args:
        config_dir: Directory holding the PID file. When omitted it is
            resolved (and created) under $HOME on first use.
        file_name: Name of the PID file inside config_dir
        lock_timeout: Seconds to wait for the registry lock
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        file_name: Optional[str] = None,
        lock_timeout: Optional[float] = None,
    ):
        self._config_dir = Path(config_dir) if config_dir is not None else None
        self.file_name = file_name or Config.PID_FILE_NAME
        self.lock_timeout = Config.LOCK_TIMEOUT if lock_timeout is None else lock_timeout

    @property
    def config_dir(self) -> Path:
        if self._config_dir is None:
            self._config_dir = get_or_create_config_dir()
        return self._config_dir

    @property
    def path(self) -> Path:
        return self.config_dir / self.file_name

    @property
    def lock_path(self) -> Path:
        return self.config_dir / Config.LOCK_FILE_NAME

    def _open_or_create(self):
        path = self.path
        try:
            if not path.exists():
                logger.debug(f"Creating empty PID file {path}")
                return open(path, "w+")
            return open(path, "r")
        except OSError as e:
            raise RegistryIOError(f"Failed to open PID file {path}: {e}") from e

    def load(self) -> Set[PIDEntry]:
        """Read the registry, creating an empty PID file if there is none.

        Malformed lines are skipped rather than failing the read.

        Raises:
            ConfigDirUnavailable: If the config directory cannot be resolved
            RegistryIOError: If the PID file cannot be created or read
        """
        entries: Set[PIDEntry] = set()
        with self._open_or_create() as f:
            try:
                for line in f:
                    entry = parse_line(line)
                    if entry is None:
                        if line.strip():
                            logger.debug(f"Ignoring malformed registry line: {line.rstrip()!r}")
                        continue
                    entries.add(entry)
            except (OSError, UnicodeDecodeError) as e:
                raise RegistryIOError(f"Failed to read PID file {self.path}: {e}") from e
        return entries

    def save(self, entries: Iterable[PIDEntry]) -> None:
        """Overwrite the PID file with exactly the given entries.

        Raises:
            ConfigDirUnavailable: If the config directory cannot be resolved
            RegistryIOError: If the PID file cannot be created or written
        """
        path = self.path
        try:
            with open(path, "w") as f:
                for entry in entries:
                    f.write(entry.to_line())
        except OSError as e:
            raise RegistryIOError(f"Failed to write PID file {path}: {e}") from e

    def clear(self) -> None:
        self.save(())

    @contextmanager
    def locked(self, timeout: Optional[float] = None) -> Iterator["PIDRegistry"]:
        """Hold an exclusive lock on the registry for a load-modify-save sequence.

        Raises:
            RegistryBusy: If the lock is not acquired within the timeout
            RegistryIOError: If the lock file cannot be opened
        """
        timeout = self.lock_timeout if timeout is None else timeout
        lock_path = self.lock_path
        try:
            lock_fd = open(lock_path, "a+")
        except OSError as e:
            raise RegistryIOError(f"Failed to open registry lock {lock_path}: {e}") from e

        try:
            start_time = time.monotonic()
            while True:
                try:
                    fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except OSError:
                    if time.monotonic() - start_time >= timeout:
                        raise RegistryBusy(
                            f"Could not acquire registry lock within {timeout}s. "
                            "Another rrctl command may be running."
                        )
                    time.sleep(LOCK_POLL_INTERVAL)

            try:
                yield self
            finally:
                fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)
        finally:
            lock_fd.close()
