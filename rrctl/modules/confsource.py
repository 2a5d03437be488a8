"""Discovery and parsing of node configuration files.

A node configuration file is any regular file whose extension matches
``Config.CONF_SUFFIX`` (case-insensitively). Its contents are read as flat
``key value`` lines; only lines that split into exactly two tokens count.
"""
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from rrctl.config import Config
from rrctl.errors import ConfigSourceError

logger = logging.getLogger("rrctl.confsource")

PathLike = Union[str, Path]

def resolve_base_dir(base_dir: Optional[PathLike] = None) -> Path:
    """Return the discovery base, defaulting to the current working directory."""
    if base_dir is None:
        return Path.cwd()
    return Path(base_dir).expanduser()

def has_conf_suffix(path: PathLike, suffix: Optional[str] = None) -> bool:
    suffix = (suffix or Config.CONF_SUFFIX).lower()
    return Path(path).suffix[1:].lower() == suffix

def discover(base_dir: PathLike, suffix: Optional[str] = None) -> List[Path]:
    """Recursively collect node configuration files under base_dir.

    Unreadable directories are skipped silently.

    Args:
        base_dir: Directory to walk
        suffix: Extension to match, without the dot (default: Config.CONF_SUFFIX)

    Returns:
        Matching file paths in walk order

    Raises:
        ConfigSourceError: If base_dir is not a directory
    """
    base = Path(base_dir)
    if not base.is_dir():
        raise ConfigSourceError(f"Entry {base} is not a directory.")

    found: List[Path] = []
    for root, dirs, files in os.walk(base, followlinks=True):
        dirs.sort()
        for name in sorted(files):
            candidate = Path(root) / name
            if candidate.is_file() and has_conf_suffix(candidate, suffix):
                found.append(candidate)
    return found

def read(path: PathLike) -> Dict[str, str]:
    """Parse a node configuration file into a key -> value mapping.

    Raises:
        ConfigSourceError: If the file has the wrong extension or cannot be read
    """
    path = Path(path)
    if not has_conf_suffix(path):
        raise ConfigSourceError(f"{path} is not a .{Config.CONF_SUFFIX} file.")

    settings: Dict[str, str] = {}
    try:
        with open(path, "r") as f:
            for line in f:
                parts = line.split()
                if len(parts) == 2:
                    key, value = parts
                    settings[key] = value
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigSourceError(f"Failed to read {path}: {e}") from e
    return settings

def list_conf_files(base_dir: Optional[PathLike] = None) -> List[Path]:
    """Discover configuration files for listing, validating the base first.

    Raises:
        ConfigSourceError: If the base directory does not exist or is not a directory
    """
    base = resolve_base_dir(base_dir)
    if not base.exists():
        raise ConfigSourceError("The given base_dir does not exist.")
    files = discover(base)
    for f in files:
        logger.debug(f"Found configuration file {f}")
    return files
