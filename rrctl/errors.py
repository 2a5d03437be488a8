"""Exceptions raised by rrctl operations."""


class RRError(Exception):
    """Base exception for every rrctl failure surfaced to the operator."""
    pass

# Registry
class RegistryError(RRError):
    """Base exception for PID registry errors."""
    pass

class ConfigDirUnavailable(RegistryError):
    """Raised when the per-user config directory cannot be resolved or created."""
    pass

class RegistryIOError(RegistryError):
    """Raised when the PID file cannot be opened, created, read or written."""
    pass

class RegistryBusy(RegistryError):
    """Raised when another rrctl invocation holds the registry lock."""
    pass

# Runtime
class IndeterminateState(RRError):
    """Raised when the registry cannot be read, so occupancy is unknown."""
    pass

class AlreadyRunning(RRError):
    pass

class NotRunning(RRError):
    pass

class NoValidConfigs(RRError):
    pass

class SpawnError(RRError):
    """Raised when a single external process fails to launch."""
    pass

class FormationLaunchFailed(RRError):
    pass

class TerminationLaunchFailed(RRError):
    pass

class HealthCheckFailed(RRError):
    pass

# Configuration files
class ConfigSourceError(RRError):
    """Raised for an unusable discovery base or node configuration file."""
    pass
