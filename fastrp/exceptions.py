"""Exception hierarchy for the embedding and centrality engines."""


class FastRPError(Exception):
    """Base class for every error raised by fastrp."""


class ConfigurationError(FastRPError, ValueError):
    """Raised when an algorithm configuration is invalid."""


class ComputationError(FastRPError):
    """Raised when results are requested from a computation that has none."""


class ComputationTerminated(ComputationError):
    """Raised when a termination flag stops a running computation."""


class MemoryEstimationError(FastRPError):
    """Raised when an estimated footprint exceeds the available budget."""
