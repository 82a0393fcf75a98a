"""
Domain exceptions for circuit generation and management.
"""


class CircuitError(Exception):
    """Base exception for circuit-related errors."""
    pass


class InvalidCircuitRequestError(CircuitError):
    """Request is malformed (e.g., missing academic year). Raised before the pipeline runs."""
    pass


class CircuitNotFoundError(CircuitError):
    """No circuit is stored under the given ID."""
    pass


class InvalidStatusTransitionError(CircuitError):
    """Status change would move a circuit backwards in its lifecycle."""
    pass


class CircuitCustomizationError(CircuitError):
    """Requested city list cannot form a valid circuit."""
    pass
