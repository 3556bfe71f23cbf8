"""Error kinds raised by aire_zmvm."""


class InvalidArgument(ValueError):
    """Raised when a call violates a precondition (lengths, power, coordinates)."""
