"""Exceptions raised by Signal Desk."""


class SignalDeskError(Exception):
    """Base class for Signal Desk errors."""


class GenerationError(SignalDeskError):
    """The external generation service failed (network, auth, quota)."""


class PersistenceError(SignalDeskError):
    """A durable write to local storage did not complete.

    The in-memory collection still reflects the change that triggered the
    write; only durability is lost.
    """
