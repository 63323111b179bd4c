"""Exception types for the Lumina Studio editor."""


class LuminaError(Exception):
    """Base class for editor errors."""


class PreconditionError(LuminaError, ValueError):
    """An action was rejected locally before any work was done.

    Raised for a missing current image, an empty instruction, or an AI action
    that is already in flight.
    """


class ServiceError(LuminaError, RuntimeError):
    """The remote image service failed (credentials, transport or model)."""


class RenderError(LuminaError, RuntimeError):
    """A committed image state could not be decoded for rendering."""
