"""Domain exceptions raised by the service layer.

Routers translate ``NotFoundError`` to 404 and ``InvalidRequestError`` to
400; anything else surfaces as a 500 with a fixed per-route message.
"""


class CRMError(Exception):
    """Base class for expected, client-facing failures."""


class NotFoundError(CRMError):
    """A looked-up record does not exist."""


class InvalidRequestError(CRMError):
    """The request is well-formed but not acceptable in the current state."""


class BackendNotConfiguredError(RuntimeError):
    """Raised by every operation of the unconfigured Supabase stand-in."""
