"""
errors.py — Failure types raised by a single net-rendering request.

Every failure is scoped to the request that raised it; nothing is retried
and no partially drawn page is ever handed back.
"""


class PanocraftError(Exception):
    """Base class for all request failures."""


class DecodeFailure(PanocraftError, ValueError):
    """Input bytes could not be decoded into a pixel grid."""


class AllocationFailure(PanocraftError, MemoryError):
    """The page or a working buffer could not be allocated."""


class EncodeFailure(PanocraftError):
    """The finished page could not be serialised to PNG."""


class InvalidParameter(PanocraftError, ValueError):
    """A request parameter was rejected before any pixel work began."""
