"""Exceptions raised by the reconciler."""


class AllocationError(Exception):
    """The VIP for a Service could not be requested or read."""
