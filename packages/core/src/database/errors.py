"""Exceptions raised by the zone stores."""


class ZoneStoreError(RuntimeError):
    """A single store failed to read or write a zone document."""


class ZoneWriteError(RuntimeError):
    """No configured store accepted a zone document."""
