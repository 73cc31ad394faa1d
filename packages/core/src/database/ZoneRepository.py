"""Read/write zone documents across the remote store and the local file.

A write succeeds as long as one configured sink accepts the document.  It
fails when the local file is the only sink and cannot be written, and also
when every configured sink fails.
"""

import logging
from typing import Any, Protocol

from database.ZoneStore import LocalZoneFile
from database.errors import ZoneStoreError, ZoneWriteError

logger = logging.getLogger(__name__)


class RemoteZoneStore(Protocol):
    def load(self, key: str) -> dict | None: ...

    def save(self, key: str, data: dict[str, Any]) -> None: ...


class ZoneRepository:
    """Combine an optional remote store with an optional local mirror.

    Reads prefer the remote store and fall back to the local file when the
    remote fails or has no row.  Writes go to every configured sink
    independently; one failing sink never blocks the other.
    """

    def __init__(
        self,
        remote: RemoteZoneStore | None = None,
        local: LocalZoneFile | None = None,
    ) -> None:
        self.remote = remote
        self.local = local

    def read(self, key: str) -> dict | None:
        """Return the document for ``key``, or None when no store has one."""
        if self.remote is not None:
            try:
                data = self.remote.load(key)
            except ZoneStoreError as e:
                logger.error("%s; falling back to local file", e)
            else:
                if isinstance(data, dict):
                    return data
                if data is not None:
                    logger.warning(
                        "Remote zone '%s' is not a JSON object; using local file", key
                    )

        if self.local is None:
            return None
        try:
            return self.local.load()
        except ZoneStoreError as e:
            logger.error("%s", e)
            return None

    def write(self, key: str, data: dict[str, Any]) -> list[str]:
        """Write ``data`` to every configured sink.

        Returns:
            Names of the sinks that accepted the document ("remote", "local").

        Raises:
            ZoneWriteError: If no configured sink accepted it.
        """
        written: list[str] = []
        failures: list[str] = []

        if self.remote is not None:
            try:
                self.remote.save(key, data)
                written.append("remote")
            except ZoneStoreError as e:
                logger.error("Remote save error: %s", e)
                failures.append("remote")

        if self.local is not None:
            try:
                self.local.save(data)
                written.append("local")
            except ZoneStoreError as e:
                logger.error("Local file save error: %s", e)
                failures.append("local")

        if not written:
            if not failures:
                raise ZoneWriteError("No zone storage is configured")
            if failures == ["local"]:
                raise ZoneWriteError(
                    "Failed to save locally and Supabase not configured"
                )
            raise ZoneWriteError("Failed to save zone data")

        logger.info("Saved zone '%s' to %s", key, ", ".join(written))
        return written
