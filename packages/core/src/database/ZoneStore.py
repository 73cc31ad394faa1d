"""Stores that hold one JSON zone document per key.

:class:`SupabaseZoneStore` keeps documents in a ``(id, data)`` table;
:class:`LocalZoneFile` mirrors the last written document to a single
pretty-printed JSON file on disk.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from database.errors import ZoneStoreError

logger = logging.getLogger(__name__)


class SupabaseZoneStore:
    """Read and upsert zone documents in a Supabase table.

    The table has a text primary key ``id`` (the zone key) and a JSON
    column ``data`` holding the whole document.
    """

    def __init__(self, client: Client, table: str) -> None:
        self._client = client
        self._table = table

    def load(self, key: str) -> dict | None:
        """Return the document stored under ``key``, or None if absent.

        Raises:
            ZoneStoreError: If the query fails.
        """
        try:
            response = (
                self._client.table(self._table)
                .select("data")
                .eq("id", key)
                .maybe_single()
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise ZoneStoreError(f"Supabase read failed for zone '{key}': {e}") from e

        # maybe_single() yields no response at all when the row is missing.
        row = getattr(response, "data", None) if response is not None else None
        if not isinstance(row, dict):
            return None
        data = row.get("data")
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Zone '%s' does not hold a JSON object; ignoring it", key)
            return None
        return data or None

    def save(self, key: str, data: dict[str, Any]) -> None:
        """Insert or replace the document stored under ``key``.

        Raises:
            ZoneStoreError: If the upsert fails.
        """
        try:
            (
                self._client.table(self._table)
                .upsert({"id": key, "data": data}, on_conflict="id")
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise ZoneStoreError(f"Supabase write failed for zone '{key}': {e}") from e


class LocalZoneFile:
    """A JSON file holding the most recently written zone document.

    The file is shared by every zone key, so it mirrors whatever was saved
    last.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict | None:
        """Return the stored document, or None if the file does not exist.

        Raises:
            ZoneStoreError: If the file cannot be read or is not a JSON object.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise ZoneStoreError(f"Could not read '{self.path}': {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ZoneStoreError(f"'{self.path}' is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ZoneStoreError(f"'{self.path}' does not hold a JSON object")
        return data

    def save(self, data: dict[str, Any]) -> None:
        """Overwrite the file with ``data`` (indented by two spaces).

        Raises:
            ZoneStoreError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise ZoneStoreError(f"Could not write '{self.path}': {e}") from e
