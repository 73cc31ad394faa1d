"""Supabase client provider.

Creates the single service-role client the zone store talks through.
"""

from supabase import Client, create_client


class DatabaseProvider:
    """Own one Supabase client for the lifetime of the service."""

    def __init__(self, url: str, service_role_key: str) -> None:
        """Create a client for the given project.

        Args:
            url: Supabase project URL.
            service_role_key: Service-role key used for table access.

        Raises:
            ConnectionError: If the client cannot be created from the
                given URL and key.
        """
        try:
            self._client = create_client(url, service_role_key)
        except Exception as e:  # noqa: BLE001
            raise ConnectionError(
                f"Failed to create Supabase client for '{url}': {e}"
            ) from e

    def get_client(self) -> Client:
        """Return the underlying Supabase client."""
        return self._client
