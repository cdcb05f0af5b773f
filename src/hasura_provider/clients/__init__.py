"""Client for the Hasura metadata (admin) API."""

from hasura_provider.clients.admin import ADMIN_SECRET_HEADER, HasuraAdminClient

__all__ = ["ADMIN_SECRET_HEADER", "HasuraAdminClient"]
