"""Provider and resource handlers exposed to the declarative engine."""

# Import for side effects (provider and resource registration)
from hasura_provider.providers.hasura import HasuraProvider, RemoteSchemaResource
from hasura_provider.providers.registry import (
    create_provider,
    create_resource,
    list_providers,
    list_resource_types,
    register_provider,
    register_resource,
)

__all__ = [
    "HasuraProvider",
    "RemoteSchemaResource",
    "create_provider",
    "create_resource",
    "list_providers",
    "list_resource_types",
    "register_provider",
    "register_resource",
]
