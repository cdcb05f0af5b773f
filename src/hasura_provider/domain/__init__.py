from hasura_provider.domain.models import RemoteSchema

__all__ = ["RemoteSchema"]
