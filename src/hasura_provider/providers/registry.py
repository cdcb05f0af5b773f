from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from hasura_provider.providers.base import ProviderResourceSchema

ProviderFactory = Callable[..., Any]
ResourceFactory = Callable[..., Any]


@dataclass(frozen=True)
class ProviderSpec:
    """Metadata describing a registered provider."""

    name: str
    factory: ProviderFactory
    version: str | None = None
    description: str | None = None


class ProviderRegistry:
    """In-memory registry of providers, keyed by the name the engine uses."""

    def __init__(self) -> None:
        self._providers: Dict[str, ProviderSpec] = {}

    def register(
        self,
        name: str,
        factory: ProviderFactory,
        *,
        version: str | None = None,
        description: str | None = None,
    ) -> None:
        if not name:
            raise ValueError("Provider name is required")
        self._providers[name] = ProviderSpec(
            name=name,
            factory=factory,
            version=version,
            description=description,
        )

    def create(self, name: str, **kwargs: Any) -> Any:
        spec = self._providers.get(name)
        if spec is None:
            raise KeyError(f"Provider '{name}' is not registered")
        return spec.factory(**kwargs)

    def list(self) -> List[ProviderSpec]:
        return list(self._providers.values())


@dataclass(frozen=True)
class ResourceType:
    """A resource type the provider can manage, as the engine addresses it."""

    name: str
    factory: ResourceFactory
    schema: ProviderResourceSchema


class ResourceRegistry:
    """In-memory registry of resource types, keyed by engine type name."""

    def __init__(self) -> None:
        self._types: Dict[str, ResourceType] = {}

    def register(self, resource_cls: Any) -> Any:
        """Register a resource class; usable as a class decorator."""
        schema = resource_cls.schema()
        if not schema.name:
            raise ValueError("Resource type name is required")
        if schema.name in self._types:
            raise ValueError(f"Resource type '{schema.name}' is already registered")
        self._types[schema.name] = ResourceType(
            name=schema.name,
            factory=resource_cls,
            schema=schema,
        )
        return resource_cls

    def create(self, name: str, *args: Any, **kwargs: Any) -> Any:
        resource_type = self._types.get(name)
        if resource_type is None:
            raise KeyError(f"Resource type '{name}' is not registered")
        return resource_type.factory(*args, **kwargs)

    def get(self, name: str) -> ResourceType | None:
        return self._types.get(name)

    def schemas(self) -> List[ProviderResourceSchema]:
        return [resource_type.schema for resource_type in self._types.values()]

    def names(self) -> List[str]:
        return list(self._types)


provider_registry = ProviderRegistry()
resource_registry = ResourceRegistry()


def register_resource(resource_cls: Any) -> Any:
    return resource_registry.register(resource_cls)


def create_resource(name: str, *args: Any, **kwargs: Any) -> Any:
    return resource_registry.create(name, *args, **kwargs)


def list_resource_types() -> List[str]:
    return resource_registry.names()


def register_provider(
    name: str,
    factory: ProviderFactory,
    *,
    version: str | None = None,
    description: str | None = None,
) -> None:
    provider_registry.register(name, factory, version=version, description=description)


def create_provider(name: str, **kwargs: Any) -> Any:
    return provider_registry.create(name, **kwargs)


def list_providers() -> List[ProviderSpec]:
    return provider_registry.list()
