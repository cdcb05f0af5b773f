from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Protocol

from hasura_provider.core.diagnostics import Diagnostic, Diagnostics, Severity
from hasura_provider.core.values import UNKNOWN, is_unknown

__all__ = [
    "UNKNOWN",
    "AttributeSchema",
    "Diagnostic",
    "Diagnostics",
    "Provider",
    "ProviderResource",
    "ProviderResourceSchema",
    "ResourceResponse",
    "Severity",
    "is_unknown",
]


@dataclass(frozen=True)
class AttributeSchema:
    """Type and presence rules for a single attribute."""

    type: Literal["string", "bool", "map(string)"]
    description: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "description": self.description,
            "required": self.required,
            "optional": self.optional,
            "computed": self.computed,
            "sensitive": self.sensitive,
        }


@dataclass(frozen=True)
class ProviderResourceSchema:
    """Schema metadata describing a provider-managed resource."""

    name: str
    description: str
    attributes: dict[str, AttributeSchema]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "attributes": {key: attr.to_dict() for key, attr in self.attributes.items()},
        }


@dataclass
class ResourceResponse:
    """Outcome of one lifecycle call.

    ``state`` holds the prior state the engine handed in and is only
    replaced when the call succeeds, so a failed call returns it unchanged.
    """

    state: dict[str, Any] | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class ProviderResource(Protocol):
    """Contract for provider-managed resources."""

    @staticmethod
    def schema() -> ProviderResourceSchema:
        ...

    async def create(self, plan: Mapping[str, Any]) -> ResourceResponse:
        ...

    async def read(self, state: Mapping[str, Any]) -> ResourceResponse:
        ...

    async def update(self, plan: Mapping[str, Any], state: Mapping[str, Any]) -> ResourceResponse:
        ...

    async def delete(self, state: Mapping[str, Any]) -> ResourceResponse:
        ...


class Provider(Protocol):
    """Minimal provider interface exposed to the declarative engine."""

    name: str

    def configure(self, values: Mapping[str, Any]) -> Diagnostics:
        ...

    async def resources(self) -> list[ProviderResourceSchema]:
        ...
