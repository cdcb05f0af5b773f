"""
Request envelopes and response models for Hasura's metadata API.

Every admin call is a JSON POST of ``{"type": ..., "args": ...}`` to the
same endpoint; the builders here return plain dicts ready for ``json=``.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from hasura_provider.domain.models import RemoteSchema

# Hasura's own default; the provider does not expose it as an attribute
REMOTE_SCHEMA_TIMEOUT_SECONDS = 30

ADD_REMOTE_SCHEMA = "add_remote_schema"
UPDATE_REMOTE_SCHEMA = "update_remote_schema"
REMOVE_REMOTE_SCHEMA = "remove_remote_schema"
RELOAD_REMOTE_SCHEMA = "reload_remote_schema"
EXPORT_METADATA = "export_metadata"


def remote_schema_definition(schema: RemoteSchema) -> dict[str, Any]:
    return {
        "url": schema.url,
        "forward_client_headers": schema.forward_headers,
        "timeout_seconds": REMOTE_SCHEMA_TIMEOUT_SECONDS,
        "headers": schema.header_list(),
    }


def add_remote_schema(schema: RemoteSchema) -> dict[str, Any]:
    return {
        "type": ADD_REMOTE_SCHEMA,
        "args": {"name": schema.name, "definition": remote_schema_definition(schema)},
    }


def update_remote_schema(schema: RemoteSchema) -> dict[str, Any]:
    return {
        "type": UPDATE_REMOTE_SCHEMA,
        "args": {"name": schema.name, "definition": remote_schema_definition(schema)},
    }


def reload_remote_schema(name: str) -> dict[str, Any]:
    return {"type": RELOAD_REMOTE_SCHEMA, "args": {"name": name}}


def remove_remote_schema(name: str) -> dict[str, Any]:
    return {"type": REMOVE_REMOTE_SCHEMA, "args": {"name": name}}


def export_metadata() -> dict[str, Any]:
    return {"type": EXPORT_METADATA, "version": 1, "args": {}}


class ExportedDefinition(BaseModel):
    """Remote schema definition as it appears in exported metadata."""

    # absent for registrations that use url_from_env
    url: str | None = None
    forward_client_headers: bool = False
    timeout_seconds: int | None = None

    class Config:
        extra = "ignore"

    @field_validator("forward_client_headers", mode="before")
    @classmethod
    def _null_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class ExportedRemoteSchema(BaseModel):
    name: str
    definition: ExportedDefinition = Field(default_factory=ExportedDefinition)

    class Config:
        extra = "ignore"


class MetadataExport(BaseModel):
    """The subset of ``export_metadata`` output the provider reads."""

    # entries stay raw; only the one being looked up is validated
    remote_schemas: list[Any] | None = None

    class Config:
        extra = "ignore"

    def find_remote_schema(self, name: str) -> ExportedRemoteSchema | None:
        """Return the validated entry named ``name``, ignoring every other entry.

        Raises pydantic.ValidationError if the matching entry is malformed.
        """
        for entry in self.remote_schemas or []:
            if isinstance(entry, Mapping) and entry.get("name") == name:
                return ExportedRemoteSchema.model_validate(entry)
        return None
