"""
hasura-provider - manage Hasura remote schemas from a declarative engine.

Translates create/read/update/delete of the ``hasura_remote_schema``
resource into calls against Hasura's metadata API.
"""

__version__ = "0.1.0"
