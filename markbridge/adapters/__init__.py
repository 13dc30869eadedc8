"""Collaborator implementations backed by real services and static data."""

from .identities import MappingIdentityResolver, load_identity_mapping
from .slack import SlackChannelDirectory

__all__ = [
    "MappingIdentityResolver",
    "SlackChannelDirectory",
    "load_identity_mapping",
]
