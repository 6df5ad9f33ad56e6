"""Securebucket data models — all Pydantic v2, all frozen (immutable)."""

from securebucket.models.config import Configuration, RawConfiguration
from securebucket.models.graph import ResourceGraph
from securebucket.models.naming import ResourceNames
from securebucket.models.outputs import NamedOutput, NamedOutputs, OutputAttribute
from securebucket.models.policy import Grant, GrantKind, TrustPolicy
from securebucket.models.resources import (
    GITHUB_OIDC_ISSUER,
    MAX_SESSION_DURATION_SECONDS,
    STS_AUDIENCE,
    EncryptionKey,
    EncryptionMode,
    IdentityRole,
    ResourceKind,
    ResourceNode,
    Store,
    TrustAnchor,
)

__all__ = [
    # config
    "RawConfiguration",
    "Configuration",
    # naming
    "ResourceNames",
    # policy
    "Grant",
    "GrantKind",
    "TrustPolicy",
    # resources
    "GITHUB_OIDC_ISSUER",
    "STS_AUDIENCE",
    "MAX_SESSION_DURATION_SECONDS",
    "EncryptionMode",
    "ResourceKind",
    "ResourceNode",
    "TrustAnchor",
    "EncryptionKey",
    "Store",
    "IdentityRole",
    # outputs
    "OutputAttribute",
    "NamedOutput",
    "NamedOutputs",
    # graph
    "ResourceGraph",
]
