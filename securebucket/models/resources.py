"""Resource node models — the three nodes a construction pass can emit.

Nodes describe *what* to build.  ARNs and other substrate-assigned values
are not modeled here; they come from the constructs that realize a node.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from securebucket.models.policy import Grant, TrustPolicy

GITHUB_OIDC_ISSUER = "token.actions.githubusercontent.com"
STS_AUDIENCE = "sts.amazonaws.com"
MAX_SESSION_DURATION_SECONDS = 3600


class EncryptionMode(str, Enum):
    """Store encryption at rest.

    NONE_MANAGED is the substrate's default (service-managed keys), not
    "unencrypted".
    """

    NONE_MANAGED = "none-managed"
    KEY_MANAGED = "key-managed"


class ResourceKind(str, Enum):
    ENCRYPTION_KEY = "encryption_key"
    STORE = "store"
    IDENTITY_ROLE = "identity_role"


class ResourceNode(BaseModel):
    """Common fields of every graph node."""

    model_config = ConfigDict(frozen=True)

    logical_id: str
    kind: ResourceKind

    @property
    @abstractmethod
    def physical_name(self) -> str:
        """Account-level name the node materializes under."""


class TrustAnchor(BaseModel):
    """Pre-existing identity-provider trust anchor, referenced only.

    ``arn`` is an injected locator.  When unset, the well-known provider
    for ``issuer`` in the deploying account is used.
    """

    model_config = ConfigDict(frozen=True)

    logical_id: str = "GitHubOIDCProvider"
    issuer: str = GITHUB_OIDC_ISSUER
    arn: str | None = None


class EncryptionKey(ResourceNode):
    """Customer-managed key protecting the store."""

    kind: Literal[ResourceKind.ENCRYPTION_KEY] = ResourceKind.ENCRYPTION_KEY
    alias: str
    description: str
    rotation_enabled: Literal[True] = True

    @property
    def physical_name(self) -> str:
        return self.alias


class Store(ResourceNode):
    """The object store.  Public access block and TLS-only cannot be turned off."""

    kind: Literal[ResourceKind.STORE] = ResourceKind.STORE
    name: str
    versioned: bool = False
    encryption: EncryptionMode = EncryptionMode.NONE_MANAGED
    encryption_key_ref: str | None = None  # logical id of the key
    block_public_access: Literal[True] = True
    enforce_ssl: Literal[True] = True
    auto_delete_objects: bool = True

    @model_validator(mode="after")
    def _check_encryption_ref(self) -> Store:
        key_managed = self.encryption is EncryptionMode.KEY_MANAGED
        if key_managed != (self.encryption_key_ref is not None):
            raise ValueError(
                "encryption_key_ref must be set exactly when encryption is key-managed"
            )
        return self

    @property
    def physical_name(self) -> str:
        return self.name


class IdentityRole(ResourceNode):
    """Federated-identity role assumable from trusted repositories.

    ``store_ref`` and ``key_ref`` are the logical ids of the nodes the
    grants were derived from; the role does not own them.
    """

    kind: Literal[ResourceKind.IDENTITY_ROLE] = ResourceKind.IDENTITY_ROLE
    name: str
    description: str
    trust_policy: TrustPolicy
    grants: tuple[Grant, ...]
    max_session_duration_seconds: Literal[3600] = MAX_SESSION_DURATION_SECONDS
    store_ref: str
    key_ref: str | None = None

    @property
    def physical_name(self) -> str:
        return self.name

    @property
    def subject_patterns(self) -> list[str]:
        return list(self.trust_policy.subject_patterns)

    def broad_grants(self) -> list[Grant]:
        """Wildcard-scoped grants, in attachment order."""
        return [g for g in self.grants if g.broad]

    def scoped_grants(self) -> list[Grant]:
        return [g for g in self.grants if not g.broad]
