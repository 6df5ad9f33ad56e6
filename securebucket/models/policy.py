"""Trust and permission models for the identity role.

Permissions are an ordered sequence of explicit grants, never an opaque
policy document, so the broad grants can be inspected (and later
tightened) independently of the scoped ones.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class GrantKind(str, Enum):
    """How a grant is attached to the role."""

    STORE_READ_WRITE = "store_read_write"  # target: store logical id
    KEY_ENCRYPT_DECRYPT = "key_encrypt_decrypt"  # target: key logical id
    MANAGED_POLICY = "managed_policy"  # target: provider-managed policy name
    INLINE_STATEMENT = "inline_statement"  # target: resource scope


class Grant(BaseModel):
    """A single (action-set, resource-scope) grant."""

    model_config = ConfigDict(frozen=True)

    sid: str
    kind: GrantKind
    target: str
    actions: tuple[str, ...] = ()  # explicit actions, inline statements only
    broad: bool = False  # wildcard scope, known over-privilege

    @property
    def is_wildcard_resource(self) -> bool:
        return self.kind is GrantKind.INLINE_STATEMENT and self.target == "*"


class TrustPolicy(BaseModel):
    """Token conditions under which the role may be assumed.

    Semantics: ``audience`` equality AND issuer (implied by the federated
    provider) AND any-of ``subject_patterns``.
    """

    model_config = ConfigDict(frozen=True)

    issuer: str
    audience: str
    subject_patterns: tuple[str, ...]

    @property
    def audience_claim(self) -> str:
        return f"{self.issuer}:aud"

    @property
    def subject_claim(self) -> str:
        return f"{self.issuer}:sub"

    def conditions(self) -> dict[str, dict[str, Any]]:
        """Condition block for the federated principal."""
        return {
            "StringEquals": {self.audience_claim: self.audience},
            "StringLike": {self.subject_claim: list(self.subject_patterns)},
        }
