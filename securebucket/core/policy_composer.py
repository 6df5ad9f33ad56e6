"""Trust & permission policy composer for the federated-identity role.

Trust: a token may assume the role when its audience equals the STS
audience, it was issued by the trust anchor, and its ``sub`` claim matches
``repo:{owner/repo}:*`` for at least one trusted repository.  The wildcard
admits any branch, tag, pull request or environment of that repository;
the repository itself is the hard boundary.

Permissions are composed in a fixed order:

1. read/write on the store and its objects
2. encrypt/decrypt on the key (only when a key exists)
3. the provisioning-engine managed policy (broad)
4. an inline wildcard-resource statement for IAM, S3 and KMS (broad)

Grants 3 and 4 are a known over-privilege carried over from the deployment
use case.  They are flagged ``broad=True`` so they can be asserted on, and
narrowed, without touching the scoped grants.
"""

from __future__ import annotations

import logging

from securebucket.models.policy import Grant, GrantKind, TrustPolicy
from securebucket.models.resources import (
    STS_AUDIENCE,
    EncryptionKey,
    IdentityRole,
    Store,
    TrustAnchor,
)

logger = logging.getLogger(__name__)

PROVISIONING_MANAGED_POLICY = "AWSCloudFormationFullAccess"

PROVISIONING_INLINE_ACTIONS: tuple[str, ...] = (
    "iam:CreateRole",
    "iam:DeleteRole",
    "iam:AttachRolePolicy",
    "iam:DetachRolePolicy",
    "iam:PutRolePolicy",
    "iam:DeleteRolePolicy",
    "iam:GetRole",
    "iam:GetRolePolicy",
    "iam:PassRole",
    "iam:TagRole",
    "iam:UntagRole",
    "sts:GetCallerIdentity",
    "s3:*",
    "kms:*",
)


def subject_pattern(repo: str) -> str:
    """``owner/repo`` -> ``repo:owner/repo:*``."""
    return f"repo:{repo}:*"


def compose_trust_policy(
    identity_repo: str,
    additional_identity_repos: tuple[str, ...] | list[str],
    trust_anchor: TrustAnchor,
) -> TrustPolicy:
    """Derive the trust conditions for the role.

    ``identity_repo`` always comes first, followed by the additional
    repositories in input order.  Duplicates are preserved.  The anchor is
    only referenced; its existence is not checked here.
    """
    repos = [identity_repo, *additional_identity_repos]
    patterns = tuple(subject_pattern(r) for r in repos)
    logger.debug("Trust subject patterns: %s", list(patterns))
    return TrustPolicy(
        issuer=trust_anchor.issuer,
        audience=STS_AUDIENCE,
        subject_patterns=patterns,
    )


def compose_grants(store: Store, key: EncryptionKey | None = None) -> tuple[Grant, ...]:
    """Return the role's grants in attachment order."""
    grants: list[Grant] = [
        Grant(
            sid="StoreReadWrite",
            kind=GrantKind.STORE_READ_WRITE,
            target=store.logical_id,
        )
    ]
    if key is not None:
        grants.append(
            Grant(
                sid="KeyEncryptDecrypt",
                kind=GrantKind.KEY_ENCRYPT_DECRYPT,
                target=key.logical_id,
            )
        )
    grants.append(
        Grant(
            sid="ProvisioningManagedPolicy",
            kind=GrantKind.MANAGED_POLICY,
            target=PROVISIONING_MANAGED_POLICY,
            broad=True,
        )
    )
    grants.append(
        Grant(
            sid="ProvisioningWildcard",
            kind=GrantKind.INLINE_STATEMENT,
            target="*",
            actions=PROVISIONING_INLINE_ACTIONS,
            broad=True,
        )
    )

    logger.warning(
        "Role permissions include broad wildcard grants: managed policy %s "
        "and inline statement %s.",
        PROVISIONING_MANAGED_POLICY,
        "ProvisioningWildcard",
    )
    return tuple(grants)


def compose_role(
    *,
    role_name: str,
    project_id: str,
    identity_repo: str,
    additional_identity_repos: tuple[str, ...] | list[str],
    store: Store,
    key: EncryptionKey | None,
    trust_anchor: TrustAnchor,
    logical_id: str = "GitHubOIDCRole",
) -> IdentityRole:
    """Build the federated-identity role from already-constructed nodes.

    ``store`` and ``key`` are read for their identifiers only; the role keeps
    their logical ids, not the nodes themselves.
    """
    return IdentityRole(
        logical_id=logical_id,
        name=role_name,
        description=f"GitHub OIDC role for {project_id} deployments",
        trust_policy=compose_trust_policy(
            identity_repo, additional_identity_repos, trust_anchor
        ),
        grants=compose_grants(store, key),
        store_ref=store.logical_id,
        key_ref=key.logical_id if key is not None else None,
    )
