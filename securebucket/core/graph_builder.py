"""Resource graph builder — conditional key, store and role construction.

Steps run in a fixed order because each later step reads the nodes built
before it:

1. encryption key (only when encryption is enabled)
2. store (always), referencing the key when present
3. identity role (only when an identity repository is configured)

Each constructed node registers its named output as it is built.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from securebucket.core.naming import derive_names
from securebucket.core.normalizer import normalize
from securebucket.core.policy_composer import compose_role
from securebucket.models.config import Configuration, RawConfiguration
from securebucket.models.graph import ResourceGraph
from securebucket.models.naming import ResourceNames
from securebucket.models.outputs import NamedOutput, NamedOutputs, OutputAttribute
from securebucket.models.resources import (
    EncryptionKey,
    EncryptionMode,
    IdentityRole,
    Store,
    TrustAnchor,
)

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Builds one ``ResourceGraph`` from a normalized configuration.

    Parameters
    ----------
    config:
        Normalized configuration.
    names:
        Identifiers derived from ``config``.
    trust_anchor:
        Locator of the pre-existing identity provider.  Defaults to the
        well-known GitHub OIDC provider of the deploying account.
    """

    def __init__(
        self,
        config: Configuration,
        names: ResourceNames,
        *,
        trust_anchor: TrustAnchor | None = None,
    ) -> None:
        self.config = config
        self.names = names
        self.trust_anchor = trust_anchor
        self._outputs: list[NamedOutput] = []

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def build_key(self) -> EncryptionKey | None:
        if not self.config.enable_encryption:
            return None
        key = EncryptionKey(
            logical_id="BucketEncryptionKey",
            alias=self.names.key_alias,
            description=f"KMS key for {self.names.store_name}",
        )
        logger.info("Encryption key %s (rotation enabled).", key.alias)
        return key

    def build_store(self, key: EncryptionKey | None) -> Store:
        store = Store(
            logical_id="SecureBucket",
            name=self.names.store_name,
            versioned=self.config.enable_versioning,
            encryption=(
                EncryptionMode.KEY_MANAGED if key is not None
                else EncryptionMode.NONE_MANAGED
            ),
            encryption_key_ref=key.logical_id if key is not None else None,
        )
        logger.info(
            "Store %s (versioned=%s, encryption=%s).",
            store.name, store.versioned, store.encryption.value,
        )
        return store

    def build_role(
        self, store: Store, key: EncryptionKey | None
    ) -> tuple[IdentityRole | None, TrustAnchor | None]:
        if not self.config.identity_repo:
            return None, None
        anchor = self.trust_anchor or TrustAnchor()
        role = compose_role(
            role_name=self.names.role_name,
            project_id=self.config.project_id,
            identity_repo=self.config.identity_repo,
            additional_identity_repos=self.config.additional_identity_repos,
            store=store,
            key=key,
            trust_anchor=anchor,
        )
        logger.info(
            "Identity role %s trusting %d repositor%s.",
            role.name,
            len(role.subject_patterns),
            "y" if len(role.subject_patterns) == 1 else "ies",
        )
        return role, anchor

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    def _register_output(
        self,
        logical_id: str,
        export_name: str,
        source: str,
        attribute: OutputAttribute,
        description: str,
        value: str | None = None,
    ) -> None:
        self._outputs.append(
            NamedOutput(
                logical_id=logical_id,
                export_name=export_name,
                source=source,
                attribute=attribute,
                description=description,
                value=value,
            )
        )

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> ResourceGraph:
        """Run all steps and return the immutable graph."""
        self._outputs = []

        key = self.build_key()
        store = self.build_store(key)
        role, anchor = self.build_role(store, key)

        self._register_output(
            "BucketName",
            self.names.store_export,
            store.logical_id,
            OutputAttribute.NAME,
            "Name of the created S3 bucket",
            value=store.name,
        )
        if role is not None:
            self._register_output(
                "OIDCRoleArn",
                self.names.role_export,
                role.logical_id,
                OutputAttribute.ARN,
                "ARN of the GitHub OIDC role",
            )
        if key is not None:
            self._register_output(
                "KMSKeyArn",
                self.names.key_export,
                key.logical_id,
                OutputAttribute.ARN,
                "ARN of the KMS encryption key",
            )

        return ResourceGraph(
            key=key,
            store=store,
            role=role,
            trust_anchor=anchor,
            outputs=NamedOutputs(entries=tuple(self._outputs)),
        )


def build_graph(
    raw: RawConfiguration | Mapping[str, Any],
    *,
    trust_anchor: TrustAnchor | None = None,
) -> ResourceGraph:
    """Normalize ``raw``, derive names and build the graph in one call."""
    config = normalize(raw)
    return GraphBuilder(config, derive_names(config), trust_anchor=trust_anchor).build()
