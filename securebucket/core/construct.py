"""SecureBucket construct and its deployable stack wrapper.

The construct runs one synchronous pass::

    normalize -> derive_names -> GraphBuilder.build -> ResourceGraph

and then realizes the graph as CDK resources: a KMS key (optional), the
S3 bucket, the GitHub OIDC role (optional) and one ``CfnOutput`` per
named output.  The graph is kept on the construct and never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from aws_cdk import CfnOutput, Duration, RemovalPolicy, Stack
from aws_cdk import aws_iam as iam
from aws_cdk import aws_kms as kms
from aws_cdk import aws_s3 as s3
from constructs import Construct

from securebucket.core.graph_builder import GraphBuilder
from securebucket.core.naming import derive_names
from securebucket.core.normalizer import normalize
from securebucket.models.config import Configuration, RawConfiguration
from securebucket.models.graph import ResourceGraph
from securebucket.models.naming import ResourceNames
from securebucket.models.outputs import NamedOutput, OutputAttribute
from securebucket.models.policy import GrantKind
from securebucket.models.resources import (
    EncryptionKey,
    IdentityRole,
    Store,
    TrustAnchor,
)

logger = logging.getLogger(__name__)


class SecureBucket(Construct):
    """A secure S3 bucket with an optional KMS key and GitHub OIDC role.

    Parameters
    ----------
    scope, construct_id:
        Usual CDK construct placement.
    config:
        Configuration as supplied (``RawConfiguration`` or a mapping with
        snake_case or camelCase keys).
    trust_anchor:
        Inject a specific OIDC provider ARN instead of the well-known
        GitHub provider of the stack's account.

    Attributes
    ----------
    graph:
        The validated ``ResourceGraph`` the resources were built from.
    bucket, kms_key, oidc_role, oidc_provider:
        The CDK constructs.  ``kms_key`` is ``None`` without encryption;
        ``oidc_role`` and ``oidc_provider`` are ``None`` without an
        identity repository.
    cfn_outputs:
        ``CfnOutput`` per output logical id.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        config: RawConfiguration | Mapping[str, Any],
        trust_anchor: TrustAnchor | None = None,
    ) -> None:
        super().__init__(scope, construct_id)

        self.config: Configuration = normalize(config)
        self.names: ResourceNames = derive_names(self.config)
        self.graph: ResourceGraph = GraphBuilder(
            self.config, self.names, trust_anchor=trust_anchor
        ).build()

        self.kms_key: kms.Key | None = None
        self.oidc_role: iam.Role | None = None
        self.oidc_provider: iam.IOpenIdConnectProvider | None = None
        self.cfn_outputs: dict[str, CfnOutput] = {}

        if self.graph.key is not None:
            self.kms_key = self._create_key(self.graph.key)
        self.bucket = self._create_bucket(self.graph.store)
        if self.graph.role is not None:
            self.oidc_role = self._create_role(self.graph.role)
        for output in self.graph.outputs.entries:
            self.cfn_outputs[output.logical_id] = self._create_output(output)

        logger.info(
            "Constructed %s: %d resource(s), %d output(s).",
            self.names.store_name,
            len(self.graph.nodes),
            len(self.graph.outputs),
        )

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def _create_key(self, key: EncryptionKey) -> kms.Key:
        kms_key = kms.Key(
            self,
            key.logical_id,
            description=key.description,
            enable_key_rotation=key.rotation_enabled,
            removal_policy=RemovalPolicy.DESTROY,
        )
        kms_key.add_alias(key.alias)
        return kms_key

    def _create_bucket(self, store: Store) -> s3.Bucket:
        if self.kms_key is not None:
            encryption = s3.BucketEncryption.KMS
        else:
            encryption = s3.BucketEncryption.S3_MANAGED
        return s3.Bucket(
            self,
            store.logical_id,
            bucket_name=store.name,
            versioned=store.versioned,
            encryption=encryption,
            encryption_key=self.kms_key,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=store.auto_delete_objects,
        )

    def _provider_arn(self, anchor: TrustAnchor) -> str:
        if anchor.arn is not None:
            return anchor.arn
        return Stack.of(self).format_arn(
            service="iam",
            region="",
            resource="oidc-provider",
            resource_name=anchor.issuer,
        )

    def _create_role(self, role: IdentityRole) -> iam.Role:
        anchor = self.graph.trust_anchor
        assert anchor is not None  # guaranteed by ResourceGraph validation
        self.oidc_provider = iam.OpenIdConnectProvider.from_open_id_connect_provider_arn(
            self, anchor.logical_id, self._provider_arn(anchor)
        )
        oidc_role = iam.Role(
            self,
            role.logical_id,
            role_name=role.name,
            assumed_by=iam.OpenIdConnectPrincipal(
                self.oidc_provider, conditions=role.trust_policy.conditions()
            ),
            description=role.description,
            max_session_duration=Duration.seconds(role.max_session_duration_seconds),
        )

        for grant in role.grants:
            if grant.kind is GrantKind.STORE_READ_WRITE:
                self.bucket.grant_read_write(oidc_role)
            elif grant.kind is GrantKind.KEY_ENCRYPT_DECRYPT:
                assert self.kms_key is not None
                self.kms_key.grant_encrypt_decrypt(oidc_role)
            elif grant.kind is GrantKind.MANAGED_POLICY:
                oidc_role.add_managed_policy(
                    iam.ManagedPolicy.from_aws_managed_policy_name(grant.target)
                )
            else:
                oidc_role.add_to_policy(
                    iam.PolicyStatement(
                        sid=grant.sid,
                        effect=iam.Effect.ALLOW,
                        actions=list(grant.actions),
                        resources=[grant.target],
                    )
                )
        return oidc_role

    def _arns(self) -> dict[str, str]:
        arns = {self.graph.store.logical_id: self.bucket.bucket_arn}
        if self.graph.key is not None:
            arns[self.graph.key.logical_id] = self.kms_key.key_arn
        if self.graph.role is not None:
            arns[self.graph.role.logical_id] = self.oidc_role.role_arn
        return arns

    def _create_output(self, output: NamedOutput) -> CfnOutput:
        if output.attribute is OutputAttribute.NAME:
            value = self.bucket.bucket_name
        else:
            value = self._arns()[output.source]
        return CfnOutput(
            self,
            output.logical_id,
            value=value,
            description=output.description,
            export_name=output.export_name,
        )


class SecureBucketStack(Stack):
    """Deployable unit wrapping a single ``SecureBucket``.

    At this level versioning and encryption default to on; the construct
    itself defaults both to off.
    """

    STACK_DEFAULTS: dict[str, bool] = {
        "enable_versioning": True,
        "enable_encryption": True,
    }

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        config: RawConfiguration | Mapping[str, Any],
        trust_anchor: TrustAnchor | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.secure_bucket = SecureBucket(
            self,
            "SecureBucket",
            config=apply_stack_defaults(config),
            trust_anchor=trust_anchor,
        )

    @property
    def graph(self) -> ResourceGraph:
        return self.secure_bucket.graph


def apply_stack_defaults(
    raw: RawConfiguration | Mapping[str, Any],
) -> RawConfiguration | Mapping[str, Any]:
    """Fill unspecified versioning/encryption flags with the stack defaults."""
    if isinstance(raw, RawConfiguration):
        updates = {
            field: default
            for field, default in SecureBucketStack.STACK_DEFAULTS.items()
            if getattr(raw, field) is None
        }
        return raw.model_copy(update=updates)

    merged = dict(raw)
    for field, default in SecureBucketStack.STACK_DEFAULTS.items():
        camel = _camel(field)
        if merged.get(field) is None and merged.get(camel) is None:
            merged.pop(camel, None)
            merged[field] = default
    return merged


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.capitalize() for p in rest)
