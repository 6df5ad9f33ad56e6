"""Integration tests — full construction passes for representative configs."""

from __future__ import annotations

from aws_cdk import App, Environment
from aws_cdk.assertions import Template

from securebucket.core.construct import SecureBucketStack
from securebucket.core.graph_builder import build_graph
from securebucket.core.guard import ensure_no_collisions, ensure_trust_anchor
from securebucket.core.hasher import graph_fingerprint
from securebucket.models.resources import EncryptionMode

ENV = Environment(account="123456789012", region="eu-central-1")


def _exports(template: Template) -> set[str]:
    return {o["Export"]["Name"] for o in template.find_outputs("*").values()}


class TestMinimalBucket:
    """acme / dev, nothing else enabled."""

    def test_store_only(self, make_bucket, template_of):
        bucket = make_bucket(environment="dev")
        graph = bucket.graph
        assert graph.store.name == "acme-secure-bucket-dev"
        assert graph.key is None
        assert graph.role is None
        assert graph.outputs.as_mapping() == {"acme-bucket-name-dev": "acme-secure-bucket-dev"}
        assert [n.logical_id for n in graph.nodes] == ["SecureBucket"]

        template = template_of(bucket)
        template.resource_count_is("AWS::S3::Bucket", 1)
        template.resource_count_is("AWS::KMS::Key", 0)
        assert _exports(template) == {"acme-bucket-name-dev"}


class TestEncryptedBucket:
    """acme / prod with encryption."""

    def test_key_managed_store(self, make_bucket, template_of):
        bucket = make_bucket(environment="prod", enable_encryption=True)
        graph = bucket.graph
        assert graph.key.alias == "alias/acme-bucket-key-prod"
        assert graph.store.encryption is EncryptionMode.KEY_MANAGED
        assert graph.store.encryption_key_ref == graph.key.logical_id

        template = template_of(bucket)
        template.resource_count_is("AWS::KMS::Key", 1)
        template.has_resource_properties(
            "AWS::KMS::Alias", {"AliasName": "alias/acme-bucket-key-prod"}
        )
        assert _exports(template) == {"acme-bucket-name-prod", "acme-kms-key-arn-prod"}


class TestBucketWithRole:
    """acme / dev with a single trusted repository."""

    def test_role_and_outputs(self, make_bucket, template_of):
        bucket = make_bucket(environment="dev", identity_repo="org/repo")
        graph = bucket.graph
        assert graph.role.name == "acme-github-oidc-role-dev"
        assert graph.role.subject_patterns == ["repo:org/repo:*"]
        assert graph.role.store_ref == graph.store.logical_id
        assert graph.role.key_ref is None

        template = template_of(bucket)
        template.has_resource_properties(
            "AWS::IAM::Role", {"RoleName": "acme-github-oidc-role-dev"}
        )
        assert _exports(template) == {"acme-bucket-name-dev", "acme-oidc-role-arn-dev"}


class TestDuplicateRepositories:
    """identityRepo org/a plus [org/b, org/a] keeps the duplicate."""

    def test_duplicate_pattern_preserved(self):
        graph = build_graph(
            {
                "projectId": "acme",
                "identityRepo": "org/a",
                "additionalIdentityRepos": ["org/b", "org/a"],
            }
        )
        assert graph.role.subject_patterns == [
            "repo:org/a:*",
            "repo:org/b:*",
            "repo:org/a:*",
        ]


class TestStackDeployment:
    """The deployable stack with its defaults and every output."""

    def test_full_stack(self):
        stack = SecureBucketStack(
            App(),
            "AcmeProd",
            config={
                "projectId": "acme",
                "environment": "prod",
                "identityRepo": "acme/infra",
            },
            env=ENV,
        )
        template = Template.from_stack(stack)
        template.resource_count_is("AWS::KMS::Key", 1)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "BucketName": "acme-secure-bucket-prod",
                "VersioningConfiguration": {"Status": "Enabled"},
            },
        )
        assert _exports(template) == {
            "acme-bucket-name-prod",
            "acme-oidc-role-arn-prod",
            "acme-kms-key-arn-prod",
        }


class TestRealizationFlow:
    """Construct, then run the guards an external deployer would run."""

    def test_full_flow(self, full_bucket):
        graph = full_bucket.graph
        ensure_no_collisions(graph, ["some-other-bucket"])
        ensure_trust_anchor(
            graph,
            ["arn:aws:iam::123456789012:oidc-provider/token.actions.githubusercontent.com"],
        )
        assert [n.logical_id for n in graph.nodes] == [
            "BucketEncryptionKey",
            "SecureBucket",
            "GitHubOIDCRole",
        ]
        assert graph.role.key_ref == "BucketEncryptionKey"
        assert graph_fingerprint(graph).startswith("sha256:")

    def test_reprovisioning_is_idempotent(self, make_bucket, template_of):
        kwargs = dict(enable_encryption=True, identity_repo="org/repo")
        first = make_bucket(**kwargs)
        second = make_bucket(**kwargs)
        assert first.graph == second.graph
        assert template_of(first).to_json() == template_of(second).to_json()
